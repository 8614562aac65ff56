"""
FastAPI routers grouped by entity (auth, members, registry, todos, minute tracker).

Each module exposes an APIRouter included by cabin.app.create_app().
"""
