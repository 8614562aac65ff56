import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cabin.container import build_container
from cabin.core.config import Settings, get_settings
from cabin.core.logging_setup import setup_logging
from cabin.domain.schema import SchemaError
from cabin.repositories import KeyValueStore, StorageError, get_store
from cabin.routers import auth as auth_router
from cabin.routers import members as members_router
from cabin.routers import minute_tracker as minute_tracker_router
from cabin.routers import pages as pages_router
from cabin.routers import registry as registry_router
from cabin.routers import todos as todos_router

logger = logging.getLogger(__name__)

DEV_ORIGINS = {
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}


def create_app(settings: Settings | None = None, store: KeyValueStore | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    if store is None:
        store = get_store(settings)
        if settings.storage_backend == "sql":
            from cabin.db.create_tables import create_all

            create_all()

    app = FastAPI(title="ToDo Cabin API")
    app.state.container = build_container(store)

    if settings.app_env != "prod":
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(DEV_ORIGINS),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.exception("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse({"detail": "Something went wrong. Please try again."}, status_code=503)

    @app.exception_handler(SchemaError)
    async def schema_error_handler(request: Request, exc: SchemaError):
        logger.warning("Rejected malformed value on %s: %s", request.url.path, exc)
        return JSONResponse({"errors": [str(exc)]}, status_code=400)

    app.include_router(pages_router.router)
    app.include_router(auth_router.router)
    app.include_router(members_router.router)
    app.include_router(registry_router.router)
    app.include_router(todos_router.router)
    app.include_router(minute_tracker_router.router)
    return app


app = create_app()
