"""
High-level use cases for the ToDo Cabin backend.

Each service module orchestrates the key/value store to implement the rules of
one entity (members, registry, todos, minute tracker, auth). Routers call these
services instead of manipulating the store or sessions directly.
"""
