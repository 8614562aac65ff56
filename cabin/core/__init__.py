"""
Core utilities shared across the ToDo Cabin backend.

This package hosts configuration, logging setup, password hashing, the auth
rate limiter and small date/time helpers. Services and routers depend on these
primitives instead of reading os.environ or formatting clocks themselves.
"""
