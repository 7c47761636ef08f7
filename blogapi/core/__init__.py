"""
Core utilities shared across the blog API.

This package hosts configuration (env vars, storage backend selection),
logging setup, password hashing, rate limit helpers and URL helpers.
Routers and services depend on these primitives instead of reading the
environment themselves.
"""
