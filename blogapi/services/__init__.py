"""
High-level use cases for the blog API.

Each service module orchestrates the repository and adapters (storage,
sessions) to implement business rules: register, log in, publish a post,
toggle a reaction.

Routers (FastAPI endpoints) call these services instead of manipulating the
database or storage directly.
"""
