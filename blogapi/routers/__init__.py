"""
FastAPI routers grouped by domain (auth, users, blogs, uploads).

Each module exposes an APIRouter that app.py includes.
"""
