"""Entry point for the FastAPI app (``uvicorn blogapi.app_factory:app``)."""
from blogapi.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
