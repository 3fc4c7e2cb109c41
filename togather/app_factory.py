"""ASGI entry point: ``uvicorn togather.app_factory:app``."""
from togather.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
