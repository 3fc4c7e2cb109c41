"""
FastAPI routers grouped by page (registration/logout, navigation pages).

Each module exposes an APIRouter included by ``togather.app.create_app``.
"""
