# Routers package
from . import auth_router
from . import analyze_router
from . import history_router
from . import gallery_router
from . import export_router

__all__ = [
    "auth_router",
    "analyze_router",
    "history_router",
    "gallery_router",
    "export_router",
]
