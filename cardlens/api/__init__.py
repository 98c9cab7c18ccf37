from cardlens.api.health import router as health_router
from cardlens.api.identify import router as identify_router

__all__ = [
    "health_router",
    "identify_router",
]
