from pokebinder.api.binders import router as binders_router
from pokebinder.api.health import router as health_router
from pokebinder.api.static_binders import router as static_binders_router

__all__ = [
    "binders_router",
    "health_router",
    "static_binders_router",
]
