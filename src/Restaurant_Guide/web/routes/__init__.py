"""FastAPI route modules for Restaurant Guide.

Re-exports all routers so the application factory can import them:
    from Restaurant_Guide.web.routes import cities_router, restaurants_router
"""

from Restaurant_Guide.web.routes.cities import router as cities_router
from Restaurant_Guide.web.routes.health import router as health_router
from Restaurant_Guide.web.routes.restaurants import router as restaurants_router

__all__ = [
    "cities_router",
    "health_router",
    "restaurants_router",
]
