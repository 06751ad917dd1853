"""SQLModel entity tables and pydantic payload models.

Re-exports all public models so consumers can import directly:
    from Restaurant_Guide.models import City, Restaurant
"""

from Restaurant_Guide.models.entities import City, Restaurant
from Restaurant_Guide.models.health import HealthStatus
from Restaurant_Guide.models.requests import CityCreate, RestaurantCreate, RestaurantUpdate

__all__ = [
    # Entities
    "City",
    "Restaurant",
    # Payloads
    "CityCreate",
    "RestaurantCreate",
    "RestaurantUpdate",
    # Health
    "HealthStatus",
]
