"""City routes: list, fetch, create, and the restaurants a city owns."""

import logging

from fastapi import APIRouter, status
from sqlmodel import col

from Restaurant_Guide.models.entities import City, Restaurant
from Restaurant_Guide.models.requests import CityCreate
from Restaurant_Guide.web.deps import GuideContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cities", tags=["cities"])


@router.get("")
async def list_cities(context: GuideContext) -> list[City]:
    """Return every city."""
    return await context.cities.to_list()


@router.get("/{city_id}")
async def get_city(city_id: int, context: GuideContext) -> City:
    """Return one city; 404 when it does not exist."""
    return await context.cities.single(col(City.id) == city_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_city(payload: CityCreate, context: GuideContext) -> City:
    """Create a city and return it with its assigned id."""
    city = City(postal_code_prefix=payload.postal_code_prefix)
    context.cities.add(city)
    await context.save_changes()
    logger.info("Created city id=%d", city.id)
    return city


@router.get("/{city_id}/restaurants")
async def list_city_restaurants(city_id: int, context: GuideContext) -> list[Restaurant]:
    """Return the restaurants of one city; 404 when the city does not exist."""
    city = await context.cities.single(col(City.id) == city_id)
    return await context.restaurants.where(col(Restaurant.city_id) == city.id)
