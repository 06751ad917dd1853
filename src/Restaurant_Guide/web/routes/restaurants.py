"""Restaurant routes: CRUD over restaurants, optionally filtered by city."""

import logging

from fastapi import APIRouter, Response, status
from sqlmodel import col

from Restaurant_Guide.models.entities import Restaurant
from Restaurant_Guide.models.requests import RestaurantCreate, RestaurantUpdate
from Restaurant_Guide.web.deps import GuideContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/restaurants", tags=["restaurants"])


@router.get("")
async def list_restaurants(context: GuideContext, city_id: int | None = None) -> list[Restaurant]:
    """Return all restaurants, or only those of ``city_id`` when given."""
    if city_id is None:
        return await context.restaurants.to_list()
    return await context.restaurants.where(col(Restaurant.city_id) == city_id)


@router.get("/{restaurant_id}")
async def get_restaurant(restaurant_id: int, context: GuideContext) -> Restaurant:
    """Return one restaurant; 404 when it does not exist."""
    return await context.restaurants.single(col(Restaurant.id) == restaurant_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_restaurant(payload: RestaurantCreate, context: GuideContext) -> Restaurant:
    """Create a restaurant; 409 when the city does not exist."""
    restaurant = Restaurant(city_id=payload.city_id, name=payload.name)
    context.restaurants.add(restaurant)
    await context.save_changes()
    logger.info("Created restaurant id=%d in city id=%d", restaurant.id, restaurant.city_id)
    return restaurant


@router.patch("/{restaurant_id}")
async def rename_restaurant(
    restaurant_id: int, payload: RestaurantUpdate, context: GuideContext
) -> Restaurant:
    """Rename a restaurant loaded into the request's context."""
    restaurant = await context.restaurants.single(col(Restaurant.id) == restaurant_id)
    restaurant.name = payload.name
    await context.save_changes()
    logger.info("Renamed restaurant id=%d", restaurant_id)
    return restaurant


@router.delete("/{restaurant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_restaurant(restaurant_id: int, context: GuideContext) -> Response:
    """Delete a restaurant; 404 when it does not exist."""
    restaurant = await context.restaurants.single(col(Restaurant.id) == restaurant_id)
    await context.restaurants.remove(restaurant)
    await context.save_changes()
    logger.info("Deleted restaurant id=%d", restaurant_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
