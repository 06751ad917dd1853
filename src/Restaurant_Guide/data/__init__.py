"""Persistence layer for Restaurant Guide.

Re-exports the main public API: DataContext and its factory for unit-of-work
management, and the guide's concrete context. Query criteria are written
with ``sqlmodel.col``, e.g. ``col(Restaurant.city_id) == city.id``.
"""

from Restaurant_Guide.data.context import (
    ContextFactory,
    ContextOptions,
    DataContext,
    EntitySet,
    entity_set,
    initialize_database,
)
from Restaurant_Guide.data.guide import RestaurantGuideContext

__all__ = [
    "ContextFactory",
    "ContextOptions",
    "DataContext",
    "EntitySet",
    "RestaurantGuideContext",
    "entity_set",
    "initialize_database",
]
