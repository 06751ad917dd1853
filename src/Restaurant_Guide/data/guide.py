"""The restaurant guide's data context."""

from sqlalchemy import CheckConstraint, MetaData

from Restaurant_Guide.data.context import DataContext, entity_set
from Restaurant_Guide.models.entities import City, Restaurant


class RestaurantGuideContext(DataContext):
    """Cities and the restaurants they own."""

    cities = entity_set(City)
    restaurants = entity_set(Restaurant)

    def on_model_creating(self, metadata: MetaData) -> None:
        metadata.tables["cities"].append_constraint(
            CheckConstraint("postal_code_prefix >= 0", name="ck_cities_postal_code_prefix")
        )
        metadata.tables["restaurants"].append_constraint(
            CheckConstraint("length(name) BETWEEN 1 AND 200", name="ck_restaurants_name_length")
        )
