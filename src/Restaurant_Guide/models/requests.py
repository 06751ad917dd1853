"""Request payloads accepted by the HTTP API."""

from pydantic import BaseModel, ConfigDict, Field


class CityCreate(BaseModel):
    """Payload for creating a City."""

    model_config = ConfigDict(frozen=True)

    postal_code_prefix: int = Field(ge=0)


class RestaurantCreate(BaseModel):
    """Payload for creating a Restaurant in an existing City."""

    model_config = ConfigDict(frozen=True)

    city_id: int = Field(gt=0)
    name: str = Field(min_length=1, max_length=200)


class RestaurantUpdate(BaseModel):
    """Payload for renaming a Restaurant."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=200)
