"""Entity tables for the restaurant guide.

Table models do not validate on construction; the API payloads in
``models.requests`` validate input before an entity is built. A key of
``None`` means the storage engine has not assigned one yet.
"""

from sqlmodel import Field, Relationship, SQLModel


class City(SQLModel, table=True):
    """A place that owns restaurants, identified by an engine-assigned key."""

    __tablename__ = "cities"

    id: int | None = Field(default=None, primary_key=True)
    postal_code_prefix: int = Field(ge=0)


class Restaurant(SQLModel, table=True):
    """A restaurant belonging to exactly one City.

    ``city_id`` is the stored reference. ``city`` is a one-way navigation
    used to point a restaurant at a City that has not been saved yet; the
    key is copied into ``city_id`` when the context saves.
    """

    __tablename__ = "restaurants"

    id: int | None = Field(default=None, primary_key=True)
    city_id: int | None = Field(
        default=None,
        foreign_key="cities.id",
        nullable=False,
        index=True,
        ondelete="CASCADE",
    )
    name: str = Field(min_length=1, max_length=200)

    city: City | None = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
