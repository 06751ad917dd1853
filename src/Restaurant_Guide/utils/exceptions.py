"""Custom exception hierarchy for the Restaurant Guide data layer.

All domain-specific exceptions inherit from DataAccessError, which carries
the name of the entity type involved in the failure.
"""


class DataAccessError(Exception):
    """Base exception for all data-access failures.

    Attributes:
        entity: Name of the entity type involved (e.g., "City"), if any.
    """

    def __init__(self, message: str, *, entity: str | None = None) -> None:
        self.entity = entity
        super().__init__(message)


class EntityNotFoundError(DataAccessError):
    """Raised when a query expected exactly one row and matched none."""


class MultipleEntitiesFoundError(DataAccessError):
    """Raised when a query expected exactly one row and matched several."""


class ReferentialIntegrityError(DataAccessError):
    """Raised when the storage engine rejects a write on a constraint."""


class UnsupportedProviderError(DataAccessError):
    """Raised when a connection string names no known storage provider."""
