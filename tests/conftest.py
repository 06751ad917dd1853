"""Shared test fixtures for the Restaurant Guide test suite.

Every test gets its own named in-memory database so state never leaks
between tests, plus a ready-made sample city.
"""

import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from Restaurant_Guide.data.context import ContextFactory, ContextOptions
from Restaurant_Guide.data.guide import RestaurantGuideContext
from Restaurant_Guide.models.entities import City


@pytest.fixture()
def memory_connection_string() -> str:
    """A connection string naming a database no other test uses."""
    return f"memory://test_{uuid.uuid4().hex}"


@pytest_asyncio.fixture()
async def factory(
    memory_connection_string: str,
) -> AsyncGenerator[ContextFactory[RestaurantGuideContext]]:
    """Context factory over a fresh in-memory database, disposed after the test."""
    guide_factory = ContextFactory(
        RestaurantGuideContext, ContextOptions.from_connection_string(memory_connection_string)
    )
    yield guide_factory
    await guide_factory.dispose()


@pytest_asyncio.fixture()
async def context(
    factory: ContextFactory[RestaurantGuideContext],
) -> AsyncGenerator[RestaurantGuideContext]:
    """An open context with the schema already created."""
    async with factory.create() as guide_context:
        await guide_context.ensure_created()
        yield guide_context


@pytest.fixture()
def sample_city() -> City:
    """An unsaved city with the example postal prefix."""
    return City(postal_code_prefix=21)
