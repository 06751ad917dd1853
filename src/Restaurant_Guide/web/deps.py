"""Dependency injection providers for FastAPI route handlers.

The context factory is registered on ``app.state`` during lifespan startup.
Route handlers declare a ``GuideContext`` parameter and receive a context
scoped to the request; it is closed when the request finishes, whether the
handler returned or raised.
"""

import logging
from collections.abc import AsyncGenerator
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Request

from Restaurant_Guide.data.context import ContextFactory, ContextOptions, DataContext
from Restaurant_Guide.data.guide import RestaurantGuideContext

logger = logging.getLogger(__name__)


def register_data_context(
    app: FastAPI,
    context_type: type[DataContext],
    options: ContextOptions,
) -> ContextFactory[Any]:
    """Register ``context_type`` as a request-scoped dependency of ``app``."""
    factory = ContextFactory(context_type, options)
    app.state.context_factory = factory
    logger.info(
        "Registered %s (%s provider)", context_type.__name__, options.kind.value
    )
    return factory


def get_context_factory(request: Request) -> ContextFactory[Any]:
    """Return the factory registered at startup."""
    factory: ContextFactory[Any] | None = getattr(request.app.state, "context_factory", None)
    if factory is None:
        msg = "No data context registered. Call register_data_context() at startup."
        raise RuntimeError(msg)
    return factory


async def get_context(
    factory: Annotated[ContextFactory[Any], Depends(get_context_factory)],
) -> AsyncGenerator[RestaurantGuideContext]:
    """Yield a request-scoped RestaurantGuideContext and ensure cleanup."""
    async with factory.create() as context:
        yield context


GuideContext = Annotated[RestaurantGuideContext, Depends(get_context)]
