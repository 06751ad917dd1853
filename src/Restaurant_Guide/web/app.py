"""FastAPI app factory and startup registration of the data context."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from Restaurant_Guide.config import Settings, load_settings
from Restaurant_Guide.data.context import ContextOptions, initialize_database
from Restaurant_Guide.data.guide import RestaurantGuideContext
from Restaurant_Guide.logging_config import configure_logging
from Restaurant_Guide.web.deps import register_data_context
from Restaurant_Guide.web.middleware import RequestLoggingMiddleware, register_exception_handlers

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The lifespan registers the RestaurantGuideContext before any request is
    served and ensures the schema exists. A schema failure is logged and
    startup continues.
    """
    configure_logging()
    resolved = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        options = ContextOptions.from_connection_string(resolved.connection_string)
        factory = register_data_context(app, RestaurantGuideContext, options)
        app.state.schema_ready = await initialize_database(factory, logger)
        try:
            yield
        finally:
            await factory.dispose()
            logger.info("Data context provider disposed")

    app = FastAPI(title="Restaurant Guide", lifespan=lifespan)
    app.state.settings = resolved

    register_exception_handlers(app)
    app.add_middleware(RequestLoggingMiddleware)

    from Restaurant_Guide.web.routes import cities, health, restaurants

    app.include_router(cities.router)
    app.include_router(restaurants.router)
    app.include_router(health.router)

    logger.info("Restaurant Guide web app created")
    return app
