from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from mt5platform.app import App
from mt5platform.config import Config
from mt5platform.errors import StoreUnavailableError, UserError
from mt5platform.web.error_handlers import (
    general_exception_handler,
    request_validation_handler,
    store_unavailable_handler,
    user_error_handler,
)
from mt5platform.web.openapi import set_custom_openapi
from mt5platform.web.routers import accounts_router, auth_router, health_router, users_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="MT5 Platform API",
        lifespan=lifespan,
    )
    # Available before lifespan runs so handlers can always resolve the facade
    app.state.app = app_instance

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(health_router, prefix="/api")
    app.include_router(auth_router, prefix="/api")
    app.include_router(accounts_router, prefix="/api")
    app.include_router(users_router, prefix="/api")

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StoreUnavailableError, store_unavailable_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
