from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from photogallery.app import App
from photogallery.config import Config
from photogallery.errors import IdentityProviderError, UserError
from photogallery.web.error_handlers import general_exception_handler, identity_provider_error_handler, user_error_handler
from photogallery.web.openapi import set_custom_openapi
from photogallery.web.routers import (
    auth_router,
    comments_router,
    likes_router,
    photos_api_router,
    photos_router,
    upload_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(
        title="Photo Gallery API",
        lifespan=lifespan,
    )
    app.state.app = app_instance
    app.state.config = config

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    app.include_router(auth_router, prefix="/api")
    app.include_router(likes_router, prefix="/api")
    app.include_router(comments_router, prefix="/api")
    app.include_router(upload_router, prefix="/api")
    app.include_router(photos_api_router, prefix="/api")
    app.include_router(photos_router)

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(IdentityProviderError, identity_provider_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app)

    return app
