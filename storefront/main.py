# storefront/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from . import __version__, auth, cart, shop
from .config import Settings, get_settings
from .database import create_engine, create_schema, create_session_maker
from .errors import register_error_handlers
from .identity import IdentityService

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    engine = create_engine(settings)
    app.state.engine = engine
    app.state.session_maker = create_session_maker(engine)
    app.state.identity = IdentityService.from_settings(settings)

    if settings.create_schema:
        await create_schema(engine)
    logger.info("%s starting up (database: %s)", settings.app_name, engine.url.render_as_string(hide_password=True))
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("%s shutting down", settings.app_name)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="API for registration, login, product catalog and shopping carts",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ✅ CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # ✅ Routers
    app.include_router(auth.router)
    app.include_router(shop.router)
    app.include_router(cart.router)

    @app.get("/")
    async def root():
        return {"message": f"{settings.app_name} API is running"}

    # OpenAPI with the bearer scheme so /docs shows Authorize
    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        schema.setdefault("components", {}).setdefault("securitySchemes", {})
        schema["components"]["securitySchemes"]["OAuth2PasswordBearer"] = {
            "type": "oauth2",
            "flows": {"password": {"tokenUrl": "/api/users/login", "scopes": {}}}
        }
        schema["security"] = [{"OAuth2PasswordBearer": []}]
        app.openapi_schema = schema
        return app.openapi_schema

    app.openapi = custom_openapi
    return app


if __name__ == "__main__":
    uvicorn.run("storefront.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
