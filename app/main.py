"""FastAPI application for the AgriTrack policy service.

Wiring only: lifespan, exception handlers, CORS and the v1 router. Policy
decisions live in app.application.services.

Settings are read inside create_app() so tests can set the environment
before the first import.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import api_router
from app.core.config import Settings, get_settings
from app.core.exception_handlers import register_exception_handlers
from app.core.lifespan import create_lifespan

OPENAPI_TAGS = [
    {"name": "health", "description": "Liveness and database readiness probes."},
    {
        "name": "assignments",
        "description": "Conseiller to site assignments (superadmin and admin only).",
    },
]


def _origins(settings: Settings) -> list[str]:
    return [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]


def create_app() -> FastAPI:
    """Build the application from the current settings."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        openapi_tags=OPENAPI_TAGS,
        lifespan=create_lifespan,
    )
    register_exception_handlers(app)
    # Credentials are allowed because the token may travel in a cookie.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
    )
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
