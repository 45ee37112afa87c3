"""Centralised CORS configuration for the blog service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from blogposts.shared.config import Settings

# Development origins (dev environment only)
DEV_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:3000",
    "https://localhost:3000",
]


def get_allowed_origins(settings: Settings) -> list[str]:
    """List of allowed CORS origins for the configured environment."""
    origins = []

    if settings.frontend_url:
        origins.append(settings.frontend_url.rstrip("/"))

    if not settings.is_production:
        origins.extend(o for o in DEV_ORIGINS if o not in origins)

    return origins


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Add CORS middleware to a FastAPI app."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_allowed_origins(settings),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Error-ID"],
    )
