"""Security headers for the JSON API."""

from fastapi import FastAPI, Request
from fastapi.responses import Response

# JSON only, nothing to load or frame
DEFAULT_CSP = "default-src 'none'; frame-ancestors 'none'"


def setup_security_headers(app: FastAPI, enforce_hsts: bool = False) -> None:
    """Add CSP, nosniff, anti-clickjacking and cache headers to every response."""

    @app.middleware("http")
    async def add_security_headers(request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers.setdefault("Content-Security-Policy", DEFAULT_CSP)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Cache-Control",
            "no-cache, no-store, must-revalidate",
        )
        if enforce_hsts:
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response
