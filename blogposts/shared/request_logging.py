"""Access log middleware, one line per request."""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import Response

logger = logging.getLogger("blogposts.access")


def setup_request_logging(app: FastAPI) -> None:
    @app.middleware("http")
    async def log_request(request: Request, call_next) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        client = request.client.host if request.client else "-"
        logger.info(
            '%s "%s %s" %s %.1fms',
            client,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response
