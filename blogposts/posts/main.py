"""
Blog Posts API

CRUD endpoints for blog posts backed by the document store.
"""
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from fastapi import APIRouter, Body, Depends, FastAPI, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.orm import Session

from blogposts.posts.gateway import PostGateway, PostNotFound
from blogposts.posts.schemas import PostCreate, PostResponse, PostUpdate
from blogposts.posts.validation import Invalid, PostValidationError, validate_payload
from blogposts.shared.config import Settings, get_settings
from blogposts.shared.cors import setup_cors
from blogposts.shared.database import Database, get_database, get_db
from blogposts.shared.errors import NOT_FOUND_MESSAGE, error_response, setup_error_handlers
from blogposts.shared.request_logging import setup_request_logging
from blogposts.shared.security_headers import setup_security_headers

logger = logging.getLogger(__name__)


def get_gateway(db: Session = Depends(get_db)) -> PostGateway:
    return PostGateway(db)


router = APIRouter(tags=["posts"])


# ──────────────────────────────────────────────────────────────────────────────
# Endpoints
# ──────────────────────────────────────────────────────────────────────────────


@router.get("/health")
def health(database: Database = Depends(get_database)):
    """Health check endpoint."""
    db_connected = database.is_connected()
    return {
        "status": "ok" if db_connected else "degraded",
        "service": "blog",
        "database": "connected" if db_connected else "disconnected",
    }


@router.get("/posts", response_model=list[PostResponse])
def list_posts(gateway: PostGateway = Depends(get_gateway)):
    """List every stored post."""
    return [post.serialize() for post in gateway.list_posts()]


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(post_id: str, gateway: PostGateway = Depends(get_gateway)):
    """Get a single post by id."""
    return gateway.get_post(post_id).serialize()


@router.post("/posts", response_model=PostResponse, status_code=201)
def create_post(
    body: Any = Body(None),
    gateway: PostGateway = Depends(get_gateway),
):
    """
    Create a new post.
    title, author and content must all be present in the body.
    """
    result = validate_payload(PostCreate, {} if body is None else body)
    if isinstance(result, Invalid):
        raise PostValidationError(result.first_message, plain_text=True)

    data = result.value
    author = data.author.model_dump(exclude_none=True) if data.author else {}
    post = gateway.create_post(
        title=data.title,
        author=author,
        content=data.content,
    )
    return post.serialize()


@router.put("/posts/{post_id}", status_code=204, response_class=Response)
def update_post(
    post_id: str,
    body: Any = Body(None),
    gateway: PostGateway = Depends(get_gateway),
):
    """Update the title, author and/or content of an existing post."""
    body_id = body.get("id") if isinstance(body, dict) else None
    if body_id != post_id:
        raise PostValidationError(
            f"Request path id ({post_id}) and request body id ({body_id}) must match"
        )

    result = validate_payload(PostUpdate, body)
    if isinstance(result, Invalid):
        raise PostValidationError(result.first_message)

    gateway.update_post(post_id, result.value.changes())
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/posts/{post_id}", status_code=204, response_class=Response)
def delete_post(post_id: str, gateway: PostGateway = Depends(get_gateway)):
    """Delete a post. Deleting an unknown id is not an error."""
    removed = gateway.delete_post(post_id)
    if removed:
        logger.info("Deleted blog post `%s`", post_id)
    else:
        logger.info("Delete requested for unknown blog post `%s`", post_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ──────────────────────────────────────────────────────────────────────────────
# App assembly
# ──────────────────────────────────────────────────────────────────────────────

def setup_post_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(PostValidationError)
    async def validation_exception_handler(request: Request, exc: PostValidationError):
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        if exc.plain_text:
            return PlainTextResponse(exc.message, status_code=status.HTTP_400_BAD_REQUEST)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": exc.message},
        )

    @app.exception_handler(PostNotFound)
    async def not_found_exception_handler(request: Request, exc: PostNotFound):
        logger.info("Blog post %s not found", exc.post_id)
        return error_response(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings
    database = Database(settings.database_url)
    # A store that cannot be reached aborts startup before the listener binds
    database.connect()
    app.state.database = database
    logger.info("Blog service started")
    try:
        yield
    finally:
        database.close()
        logger.info("Blog service stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the blog service. Nothing touches the store until startup."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Blog Service",
        version="1.0.0",
        description="CRUD API for blog posts",
        lifespan=lifespan,
    )
    app.state.settings = settings

    setup_cors(app, settings)
    setup_security_headers(app, enforce_hsts=settings.is_production)
    setup_request_logging(app)
    setup_error_handlers(app)
    setup_post_error_handlers(app)

    app.include_router(router)
    return app


def run() -> None:
    """Start the service with uvicorn using settings from the environment."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    run()
