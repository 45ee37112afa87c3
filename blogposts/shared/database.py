"""
Database configuration and session management

The Database object owns the SQLAlchemy engine for the lifetime of the
service. It is opened by the application lifespan before requests are
served, handed to endpoints through dependency injection, and disposed on
shutdown.
"""

import logging
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

logger = logging.getLogger(__name__)

# Base class for ORM models
Base = declarative_base()


class Database:
    """Engine and session factory for one document store."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None

    @property
    def safe_url(self) -> str:
        """Connection string with the password masked, for log lines."""
        return make_url(self.url).render_as_string(hide_password=True)

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    def connect(self) -> None:
        """
        Open the engine, verify connectivity and create missing tables.

        Raises whatever the driver raises when the store is unreachable, so a
        failed connect aborts application startup.
        """
        connect_args = {}
        if self.url.startswith("sqlite"):
            # Sessions are opened on FastAPI's worker threads
            connect_args["check_same_thread"] = False

        # Using NullPool for better compatibility with containerized environments
        engine = create_engine(
            self.url,
            poolclass=NullPool,
            echo=self.echo,
            connect_args=connect_args,
        )
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            Base.metadata.create_all(bind=engine)
        except Exception:
            engine.dispose()
            raise

        self._engine = engine
        self._sessionmaker = sessionmaker(
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
            bind=engine,
        )
        logger.info("Connected to database %s", self.safe_url)

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not connected")
        return self._sessionmaker()

    def is_connected(self) -> bool:
        """Round-trip a SELECT 1 on the open engine. False before connect() or after close()."""
        if self._engine is None:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.warning("Database connectivity check failed", exc_info=True)
            return False

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Disconnected from database %s", self.safe_url)
        self._engine = None
        self._sessionmaker = None


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    """
    Per-request session drawn from the Database on app.state.

    The session is closed once the response is sent; the engine stays open
    until the lifespan disposes it.
    """
    db = get_database(request).session()
    try:
        yield db
    finally:
        db.close()
