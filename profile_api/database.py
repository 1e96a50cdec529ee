import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

logger = logging.getLogger(__name__)


class Database:
    """Process-wide storage client: one engine, one session per request."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        engine_kwargs = {}

        if url.startswith("sqlite"):
            # SQLite specific connect args
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # In-memory databases live on a single connection
                engine_kwargs["poolclass"] = StaticPool
        else:
            # Better resiliency for managed servers
            engine_kwargs.update({
                "pool_pre_ping": True,
                "pool_recycle": 300,
                "pool_size": 5,
                "max_overflow": 10,
            })

        self.engine = create_engine(url, echo=echo, **engine_kwargs)

    def connect(self) -> None:
        """Check connectivity and make sure the users table exists.

        Raises whatever the driver raises; callers treat that as fatal.
        """
        # Import registers the table on SQLModel.metadata
        from .db.models import User  # noqa: F401

        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        SQLModel.metadata.create_all(self.engine)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    def session(self) -> Iterator[Session]:
        with Session(self.engine) as session:
            yield session

    def dispose(self) -> None:
        self.engine.dispose()


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_session(request: Request) -> Iterator[Session]:
    yield from get_database(request).session()
