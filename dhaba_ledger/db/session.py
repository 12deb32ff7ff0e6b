"""
Database lifecycle: one engine and session factory per process, opened at
startup and disposed at shutdown.
"""
import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from dhaba_ledger.db.base import Base

logger = logging.getLogger(__name__)


class Database:
    """Owns the SQLAlchemy engine and hands out sessions."""

    def __init__(self, url: str, echo: bool = False, pool_timeout: int = 30):
        """
        Args:
            url: SQLAlchemy database URL
            echo: Log every SQL statement
            pool_timeout: Seconds to wait for a pooled connection
        """
        self.url = url
        self.echo = echo
        self.pool_timeout = pool_timeout
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open")
        return self._engine

    def open(self) -> None:
        """Create the engine and session factory."""
        if self._engine is not None:
            return

        kwargs = {"echo": self.echo, "future": True}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            # In-memory databases live only as long as their connection
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True
            kwargs["pool_timeout"] = self.pool_timeout

        self._engine = create_engine(self.url, **kwargs)
        self._session_factory = sessionmaker(bind=self._engine, autoflush=False)
        logger.info(f"Database engine created for {self._engine.url.render_as_string(hide_password=True)}")

    def create_all(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not open")
        return self._session_factory()

    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {str(e)}")
            return False

    def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None
