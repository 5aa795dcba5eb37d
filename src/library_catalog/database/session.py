"""
Database session management for the Library Catalog service.

Sessions are short-lived: the REST layer opens one per request and scripts
use ``DatabaseManager.session_scope()``, which commits or rolls back when the
block finishes.
"""

import logging
from collections.abc import Callable, Generator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from sqlalchemy import create_engine, event, make_url, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_config
from .schema import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_in_memory_sqlite(database_url: str) -> bool:
    """True for ``sqlite://`` and ``sqlite:///:memory:`` style URLs."""
    url = make_url(database_url)
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


class DatabaseManager:
    """
    Owns the engine, its connection pool and the session factory.

    SQLite URLs get foreign key enforcement, and in-memory SQLite gets a
    single shared connection; other databases get a regular pre-pinged pool.
    """

    def __init__(self, database_url: str | None = None):
        """
        Initialize the database manager.

        Args:
            database_url: SQLAlchemy database URL. If None, it is taken from
                the application configuration.
        """
        if database_url is None:
            config = get_config()
            if config.database_url:
                database_url = config.database_url
            else:
                db_path = config.database_path

                # Make relative paths relative to the working directory
                if not db_path.is_absolute():
                    db_path = Path.cwd() / db_path

                db_path.parent.mkdir(exist_ok=True, parents=True)

                database_url = f"sqlite:///{db_path}"
                logger.info("Using SQLite database at: %s", db_path)

        self.database_url = database_url
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        """Get or create the database engine."""
        if self._engine is None:
            if self.database_url.startswith("sqlite"):
                if is_in_memory_sqlite(self.database_url):
                    # The database lives only as long as its connection, so
                    # every session shares the one connection
                    self._engine = create_engine(
                        self.database_url,
                        poolclass=StaticPool,
                        connect_args={"check_same_thread": False},
                        echo=False,
                    )
                else:
                    # One connection per session; SQLite's file lock
                    # serializes writers
                    self._engine = create_engine(
                        self.database_url,
                        connect_args={"check_same_thread": False},
                        echo=False,
                    )

                # Foreign keys are off by default in SQLite
                @event.listens_for(self._engine, "connect")
                def set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ARG001
                    cursor = dbapi_connection.cursor()
                    cursor.execute("PRAGMA foreign_keys=ON")
                    cursor.close()
            else:
                self._engine = create_engine(
                    self.database_url,
                    pool_size=10,
                    max_overflow=20,
                    pool_pre_ping=True,
                    echo=False,
                )

            logger.info("Database engine created: %s", self._engine.url)

        return self._engine

    @property
    def session_factory(self) -> sessionmaker:
        """Get or create the session factory."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory

    def create_session(self) -> Session:
        """Create a new database session. The caller must close it."""
        return self.session_factory()

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope for database operations.

        ```python
        with db_manager.session_scope() as session:
            PublisherRepository(session).save(Publisher(name="Penguin"))
        ```

        Yields:
            Database session

        Raises:
            Any database errors are logged and re-raised
        """
        session = self.create_session()
        try:
            yield session
            session.commit()
            logger.debug("Database transaction committed successfully")
        except Exception:
            logger.exception("Database error, rolling back")
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self, drop_existing: bool = False) -> None:
        """
        Create the database schema.

        Args:
            drop_existing: If True, drop all tables before creating
        """
        engine = self.engine

        if drop_existing:
            logger.warning("Dropping all existing tables...")
            Base.metadata.drop_all(bind=engine)

        logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialization complete")

    def verify_connection(self) -> bool:
        """
        Verify the database connection is working.

        Returns:
            True if connection is successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection verified")
            return True
        except Exception:
            logger.exception("Database connection failed")
            return False

    def close(self) -> None:
        """Dispose the engine and its pool."""
        if self._engine:
            self._engine.dispose()
            logger.info("Database engine disposed")
        self._engine = None
        self._session_factory = None


_db_manager: DatabaseManager | None = None


def get_db_manager(database_url: str | None = None) -> DatabaseManager:
    """
    Get the global database manager instance.

    Args:
        database_url: Database URL (only used on first call)
    """
    global _db_manager  # noqa: PLW0603 - Singleton pattern for database manager

    if _db_manager is None:
        _db_manager = DatabaseManager(database_url)

    return _db_manager


def reset_db_manager() -> None:
    """Dispose and forget the global database manager."""
    global _db_manager  # noqa: PLW0603

    if _db_manager is not None:
        _db_manager.close()
    _db_manager = None


def run_query(session: Session, query_func: Callable[[Session], T], error_msg: str) -> T:
    """
    Execute a query, logging failures before they propagate.

    Args:
        session: The database session
        query_func: Function that performs the query
        error_msg: Message logged when the query fails

    Returns:
        Query result
    """
    try:
        return query_func(session)
    except Exception:
        logger.exception("%s", error_msg)
        raise


def commit_or_rollback(session: Session, operation: str) -> None:
    """
    Commit the session, rolling back and re-raising on failure.

    Args:
        session: The database session
        operation: Description of the operation (for the log message)
    """
    try:
        session.commit()
    except Exception:
        logger.exception("Database operation '%s' failed, rolling back", operation)
        session.rollback()
        raise
