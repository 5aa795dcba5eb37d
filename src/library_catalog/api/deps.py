"""FastAPI dependencies."""

from collections.abc import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from ..database.session import DatabaseManager


def get_database(request: Request) -> DatabaseManager:
    return request.app.state.db_manager


def get_session(request: Request) -> Generator[Session, None, None]:
    """
    One session per request.

    Repositories commit their own writes; anything left uncommitted when the
    request fails is rolled back.
    """
    session = get_database(request).create_session()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
