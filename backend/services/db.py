import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from services.errors import Unavailable

logger = logging.getLogger("mingle.db")


@contextmanager
def session_scope(engine: Engine) -> Generator[Session, None, None]:
    """Short-lived session; driver failures surface as Unavailable"""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
    except OperationalError as e:
        logger.exception(f"Database error, rolling back - {e}")
        session.rollback()
        raise Unavailable("Storage is unavailable, try again later.") from e
    finally:
        session.close()
