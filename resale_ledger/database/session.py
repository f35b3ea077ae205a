import logging
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from resale_ledger.core.errors import QueryError
from resale_ledger.database.engine import get_engine

logger = logging.getLogger(__name__)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


@lru_cache
def get_session_factory() -> sessionmaker:
    return build_session_factory(get_engine())


def get_db():
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def guarded(db: Session, action: str):
    """Roll back and re-raise SQLAlchemy failures as QueryError."""
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Database call failed while trying to %s", action)
        raise QueryError(action, str(exc)) from exc
