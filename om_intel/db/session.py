from contextlib import contextmanager
from typing import Iterator

from loguru import logger
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from om_intel.core.config import settings
from om_intel.core.errors import ApiError, ErrorCode


def build_engine(url: str) -> Engine:
    parsed = make_url(url)
    if parsed.drivername.startswith('sqlite'):
        kwargs: dict = {'connect_args': {'check_same_thread': False}}
        # In-memory databases only live as long as their connection.
        if parsed.database in (None, '', ':memory:'):
            kwargs['poolclass'] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)


def get_session():
    with Session(engine) as session:
        yield session


@contextmanager
def database_errors(session: Session, error: str) -> Iterator[None]:
    """Roll back and re-raise persistence failures as DATABASE_ERROR."""
    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.opt(exception=exc).error('db.error', error=error)
        raise ApiError(ErrorCode.DATABASE_ERROR, message=str(exc) or exc.__class__.__name__, error=error) from exc
