from loguru import logger
from sqlmodel import SQLModel

from om_intel.core.config import settings
from om_intel.db.session import engine
from om_intel.models import (  # noqa: F401
    chat_message,
    chat_session,
    refresh_token,
    user,
)


def init_db(drop_all: bool = False) -> None:
    if drop_all:
        SQLModel.metadata.drop_all(engine)
    if (
        settings.DATABASE_URL.startswith('sqlite')
        or settings.ENV != 'production'
        or settings.AUTO_CREATE_TABLES
    ):
        SQLModel.metadata.create_all(engine)
        logger.info('db.tables_ready', tables=sorted(SQLModel.metadata.tables))
