from typing import Optional

from sqlmodel import Field, SQLModel

from om_intel.core.config import DEFAULT_SESSION_TITLE
from om_intel.models.base import IDModel, TimestampModel


class ChatSession(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'chat_sessions'

    user_id: str = Field(index=True, foreign_key='users.id')
    title: str = DEFAULT_SESSION_TITLE
    document_id: Optional[str] = Field(default=None, index=True)
