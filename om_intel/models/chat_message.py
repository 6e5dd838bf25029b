from typing import Any

from sqlalchemy import JSON, Column, Text
from sqlmodel import Field, SQLModel

from om_intel.models.base import CreatedAtModel, IDModel
from om_intel.models.enums import MessageRole, enum_column


class ChatMessage(IDModel, CreatedAtModel, SQLModel, table=True):
    __tablename__ = 'messages'

    chat_session_id: str = Field(index=True, foreign_key='chat_sessions.id')
    role: MessageRole = Field(sa_column=enum_column(MessageRole, 'message_role'))
    content: str = Field(sa_column=Column(Text, nullable=False))
    # "metadata" is reserved on declarative models.
    meta: dict[str, Any] = Field(default_factory=dict, sa_column=Column('metadata', JSON, nullable=False))
