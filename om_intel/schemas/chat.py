from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from om_intel.models.enums import MessageRole


class ChatSessionCreate(BaseModel):
    title: Optional[str] = None
    document_id: Optional[str] = None


class ChatSessionUpdate(BaseModel):
    title: Optional[str] = None


class SessionMessageOut(BaseModel):
    id: str
    role: MessageRole
    content: str
    created_at: datetime


class SessionMessageDetailOut(SessionMessageOut):
    metadata: dict[str, Any] = {}


class ChatSessionOut(BaseModel):
    id: str
    user_id: str
    title: str
    document_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ChatSessionWithMessagesOut(ChatSessionOut):
    messages: list[SessionMessageOut] = []


class ChatSessionDetailOut(ChatSessionOut):
    messages: list[SessionMessageDetailOut] = []


class ChatSessionListResponse(BaseModel):
    sessions: list[ChatSessionWithMessagesOut]


class ChatSessionResponse(BaseModel):
    session: ChatSessionOut


class ChatSessionDetailResponse(BaseModel):
    session: ChatSessionDetailOut


class DeleteResponse(BaseModel):
    success: bool = True


class MessageCreate(BaseModel):
    chat_session_id: str = Field(min_length=1)
    role: MessageRole
    content: str = Field(min_length=1)
    metadata: dict[str, Any] = {}


class MessageOut(BaseModel):
    id: str
    chat_session_id: str
    role: MessageRole
    content: str
    metadata: dict[str, Any] = {}
    created_at: datetime


class MessageResponse(BaseModel):
    message: MessageOut
