from typing import Optional

from fastapi import APIRouter, Body, Depends, status
from sqlmodel import Session

from om_intel.core.errors import ApiError, ErrorCode
from om_intel.db.session import database_errors, get_session
from om_intel.models.chat_message import ChatMessage
from om_intel.models.chat_session import ChatSession
from om_intel.schemas.chat import (
    ChatSessionCreate,
    ChatSessionDetailOut,
    ChatSessionDetailResponse,
    ChatSessionListResponse,
    ChatSessionOut,
    ChatSessionResponse,
    ChatSessionUpdate,
    ChatSessionWithMessagesOut,
    DeleteResponse,
    SessionMessageDetailOut,
    SessionMessageOut,
)
from om_intel.services.auth_service import AuthenticatedUser, get_current_user
from om_intel.services.chat_service import (
    create_session,
    delete_session,
    get_user_session,
    list_sessions_with_messages,
    messages_by_session,
    update_session_title,
)

router = APIRouter(prefix='/chat-sessions', tags=['chat-sessions'])


def _session_fields(record: ChatSession) -> dict:
    return {
        'id': record.id,
        'user_id': record.user_id,
        'title': record.title,
        'document_id': record.document_id,
        'created_at': record.created_at,
        'updated_at': record.updated_at,
    }


def _message_out(message: ChatMessage) -> SessionMessageOut:
    return SessionMessageOut(
        id=message.id,
        role=message.role,
        content=message.content,
        created_at=message.created_at,
    )


def _ensure_session(session: Session, session_id: str, user: AuthenticatedUser) -> ChatSession:
    with database_errors(session, 'Failed to fetch chat session'):
        record = get_user_session(session, session_id, user.id)
    if not record:
        raise ApiError(ErrorCode.SESSION_NOT_FOUND)
    return record


@router.get('', response_model=ChatSessionListResponse)
def list_chat_sessions(
    session: Session = Depends(get_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> ChatSessionListResponse:
    with database_errors(session, 'Failed to fetch chat sessions'):
        rows = list_sessions_with_messages(session, user.id)
    return ChatSessionListResponse(
        sessions=[
            ChatSessionWithMessagesOut(
                **_session_fields(record),
                messages=[_message_out(message) for message in messages],
            )
            for record, messages in rows
        ]
    )


@router.post('', response_model=ChatSessionResponse, status_code=status.HTTP_201_CREATED)
def create_chat_session(
    payload: Optional[ChatSessionCreate] = Body(default=None),
    session: Session = Depends(get_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> ChatSessionResponse:
    payload = payload or ChatSessionCreate()
    with database_errors(session, 'Failed to create chat session'):
        record = create_session(session, user.id, payload.title, payload.document_id)
    return ChatSessionResponse(session=ChatSessionOut(**_session_fields(record)))


@router.get('/{session_id}', response_model=ChatSessionDetailResponse)
def get_chat_session(
    session_id: str,
    session: Session = Depends(get_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> ChatSessionDetailResponse:
    record = _ensure_session(session, session_id, user)
    with database_errors(session, 'Failed to fetch chat session'):
        messages = messages_by_session(session, [record.id]).get(record.id, [])
    return ChatSessionDetailResponse(
        session=ChatSessionDetailOut(
            **_session_fields(record),
            messages=[
                SessionMessageDetailOut(
                    id=message.id,
                    role=message.role,
                    content=message.content,
                    metadata=message.meta or {},
                    created_at=message.created_at,
                )
                for message in messages
            ],
        )
    )


@router.put('/{session_id}', response_model=ChatSessionResponse)
def update_chat_session(
    session_id: str,
    payload: ChatSessionUpdate,
    session: Session = Depends(get_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> ChatSessionResponse:
    record = _ensure_session(session, session_id, user)
    with database_errors(session, 'Failed to update chat session'):
        record = update_session_title(session, record, payload.title)
    return ChatSessionResponse(session=ChatSessionOut(**_session_fields(record)))


@router.delete('/{session_id}', response_model=DeleteResponse)
def delete_chat_session(
    session_id: str,
    session: Session = Depends(get_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> DeleteResponse:
    record = _ensure_session(session, session_id, user)
    with database_errors(session, 'Failed to delete chat session'):
        delete_session(session, record)
    return DeleteResponse(success=True)
