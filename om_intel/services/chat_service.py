from collections import defaultdict
from typing import Any, Optional

from loguru import logger
from sqlmodel import Session, col, select

from om_intel.core.config import settings
from om_intel.models.base import utc_now
from om_intel.models.chat_message import ChatMessage
from om_intel.models.chat_session import ChatSession
from om_intel.models.enums import MessageRole


def _title_or_default(title: Optional[str]) -> str:
    return title or settings.DEFAULT_SESSION_TITLE


def create_session(
    session: Session,
    user_id: str,
    title: Optional[str] = None,
    document_id: Optional[str] = None,
) -> ChatSession:
    record = ChatSession(
        user_id=user_id,
        title=_title_or_default(title),
        document_id=document_id or None,
    )
    session.add(record)
    session.commit()
    session.refresh(record)
    logger.info('chat_sessions.created', session_id=record.id, user_id=user_id, document_id=record.document_id)
    return record


def list_sessions(session: Session, user_id: str) -> list[ChatSession]:
    statement = (
        select(ChatSession)
        .where(ChatSession.user_id == user_id)
        .order_by(ChatSession.updated_at.desc())
    )
    return list(session.exec(statement).all())


def messages_by_session(session: Session, session_ids: list[str]) -> dict[str, list[ChatMessage]]:
    """Messages for each session id, oldest first."""
    grouped: dict[str, list[ChatMessage]] = defaultdict(list)
    if not session_ids:
        return grouped
    statement = (
        select(ChatMessage)
        .where(col(ChatMessage.chat_session_id).in_(session_ids))
        .order_by(ChatMessage.created_at.asc())
    )
    for message in session.exec(statement).all():
        grouped[message.chat_session_id].append(message)
    return grouped


def list_sessions_with_messages(
    session: Session,
    user_id: str,
) -> list[tuple[ChatSession, list[ChatMessage]]]:
    records = list_sessions(session, user_id)
    grouped = messages_by_session(session, [record.id for record in records])
    return [(record, grouped.get(record.id, [])) for record in records]


def get_user_session(session: Session, session_id: str, user_id: str) -> Optional[ChatSession]:
    return session.exec(
        select(ChatSession).where(
            (ChatSession.id == session_id) & (ChatSession.user_id == user_id)
        )
    ).first()


def update_session_title(session: Session, record: ChatSession, title: Optional[str]) -> ChatSession:
    record.title = _title_or_default(title)
    session.add(record)
    session.commit()
    session.refresh(record)
    logger.info('chat_sessions.renamed', session_id=record.id)
    return record


def delete_session(session: Session, record: ChatSession) -> None:
    session_id = record.id
    messages = session.exec(select(ChatMessage).where(ChatMessage.chat_session_id == session_id)).all()
    for message in messages:
        session.delete(message)
    session.delete(record)
    session.commit()
    logger.info('chat_sessions.deleted', session_id=session_id)


def create_message(
    session: Session,
    record: ChatSession,
    role: MessageRole,
    content: str,
    metadata: Optional[dict[str, Any]] = None,
) -> ChatMessage:
    message = ChatMessage(
        chat_session_id=record.id,
        role=role,
        content=content,
        meta=metadata or {},
    )
    record.updated_at = utc_now()
    session.add(message)
    session.add(record)
    session.commit()
    session.refresh(message)
    logger.info('messages.created', session_id=record.id, message_id=message.id, role=message.role.value)
    return message
