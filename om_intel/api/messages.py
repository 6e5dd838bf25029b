from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from om_intel.core.errors import ApiError, ErrorCode
from om_intel.db.session import database_errors, get_session
from om_intel.schemas.chat import MessageCreate, MessageOut, MessageResponse
from om_intel.services.auth_service import AuthenticatedUser, get_current_user
from om_intel.services.chat_service import create_message, get_user_session

router = APIRouter(prefix='/messages', tags=['messages'])


@router.post('', response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_chat_message(
    payload: MessageCreate,
    session: Session = Depends(get_session),
    user: AuthenticatedUser = Depends(get_current_user),
) -> MessageResponse:
    with database_errors(session, 'Failed to save message'):
        record = get_user_session(session, payload.chat_session_id, user.id)
        if not record:
            raise ApiError(ErrorCode.SESSION_NOT_FOUND)
        message = create_message(session, record, payload.role, payload.content, payload.metadata)
    return MessageResponse(
        message=MessageOut(
            id=message.id,
            chat_session_id=message.chat_session_id,
            role=message.role,
            content=message.content,
            metadata=message.meta or {},
            created_at=message.created_at,
        )
    )
