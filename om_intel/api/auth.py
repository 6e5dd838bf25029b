from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from om_intel.core.errors import ApiError, ErrorCode
from om_intel.db.session import get_session
from om_intel.schemas.auth import LoginRequest, LogoutRequest, RefreshRequest, RegisterRequest, TokenResponse
from om_intel.schemas.user import UserOut
from om_intel.services.auth_service import (
    authenticate_user,
    create_user,
    issue_tokens,
    revoke_refresh_token,
    validate_refresh_token,
)

router = APIRouter(prefix='/auth', tags=['auth'])


@router.post('/register', response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, session: Session = Depends(get_session)) -> UserOut:
    user = create_user(session, payload.email, payload.password)
    return UserOut(id=user.id, email=user.email, is_active=user.is_active)


@router.post('/login', response_model=TokenResponse)
def login(payload: LoginRequest, session: Session = Depends(get_session)) -> TokenResponse:
    user = authenticate_user(session, payload.email, payload.password)
    if not user:
        raise ApiError(ErrorCode.INVALID_CREDENTIALS)
    access_token, refresh_token = issue_tokens(session, user.id)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.post('/refresh', response_model=TokenResponse)
def refresh(payload: RefreshRequest, session: Session = Depends(get_session)) -> TokenResponse:
    user_id = validate_refresh_token(session, payload.refresh_token)
    revoke_refresh_token(session, payload.refresh_token)
    access_token, refresh_token = issue_tokens(session, user_id)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.post('/logout')
def logout(payload: LogoutRequest, session: Session = Depends(get_session)) -> dict:
    revoke_refresh_token(session, payload.refresh_token)
    return {'status': 'ok'}
