from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from loguru import logger
from passlib.context import CryptContext
from sqlmodel import Session, select

from om_intel.core.config import settings
from om_intel.core.errors import ApiError, ErrorCode
from om_intel.db.session import database_errors, get_session
from om_intel.models.refresh_token import RefreshToken
from om_intel.models.user import User

pwd_context = CryptContext(schemes=['bcrypt'], deprecated='auto')
security = HTTPBearer(auto_error=False)

TOKEN_COOKIES = ('sb-access-token', 'supabase-access-token', 'sb.access-token')


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: str


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)


def _create_token(subject: str, token_type: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        'sub': subject,
        'type': token_type,
        'iat': now,
        'exp': now + expires_delta,
        'jti': uuid4().hex,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _decode_token(token: str, token_type: str) -> str:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise ApiError(ErrorCode.INVALID_TOKEN, message=str(exc)) from exc
    if payload.get('type') != token_type:
        raise ApiError(ErrorCode.INVALID_TOKEN, message='Invalid token type')
    subject = payload.get('sub')
    if not subject:
        raise ApiError(ErrorCode.INVALID_TOKEN, message='Token has no subject')
    return subject


def _ensure_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def create_access_token(user_id: str) -> str:
    return _create_token(
        user_id,
        'access',
        timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: str) -> tuple[str, datetime]:
    now = datetime.now(timezone.utc)
    expires = now + timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)
    token = _create_token(user_id, 'refresh', expires - now)
    return token, expires


def get_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == email)).first()


def create_user(session: Session, email: str, password: str) -> User:
    if get_user_by_email(session, email):
        raise ApiError(ErrorCode.EMAIL_TAKEN)
    user = User(email=email, hashed_password=hash_password(password))
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info('auth.user_registered', user_id=user.id)
    return user


def authenticate_user(session: Session, email: str, password: str) -> Optional[User]:
    user = get_user_by_email(session, email)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def store_refresh_token(session: Session, token: str, user_id: str, expires_at: datetime) -> None:
    session.add(RefreshToken(token=token, user_id=user_id, expires_at=expires_at))
    session.commit()


def issue_tokens(session: Session, user_id: str) -> tuple[str, str]:
    access_token = create_access_token(user_id)
    refresh_token, expires_at = create_refresh_token(user_id)
    store_refresh_token(session, refresh_token, user_id, expires_at)
    return access_token, refresh_token


def revoke_refresh_token(session: Session, token: str) -> None:
    record = session.exec(select(RefreshToken).where(RefreshToken.token == token)).first()
    if record:
        session.delete(record)
        session.commit()


def validate_refresh_token(session: Session, token: str) -> str:
    user_id = _decode_token(token, 'refresh')
    record = session.exec(select(RefreshToken).where(RefreshToken.token == token)).first()
    if not record:
        raise ApiError(ErrorCode.INVALID_TOKEN, message='Refresh token revoked')
    if _ensure_utc(record.expires_at) < datetime.now(timezone.utc):
        session.delete(record)
        session.commit()
        raise ApiError(ErrorCode.INVALID_TOKEN, message='Refresh token expired')
    return user_id


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if credentials and credentials.credentials:
        return credentials.credentials
    for name in TOKEN_COOKIES:
        token = request.cookies.get(name)
        if token:
            return token
    return None


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: Session = Depends(get_session),
) -> AuthenticatedUser:
    token = extract_token(request, credentials)
    if not token:
        raise ApiError(ErrorCode.MISSING_TOKEN)

    user_id = _decode_token(token, 'access')
    with database_errors(session, 'Failed to verify user'):
        user = session.exec(select(User).where(User.id == user_id)).first()
    if not user or not user.is_active:
        raise ApiError(ErrorCode.INVALID_TOKEN, message='User not found')
    return AuthenticatedUser(id=user.id, email=user.email)
