"""Error codes and the JSON error envelope shared by every endpoint.

Handlers raise :class:`ApiError` with an :class:`ErrorCode`; the exception
handlers registered by :func:`register_exception_handlers` render it (and
framework errors such as unknown routes or unsupported verbs) as::

    {"error": "...", "code": "...", "message": "...", "timestamp": "..."}
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException


class ErrorCode(str, Enum):
    MISSING_TOKEN = 'MISSING_TOKEN'
    INVALID_TOKEN = 'INVALID_TOKEN'
    FORBIDDEN = 'FORBIDDEN'
    METHOD_NOT_ALLOWED = 'METHOD_NOT_ALLOWED'
    NOT_FOUND = 'NOT_FOUND'
    VALIDATION_ERROR = 'VALIDATION_ERROR'
    EMAIL_TAKEN = 'EMAIL_TAKEN'
    INVALID_CREDENTIALS = 'INVALID_CREDENTIALS'
    DATABASE_ERROR = 'DATABASE_ERROR'
    SESSION_NOT_FOUND = 'SESSION_NOT_FOUND'
    INTERNAL_ERROR = 'INTERNAL_ERROR'


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.MISSING_TOKEN: 'Authentication token is required',
    ErrorCode.INVALID_TOKEN: 'Invalid authentication token',
    ErrorCode.FORBIDDEN: 'You do not have permission to access this resource',
    ErrorCode.METHOD_NOT_ALLOWED: 'HTTP method not allowed for this endpoint',
    ErrorCode.NOT_FOUND: 'Resource not found',
    ErrorCode.VALIDATION_ERROR: 'Data validation failed',
    ErrorCode.EMAIL_TAKEN: 'Email already registered',
    ErrorCode.INVALID_CREDENTIALS: 'Invalid email or password',
    ErrorCode.DATABASE_ERROR: 'Database operation failed',
    ErrorCode.SESSION_NOT_FOUND: 'Chat session not found',
    ErrorCode.INTERNAL_ERROR: 'Internal server error occurred',
}

ERROR_STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.MISSING_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.METHOD_NOT_ALLOWED: status.HTTP_405_METHOD_NOT_ALLOWED,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.VALIDATION_ERROR: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCode.EMAIL_TAKEN: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

RETRYABLE_ERROR_CODES: frozenset[ErrorCode] = frozenset({ErrorCode.DATABASE_ERROR, ErrorCode.INTERNAL_ERROR})

# Framework-raised statuses that carry no ErrorCode of their own.
_STATUS_TO_CODE: dict[int, ErrorCode] = {
    status.HTTP_401_UNAUTHORIZED: ErrorCode.INVALID_TOKEN,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
    status.HTTP_422_UNPROCESSABLE_ENTITY: ErrorCode.VALIDATION_ERROR,
}


def is_client_error(code: ErrorCode) -> bool:
    return 400 <= ERROR_STATUS_CODES[code] < 500


def is_server_error(code: ErrorCode) -> bool:
    return ERROR_STATUS_CODES[code] >= 500


def is_retryable(code: ErrorCode) -> bool:
    return code in RETRYABLE_ERROR_CODES


class ApiError(HTTPException):
    """An HTTPException that knows its error code and diagnostic message."""

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        error: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.code = code
        self.error = error or ERROR_MESSAGES[code]
        self.message = message
        super().__init__(status_code=ERROR_STATUS_CODES[code], detail=self.error, headers=headers)


def error_body(code: ErrorCode, error: Optional[str] = None, message: Optional[str] = None) -> dict[str, Any]:
    body: dict[str, Any] = {
        'error': error or ERROR_MESSAGES[code],
        'code': code.value,
    }
    if message:
        body['message'] = message
    body['timestamp'] = datetime.now(timezone.utc).isoformat()
    return body


async def _api_error_handler(_: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.code, exc.error, exc.message),
        headers=exc.headers,
    )


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _STATUS_TO_CODE.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    detail = exc.detail if isinstance(exc.detail, str) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(code, ERROR_MESSAGES[code], detail),
        headers=getattr(exc, 'headers', None),
    )


async def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    messages = []
    for item in exc.errors():
        location = '.'.join(str(part) for part in item.get('loc', ()))
        messages.append(f"{location}: {item.get('msg', 'invalid')}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body(ErrorCode.VALIDATION_ERROR, message='; '.join(messages)),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error('request.unhandled_error', path=request.url.path, method=request.method)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(ErrorCode.INTERNAL_ERROR),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, _api_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
