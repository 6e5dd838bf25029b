from fastapi import APIRouter

from om_intel.api import auth, chat_sessions, health, me, messages
from om_intel.core.config import settings

api_router = APIRouter(prefix=settings.API_PREFIX)

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(me.router)
api_router.include_router(chat_sessions.router)
api_router.include_router(messages.router)
