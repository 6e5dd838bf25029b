from om_intel.models.base import CreatedAtModel, IDModel, TimestampModel
from om_intel.models.user import User
from om_intel.models.refresh_token import RefreshToken
from om_intel.models.chat_session import ChatSession
from om_intel.models.chat_message import ChatMessage

__all__ = [
    'IDModel',
    'CreatedAtModel',
    'TimestampModel',
    'User',
    'RefreshToken',
    'ChatSession',
    'ChatMessage',
]
