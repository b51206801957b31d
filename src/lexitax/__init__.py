"""
LexiTax client core.

Auth gateway, conversation API client and the local chat session state
for the LexiTax tax-law assistant.
"""

from .api import (
    ApiResult,
    AuthError,
    ConversationClient,
    FetchError,
    GuestQuotaExceededError,
    LexiTaxError,
    NetworkError,
    ValidationError,
)
from .auth.gateway import AuthGateway
from .auth.session import SessionManager
from .chat.state import ChatSession
from .config import LexiTaxSettings, TitleStrategy, get_settings

__all__ = [
    "ApiResult",
    "AuthError",
    "AuthGateway",
    "ChatSession",
    "ConversationClient",
    "FetchError",
    "GuestQuotaExceededError",
    "LexiTaxError",
    "LexiTaxSettings",
    "NetworkError",
    "SessionManager",
    "TitleStrategy",
    "ValidationError",
    "get_settings",
]
