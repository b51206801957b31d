"""
LexiTax API constants and enums.

Endpoint paths are relative to the configured base URL and keep the
trailing slash the backend expects.
"""

from enum import Enum


class ApiEndpoint(str, Enum):
    """LexiTax API endpoints."""

    AUTH_SIGNUP = "/auth/signup/"
    AUTH_LOGIN = "/auth/login/"
    AUTH_LOGOUT = "/auth/logout/"
    CONVERSATIONS = "/conversations/"
    CONVERSATION_DETAIL = "/conversations/{conversation_id}/"
    CHAT_QUERY = "/chat/query/"
    GUEST_QUERY_COUNT = "/guest/query-count/"
    GUEST_QUERY = "/guest/query/"


class MessageRole(str, Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class QueryLanguage(str, Enum):
    """Languages a tax query may be answered in."""

    ENGLISH = "en"
    AMHARIC = "am"


DEFAULT_CONTENT_TYPE = "application/json"

# Type aliases for better readability
ConversationId = str
MessageId = str
UserId = str
