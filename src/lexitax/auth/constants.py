from enum import Enum


class Role(str, Enum):
    """User roles in the system."""

    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


class StorageKeys(str, Enum):
    """Fixed keys the credential is stored under."""

    ACCESS_TOKEN = "access_token"
    REFRESH_TOKEN = "refresh_token"


class TokenType(str, Enum):
    """Authorization schemes."""

    BEARER = "Bearer"


PASSWORD_MIN_LENGTH = 8
