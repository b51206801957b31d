"""
Factories wiring settings, the credential store, the API clients and the
chat session together.
"""

import httpx

from lexitax.api.client import ConversationClient
from lexitax.auth.gateway import AuthGateway
from lexitax.auth.session import SessionManager
from lexitax.auth.token_store import FileTokenStore, MemoryTokenStore, TokenStore
from lexitax.chat.providers import ApiResponseProvider, MockResponseProvider, ResponseProvider
from lexitax.chat.state import ChatSession
from lexitax.config import LexiTaxSettings, get_settings


def get_token_store(settings: LexiTaxSettings | None = None) -> TokenStore:
    """File-backed store when a path is configured, in-memory otherwise."""
    settings = settings or get_settings()
    if settings.token_store_path:
        return FileTokenStore(settings.token_store_path)
    return MemoryTokenStore()


def get_session_manager(settings: LexiTaxSettings | None = None) -> SessionManager:
    return SessionManager(get_token_store(settings))


def get_auth_gateway(
    session: SessionManager,
    settings: LexiTaxSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AuthGateway:
    return AuthGateway(settings=settings or get_settings(), session=session, transport=transport)


def get_conversation_client(
    session: SessionManager,
    settings: LexiTaxSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ConversationClient:
    return ConversationClient(
        settings=settings or get_settings(), session=session, transport=transport
    )


def get_response_provider(
    session: SessionManager,
    settings: LexiTaxSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ResponseProvider:
    """Canned answers when mock responses are enabled, the API otherwise."""
    settings = settings or get_settings()
    if settings.use_mock_responses:
        return MockResponseProvider()
    return ApiResponseProvider(get_conversation_client(session, settings, transport))


def get_chat_session(
    session: SessionManager,
    settings: LexiTaxSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ChatSession:
    settings = settings or get_settings()
    provider = get_response_provider(session, settings, transport)
    return ChatSession(provider=provider, session_manager=session, settings=settings)
