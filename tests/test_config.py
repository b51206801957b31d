"""Tests for settings and the dependency factories."""

from lexitax.auth.token_store import FileTokenStore, MemoryTokenStore
from lexitax.chat.providers import ApiResponseProvider, MockResponseProvider
from lexitax.chat.state import ChatSession
from lexitax.config import LexiTaxSettings, TitleStrategy, get_settings, set_settings
from lexitax.dependencies import (
    get_chat_session,
    get_response_provider,
    get_session_manager,
    get_token_store,
)


def test_defaults(monkeypatch):
    for name in ("LEXITAX_BASE_URL", "LEXITAX_GUEST_QUERY_LIMIT", "LEXITAX_TITLE_STRATEGY"):
        monkeypatch.delenv(name, raising=False)

    settings = LexiTaxSettings()

    assert settings.base_url == "http://localhost:8000/api"
    assert settings.guest_query_limit == 3
    assert settings.title_strategy == TitleStrategy.FIRST_MESSAGE
    assert settings.use_mock_responses is True


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("LEXITAX_BASE_URL", "https://api.lexitax.et/api")
    monkeypatch.setenv("LEXITAX_GUEST_QUERY_LIMIT", "5")
    monkeypatch.setenv("LEXITAX_TITLE_STRATEGY", "latest_message")

    settings = LexiTaxSettings()

    assert settings.base_url == "https://api.lexitax.et/api"
    assert settings.guest_query_limit == 5
    assert settings.title_strategy == TitleStrategy.LATEST_MESSAGE


def test_global_settings_are_cached_and_replaceable():
    assert get_settings() is get_settings()

    custom = LexiTaxSettings(base_url="http://other/api")
    set_settings(custom)

    assert get_settings() is custom


def test_token_store_follows_settings(tmp_path):
    assert isinstance(get_token_store(LexiTaxSettings(token_store_path=None)), MemoryTokenStore)

    store = get_token_store(LexiTaxSettings(token_store_path=str(tmp_path / "creds.json")))
    assert isinstance(store, FileTokenStore)


def test_response_provider_follows_settings(settings):
    session = get_session_manager(settings)

    assert isinstance(get_response_provider(session, settings), MockResponseProvider)
    settings.use_mock_responses = False
    assert isinstance(get_response_provider(session, settings), ApiResponseProvider)


def test_chat_session_uses_settings(settings):
    settings.guest_query_limit = 7
    chat = get_chat_session(get_session_manager(settings), settings)

    assert isinstance(chat, ChatSession)
    assert chat.quota.limit == 7
