"""Tests for the conversation API client."""

import json

import httpx
import pytest
import pytest_asyncio

from lexitax.api.client import ConversationClient
from lexitax.api.constants import MessageRole, QueryLanguage
from lexitax.api.exceptions import FetchError, NetworkError, ValidationError
from lexitax.api.schemas import ChatResponse, Conversation, GuestQueryCount
from lexitax.auth.gateway import AuthGateway
from lexitax.chat.mock_responses import CORPORATE_TAX_ANSWER
from tests.conftest import STRONG_PASSWORD


@pytest_asyncio.fixture
async def signed_in(settings, session, asgi_transport):
    """Session signed in against the mock backend."""
    async with AuthGateway(settings=settings, session=session, transport=asgi_transport) as gw:
        result = await gw.signup("abebe@example.com", STRONG_PASSWORD, "Abebe Kebede")
        assert result.success
    return session


@pytest_asyncio.fixture
async def client(settings, session, asgi_transport):
    """Client talking to the mock backend."""
    async with ConversationClient(settings=settings, session=session, transport=asgi_transport) as c:
        yield c


@pytest.fixture
def conversation_payload():
    """Conversation as the backend returns it."""
    return {
        "id": "conv-1",
        "user_id": "user-1",
        "title": "Corporate tax",
        "is_guest": False,
        "created_at": "2025-01-15T10:00:00Z",
        "updated_at": "2025-01-15T10:05:00Z",
        "messages": [
            {
                "id": "m1",
                "conversation_id": "conv-1",
                "role": "user",
                "content": "What is the tax rate?",
                "created_at": "2025-01-15T10:00:00Z",
            },
            {
                "id": "m2",
                "conversation_id": "conv-1",
                "role": "assistant",
                "content": "30%",
                "confidence_score": 0.92,
                "sources": [
                    "Income Tax Proclamation No. 979/2016",
                    {"title": "Income Tax Proclamation", "section": "Art. 19", "reference": "979/2016"},
                ],
                "created_at": "2025-01-15T10:00:01Z",
            },
        ],
    }


class TestClientInitialization:
    """Test cases for client setup and teardown."""

    @pytest.mark.asyncio
    async def test_client_starts_without_http_client(self, settings, session):
        client = ConversationClient(settings=settings, session=session)
        assert client.settings == settings
        assert client._client is None

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, settings, session):
        client = ConversationClient(settings=settings, session=session)
        async with client as c:
            assert c is client
            assert client._client is not None
        assert client._client is None


class TestRequests:
    """Request shapes and headers."""

    @pytest.mark.asyncio
    async def test_guest_request_has_no_authorization(self, settings, session, recording_handler):
        handler, transport = recording_handler(json=[])
        client = ConversationClient(settings, session, transport=transport)

        await client.get_conversations()

        request = handler.requests[0]
        assert request.method == "GET"
        assert request.url == httpx.URL("http://testserver/api/conversations/")
        assert request.headers["Content-Type"] == "application/json"
        assert "Authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_token_change_is_picked_up_by_next_request(
        self, settings, session, recording_handler
    ):
        handler, transport = recording_handler(json=[])
        client = ConversationClient(settings, session, transport=transport)

        session.set_token("first")
        await client.get_conversations()
        session.set_token("second")
        await client.get_conversations()
        session.clear_token()
        await client.get_conversations()

        assert handler.requests[0].headers["Authorization"] == "Bearer first"
        assert handler.requests[1].headers["Authorization"] == "Bearer second"
        assert "Authorization" not in handler.requests[2].headers

    @pytest.mark.asyncio
    async def test_send_message_body(self, settings, session, recording_handler):
        handler, transport = recording_handler(
            json={"message_id": "m", "conversation_id": "c", "response": "r", "confidence": 0.5, "sources": []}
        )
        client = ConversationClient(settings, session, transport=transport)

        await client.send_message("c", "Is rent deductible?")
        await client.send_message("c", "Is rent deductible?", language=QueryLanguage.AMHARIC)

        assert handler.requests[0].url.path == "/api/chat/query/"
        assert json.loads(handler.requests[0].read()) == {
            "conversation_id": "c",
            "message": "Is rent deductible?",
        }
        assert json.loads(handler.requests[1].read())["language"] == "am"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   "])
    async def test_empty_message_rejected_without_request(
        self, settings, session, recording_handler, message
    ):
        handler, transport = recording_handler(json={})
        client = ConversationClient(settings, session, transport=transport)

        chat = await client.send_message("c", message)
        guest = await client.send_guest_query(message)

        assert isinstance(chat.error, ValidationError)
        assert isinstance(guest.error, ValidationError)
        assert handler.requests == []


class TestResponses:
    """Response parsing and the shared error shape."""

    @pytest.mark.asyncio
    async def test_get_conversations_bare_list(
        self, settings, session, recording_handler, conversation_payload
    ):
        _, transport = recording_handler(json=[conversation_payload])
        client = ConversationClient(settings, session, transport=transport)

        result = await client.get_conversations()

        assert result.success
        conversation = result.data[0]
        assert isinstance(conversation, Conversation)
        assert [m.role for m in conversation.messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert conversation.messages[1].confidence_score == 0.92
        assert conversation.messages[1].sources[1].section == "Art. 19"

    @pytest.mark.asyncio
    async def test_get_conversations_paginated(
        self, settings, session, recording_handler, conversation_payload
    ):
        _, transport = recording_handler(
            json={"count": 1, "next": None, "previous": None, "results": [conversation_payload]}
        )
        client = ConversationClient(settings, session, transport=transport)

        result = await client.get_conversations()

        assert result.success
        assert [c.id for c in result.data] == ["conv-1"]

    @pytest.mark.asyncio
    async def test_unexpected_list_payload_is_fetch_error(self, settings, session, recording_handler):
        _, transport = recording_handler(json={"unexpected": True})
        client = ConversationClient(settings, session, transport=transport)

        result = await client.get_conversations()

        assert isinstance(result.error, FetchError)

    @pytest.mark.asyncio
    async def test_error_field_is_surfaced(self, settings, session, recording_handler):
        _, transport = recording_handler(status_code=403, json={"error": "Not allowed"})
        client = ConversationClient(settings, session, transport=transport)

        result = await client.get_conversations()

        assert isinstance(result.error, FetchError)
        assert result.message == "Not allowed"
        assert result.error.status_code == 403
        assert result.error.response_data == {"error": "Not allowed"}

    @pytest.mark.asyncio
    async def test_generic_fallback_without_error_field(self, settings, session, recording_handler):
        _, transport = recording_handler(status_code=502, content=b"Bad gateway")
        client = ConversationClient(settings, session, transport=transport)

        result = await client.get_guest_query_count()

        assert isinstance(result.error, FetchError)
        assert result.message == "Failed to fetch query count"

    @pytest.mark.asyncio
    async def test_timeout_is_network_error(self, settings, session, recording_handler):
        _, transport = recording_handler(error=httpx.ReadTimeout("read timed out"))
        client = ConversationClient(settings, session, transport=transport)

        result = await client.send_guest_query("Is rent deductible?")

        assert isinstance(result.error, NetworkError)
        assert result.message == "read timed out"

    @pytest.mark.asyncio
    async def test_confidence_and_sources_pass_through(self, settings, session, recording_handler):
        _, transport = recording_handler(
            json={
                "message_id": "m",
                "conversation_id": "c",
                "response": "r",
                "confidence": 1.7,
                "sources": ["b", "a"],
                "created_at": "2025-01-15T10:00:00Z",
            }
        )
        client = ConversationClient(settings, session, transport=transport)

        result = await client.send_guest_query("q")

        assert result.data.confidence == 1.7
        assert result.data.sources == ["b", "a"]


class TestAgainstMockBackend:
    """End-to-end round trips through the in-memory backend."""

    @pytest.mark.asyncio
    async def test_conversation_lifecycle(self, signed_in, client):
        created = await client.create_conversation("Withholding on dividends")
        assert created.success
        assert created.data.title == "Withholding on dividends"

        fetched = await client.get_conversation(created.data.id)
        assert fetched.success
        assert fetched.data.id == created.data.id

        listed = await client.get_conversations()
        assert [c.id for c in listed.data] == [created.data.id]

    @pytest.mark.asyncio
    async def test_empty_title_gets_server_default(self, signed_in, client):
        created = await client.create_conversation("")
        assert created.data.title == "New Conversation"

    @pytest.mark.asyncio
    async def test_unknown_conversation_is_fetch_error(self, signed_in, client):
        result = await client.get_conversation("does-not-exist")

        assert isinstance(result.error, FetchError)
        assert result.error.status_code == 404
        assert result.message == "Conversation not found"

    @pytest.mark.asyncio
    async def test_conversations_require_credential(self, client):
        result = await client.get_conversations()

        assert isinstance(result.error, FetchError)
        assert result.error.status_code == 401

    @pytest.mark.asyncio
    async def test_send_message(self, signed_in, client):
        created = await client.create_conversation("")

        result = await client.send_message(created.data.id, "What are the corporate tax rates in Ethiopia?")

        assert result.success
        assert isinstance(result.data, ChatResponse)
        assert result.data.response == CORPORATE_TAX_ANSWER
        assert result.data.conversation_id == created.data.id
        assert "Income Tax Proclamation No. 979/2016, Articles 28-35" in result.data.sources

        stored = await client.get_conversation(created.data.id)
        assert [m.role for m in stored.data.messages] == [MessageRole.USER, MessageRole.ASSISTANT]

    @pytest.mark.asyncio
    async def test_guest_query_and_count(self, client):
        before = await client.get_guest_query_count()
        assert before.data == GuestQueryCount(queries_used=0, queries_remaining=3)

        answered = await client.send_guest_query("How do I calculate withholding tax?")
        assert answered.success

        after = await client.get_guest_query_count()
        assert after.data == GuestQueryCount(queries_used=1, queries_remaining=2)

    @pytest.mark.asyncio
    async def test_guest_limit_enforced_by_server(self, client):
        for _ in range(3):
            assert (await client.send_guest_query("random unrelated text")).success

        blocked = await client.send_guest_query("random unrelated text")

        assert isinstance(blocked.error, FetchError)
        assert blocked.error.status_code == 429
        assert "limited to 3 queries" in blocked.message
