"""
Answer providers for the chat session.

A provider turns a submitted query into a ChatResponse. The mock provider
answers from canned responses; the API provider goes through the
conversation client.
"""

import asyncio
import uuid
from abc import ABC, abstractmethod

from lexitax.api.client import ConversationClient
from lexitax.api.constants import ConversationId, QueryLanguage
from lexitax.api.results import ApiResult
from lexitax.api.schemas import ChatResponse, Conversation, GuestQueryCount
from lexitax.chat.mock_responses import (
    extract_references,
    get_mock_response,
    match_keyword_group,
)
from lexitax.utils.logger import logger


class ResponseProvider(ABC):
    """Abstract source of assistant answers."""

    @abstractmethod
    async def answer(
        self, conversation: Conversation, query: str, authenticated: bool
    ) -> ApiResult[ChatResponse]:
        """
        Answer a query submitted in a conversation.

        Args:
            conversation: The local conversation the query belongs to
            query: The user's query text
            authenticated: Whether the caller holds a credential

        Returns:
            ApiResult[ChatResponse]: The answer, or the failure that prevented it
        """
        pass

    async def guest_query_count(self) -> ApiResult[GuestQueryCount] | None:
        """Server view of the guest quota; None when there is no server."""
        return None

    def reset(self) -> None:
        """Forget per-conversation state once the session drops its conversations."""
        return None

    async def aclose(self) -> None:
        """Release any resources held by the provider."""
        return None


class MockResponseProvider(ResponseProvider):
    """Answers from keyword-matched canned responses."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay

    async def answer(
        self, conversation: Conversation, query: str, authenticated: bool
    ) -> ApiResult[ChatResponse]:
        if self.delay:
            await asyncio.sleep(self.delay)

        group = match_keyword_group(query)
        response = get_mock_response(query)
        logger.info(
            "[Mock] Answering query",
            conversation_id=conversation.id,
            keyword_group=group.name if group else None,
        )
        return ApiResult.ok(
            ChatResponse(
                message_id=uuid.uuid4().hex,
                conversation_id=conversation.id,
                response=response,
                confidence=1.0 if group else 0.0,
                sources=extract_references(response),
            )
        )


class ApiResponseProvider(ResponseProvider):
    """Answers through the LexiTax API.

    Authenticated queries go to the chat endpoint inside a server-side
    conversation, created on first use; guest queries go to the guest
    endpoint.
    """

    def __init__(self, client: ConversationClient, language: QueryLanguage | None = None):
        self.client = client
        self.language = language
        self._server_ids: dict[ConversationId, ConversationId] = {}

    async def _server_conversation_id(
        self, conversation: Conversation
    ) -> ApiResult[ConversationId]:
        server_id = self._server_ids.get(conversation.id)
        if server_id is not None:
            return ApiResult.ok(server_id)

        result = await self.client.create_conversation(conversation.title)
        if not result.success:
            return ApiResult.fail(result.error)

        self._server_ids[conversation.id] = result.data.id
        logger.info(
            "Created server conversation",
            conversation_id=conversation.id,
            server_conversation_id=result.data.id,
        )
        return ApiResult.ok(result.data.id)

    async def answer(
        self, conversation: Conversation, query: str, authenticated: bool
    ) -> ApiResult[ChatResponse]:
        if not authenticated:
            return await self.client.send_guest_query(query)

        server_id = await self._server_conversation_id(conversation)
        if not server_id.success:
            return ApiResult.fail(server_id.error)
        return await self.client.send_message(server_id.data, query, language=self.language)

    async def guest_query_count(self) -> ApiResult[GuestQueryCount] | None:
        return await self.client.get_guest_query_count()

    def reset(self) -> None:
        self._server_ids.clear()

    async def aclose(self) -> None:
        await self.client.close()
