"""Conversation, chat and guest endpoints of the LexiTax API."""

from typing import Any

from lexitax.api.base import BaseApiClient
from lexitax.api.constants import ApiEndpoint, ConversationId, QueryLanguage
from lexitax.api.exceptions import FetchError, ValidationError
from lexitax.api.results import ApiResult
from lexitax.api.schemas import (
    ChatQuery,
    ChatResponse,
    Conversation,
    CreateConversationRequest,
    GuestQuery,
    GuestQueryCount,
    PaginatedResponse,
)
from lexitax.utils.logger import logger


def _parse_conversation_list(body: Any) -> list[Conversation]:
    """Accept either a bare array or a paginated envelope."""
    if isinstance(body, dict) and "results" in body:
        return PaginatedResponse[Conversation].model_validate(body).results
    if not isinstance(body, list):
        raise FetchError("Failed to fetch conversations: invalid response format")
    return [Conversation.model_validate(item) for item in body]


class ConversationClient(BaseApiClient):
    """Typed request/response mapping for conversations and chat.

    Every call is a fresh round trip: nothing is cached and the guest
    quota is not tracked here.
    """

    error_class = FetchError

    async def get_conversations(self) -> ApiResult[list[Conversation]]:
        """List the caller's conversations in server order."""
        return await self._request_result(
            "GET",
            ApiEndpoint.CONVERSATIONS.value,
            _parse_conversation_list,
            fallback_error="Failed to fetch conversations",
        )

    async def create_conversation(self, title: str = "") -> ApiResult[Conversation]:
        """Create a conversation; an empty title lets the server pick a default."""
        request = CreateConversationRequest(title=title)
        return await self._request_result(
            "POST",
            ApiEndpoint.CONVERSATIONS.value,
            Conversation.model_validate,
            data=request.model_dump(),
            fallback_error="Failed to create conversation",
        )

    async def get_conversation(self, conversation_id: ConversationId) -> ApiResult[Conversation]:
        """Fetch one conversation. A 404 surfaces as a FetchError like any other non-2xx."""
        endpoint = ApiEndpoint.CONVERSATION_DETAIL.value.format(
            conversation_id=conversation_id
        )
        return await self._request_result(
            "GET",
            endpoint,
            Conversation.model_validate,
            fallback_error="Failed to fetch conversation",
        )

    async def send_message(
        self,
        conversation_id: ConversationId,
        message: str,
        language: QueryLanguage | None = None,
    ) -> ApiResult[ChatResponse]:
        """Send an authenticated query within a conversation."""
        if not message or not message.strip():
            return ApiResult.fail(ValidationError("Message must not be empty"))

        logger.info("Sending chat query", conversation_id=conversation_id)
        request = ChatQuery(conversation_id=conversation_id, message=message, language=language)
        return await self._request_result(
            "POST",
            ApiEndpoint.CHAT_QUERY.value,
            ChatResponse.model_validate,
            data=request.model_dump(mode="json", exclude_none=True),
            fallback_error="Failed to send message",
        )

    async def send_guest_query(self, message: str) -> ApiResult[ChatResponse]:
        """Send a query on the guest endpoint. Quota enforcement is the caller's job."""
        if not message or not message.strip():
            return ApiResult.fail(ValidationError("Message must not be empty"))

        logger.info("Sending guest query")
        request = GuestQuery(message=message)
        return await self._request_result(
            "POST",
            ApiEndpoint.GUEST_QUERY.value,
            ChatResponse.model_validate,
            data=request.model_dump(),
            fallback_error="Failed to send message",
        )

    async def get_guest_query_count(self) -> ApiResult[GuestQueryCount]:
        """Fetch the server's view of the guest quota."""
        return await self._request_result(
            "GET",
            ApiEndpoint.GUEST_QUERY_COUNT.value,
            GuestQueryCount.model_validate,
            fallback_error="Failed to fetch query count",
        )
