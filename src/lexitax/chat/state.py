"""
Chat session state machine.

Holds the conversation list, the active conversation and the guest quota,
and drives the submit-query flow: validate, enforce the guest quota, show
the user message at once, then append the assistant answer when it
arrives.
"""

import asyncio
import uuid
from datetime import UTC, datetime
from enum import Enum

from lexitax.api.constants import ConversationId, MessageRole
from lexitax.api.exceptions import (
    GuestQuotaExceededError,
    LexiTaxError,
    ValidationError,
)
from lexitax.api.results import ApiResult
from lexitax.api.schemas import ChatResponse, Conversation, GuestQueryCount, Message
from lexitax.auth.gateway import AuthGateway
from lexitax.auth.session import SessionManager
from lexitax.chat.constants import DEFAULT_CONVERSATION_TITLE, derive_title
from lexitax.chat.providers import ResponseProvider
from lexitax.chat.quota import GuestQuota
from lexitax.config import LexiTaxSettings, TitleStrategy
from lexitax.utils.logger import logger


class SessionState(str, Enum):
    """Whether a conversation is selected."""

    IDLE = "idle"
    ACTIVE = "active"


class ChatSession:
    """Client-held chat state for one user of the UI."""

    def __init__(
        self,
        provider: ResponseProvider,
        session_manager: SessionManager,
        settings: LexiTaxSettings | None = None,
    ):
        settings = settings or LexiTaxSettings()
        self.provider = provider
        self.session_manager = session_manager
        self.title_strategy = settings.title_strategy
        self.quota = GuestQuota(limit=settings.guest_query_limit)
        self.conversations: list[Conversation] = []
        self.active_conversation_id: ConversationId | None = None
        self.last_error: LexiTaxError | None = None
        self._pending: dict[ConversationId, asyncio.Task] = {}

    # ========== State ==========

    @property
    def state(self) -> SessionState:
        return SessionState.ACTIVE if self.active_conversation is not None else SessionState.IDLE

    @property
    def is_authenticated(self) -> bool:
        return self.session_manager.is_authenticated

    @property
    def active_conversation(self) -> Conversation | None:
        if self.active_conversation_id is None:
            return None
        return self.find_conversation(self.active_conversation_id)

    @property
    def visible_messages(self) -> list[Message]:
        """Messages of the active conversation, in insertion order."""
        conversation = self.active_conversation
        return list(conversation.messages) if conversation else []

    def find_conversation(self, conversation_id: ConversationId) -> Conversation | None:
        return next((c for c in self.conversations if c.id == conversation_id), None)

    def is_pending(self, conversation_id: ConversationId) -> bool:
        return conversation_id in self._pending

    # ========== Transitions ==========

    async def initialize(self) -> ApiResult[GuestQueryCount] | None:
        """Reconcile the guest quota with the server, for guests with a backend."""
        if self.is_authenticated:
            return None

        result = await self.provider.guest_query_count()
        if result is None:
            return None
        if result.success:
            self.quota.reconcile(result.data)
        else:
            logger.warning("Could not fetch guest query count", error=result.message)
        return result

    def new_conversation(self) -> Conversation:
        """Create a conversation, put it first in the list and make it active."""
        now = datetime.now(UTC)
        conversation = Conversation(
            id=uuid.uuid4().hex,
            title=DEFAULT_CONVERSATION_TITLE,
            is_guest=not self.is_authenticated,
            created_at=now,
            updated_at=now,
        )
        self.conversations.insert(0, conversation)
        self.active_conversation_id = conversation.id
        logger.info("Conversation created", conversation_id=conversation.id)
        return conversation

    def select_conversation(self, conversation_id: ConversationId) -> bool:
        """Make a conversation active. Unknown ids leave the state untouched."""
        if self.find_conversation(conversation_id) is None:
            logger.info("Ignoring selection of unknown conversation", conversation_id=conversation_id)
            return False
        self.active_conversation_id = conversation_id
        return True

    async def submit_query(self, text: str) -> ApiResult[Message]:
        """
        Submit a query in the active conversation.

        Args:
            text: The user's query

        Returns:
            ApiResult[Message]: The assistant message, or why none was added
        """
        if not text or not text.strip():
            return ApiResult.fail(ValidationError("Query must not be empty"))

        guest = not self.is_authenticated
        if guest and self.quota.exhausted:
            logger.info("Guest quota exhausted", queries_limit=self.quota.limit)
            return ApiResult.fail(GuestQuotaExceededError(self.quota.limit))

        if self.active_conversation_id and self.is_pending(self.active_conversation_id):
            return ApiResult.fail(
                ValidationError("Please wait for the current answer before asking again")
            )

        conversation = self.active_conversation or self.new_conversation()
        conversation.messages.append(
            Message(
                id=uuid.uuid4().hex,
                conversation_id=conversation.id,
                role=MessageRole.USER,
                content=text,
            )
        )
        conversation.updated_at = datetime.now(UTC)

        # A submitted guest query is spent even if no answer ever arrives
        if guest:
            self.quota.consume()

        self._update_title(conversation, text)

        result = await self._await_answer(conversation, text, authenticated=not guest)
        if not result.success:
            if self.find_conversation(conversation.id) is conversation:
                self.last_error = result.error
            return ApiResult.fail(result.error)

        # The conversation may have been dropped by reset() while we waited
        if self.find_conversation(conversation.id) is not conversation:
            logger.info("Discarding answer for removed conversation", conversation_id=conversation.id)
            return ApiResult.fail(LexiTaxError("Conversation was closed before the answer arrived"))

        assistant_message = self._to_message(conversation.id, result.data)
        conversation.messages.append(assistant_message)
        conversation.updated_at = datetime.now(UTC)
        self.last_error = None
        return ApiResult.ok(assistant_message)

    def cancel_pending(self, conversation_id: ConversationId | None = None) -> int:
        """Cancel outstanding answers, for one conversation or all. Returns how many."""
        if conversation_id is not None:
            task = self._pending.get(conversation_id)
            tasks = [task] if task else []
        else:
            tasks = list(self._pending.values())
        for task in tasks:
            task.cancel()
        return len(tasks)

    def reset(self) -> None:
        """Back to Idle: drop every conversation and outstanding answer."""
        cancelled = self.cancel_pending()
        self.conversations.clear()
        self.active_conversation_id = None
        self.quota.reset()
        self.provider.reset()
        self.last_error = None
        logger.info("Chat session reset", cancelled_requests=cancelled)

    async def logout(self, gateway: AuthGateway) -> ApiResult[None]:
        """Sign out through the gateway and reset the session either way."""
        result = await gateway.logout()
        self.reset()
        return result

    async def aclose(self) -> None:
        self.cancel_pending()
        await self.provider.aclose()

    # ========== Helpers ==========

    async def _await_answer(
        self, conversation: Conversation, text: str, authenticated: bool
    ) -> ApiResult[ChatResponse]:
        task = asyncio.create_task(self.provider.answer(conversation, text, authenticated))
        self._pending[conversation.id] = task
        try:
            return await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info("Answer cancelled", conversation_id=conversation.id)
            return ApiResult.fail(LexiTaxError("Query cancelled"))
        finally:
            if self._pending.get(conversation.id) is task:
                del self._pending[conversation.id]

    def _update_title(self, conversation: Conversation, text: str) -> None:
        if self.title_strategy == TitleStrategy.LATEST_MESSAGE:
            conversation.title = derive_title(text)
            return

        user_messages = [m for m in conversation.messages if m.role == MessageRole.USER]
        if len(user_messages) == 1:
            conversation.title = derive_title(user_messages[0].content)

    @staticmethod
    def _to_message(conversation_id: ConversationId, response: ChatResponse) -> Message:
        return Message(
            id=response.message_id,
            conversation_id=conversation_id,
            role=MessageRole.ASSISTANT,
            content=response.response,
            confidence_score=response.confidence,
            sources=tuple(response.sources),
            created_at=response.created_at,
        )
