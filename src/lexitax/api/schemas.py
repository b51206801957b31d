"""
Pydantic schemas for conversation, chat and guest operations.

This module contains the request and response models exchanged with the
LexiTax API, and the Conversation/Message models the chat session keeps
in memory.
"""

from datetime import UTC, datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from lexitax.api.constants import (
    ConversationId,
    MessageId,
    MessageRole,
    QueryLanguage,
    UserId,
)

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(UTC)


# ========== Conversation Schemas ==========


class Citation(BaseModel):
    """Structured reference to a provision of tax law."""

    title: str = Field(..., description="Name of the proclamation or regulation")
    section: str = Field("", description="Article or section cited")
    reference: str = Field("", description="Free-form reference text")


class Message(BaseModel):
    """A single chat message. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: MessageId = Field(..., description="Message identifier")
    conversation_id: ConversationId = Field(..., description="Owning conversation")
    role: MessageRole = Field(..., description="Message author")
    content: str = Field(..., description="Message text")
    confidence_score: float | None = Field(
        None, description="Server-reported certainty of an answer, in [0, 1]"
    )
    sources: tuple[str | Citation, ...] | None = Field(
        None, description="Citations accompanying an answer, in server order"
    )
    created_at: datetime = Field(default_factory=utc_now)


class Conversation(BaseModel):
    """An ordered thread of user/assistant messages."""

    id: ConversationId = Field(..., description="Conversation identifier")
    user_id: UserId | None = Field(None, description="Owner, absent for guests")
    title: str = Field("New Conversation", description="Conversation title")
    messages: list[Message] = Field(default_factory=list)
    is_guest: bool = Field(False, description="Whether a guest started the conversation")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CreateConversationRequest(BaseModel):
    """Request body for creating a conversation."""

    title: str = Field("", description="Title; the server may substitute a default")


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated list envelope some list endpoints answer with."""

    count: int
    next: str | None = None
    previous: str | None = None
    results: list[T]


# ========== Chat Schemas ==========


class ChatQuery(BaseModel):
    """Request body for an authenticated chat query."""

    conversation_id: ConversationId
    message: str = Field(..., min_length=1)
    language: QueryLanguage | None = None


class GuestQuery(BaseModel):
    """Request body for a guest chat query."""

    message: str = Field(..., min_length=1)


class ChatResponse(BaseModel):
    """Answer to a chat query. Confidence and sources are passed through unchecked."""

    message_id: MessageId
    conversation_id: ConversationId
    response: str
    confidence: float = 0.0
    sources: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)


# ========== Guest Schemas ==========


class GuestQueryCount(BaseModel):
    """Server-observed guest quota usage."""

    queries_used: int = Field(..., ge=0)
    queries_remaining: int = Field(..., ge=0)


class GuestSession(BaseModel):
    """Quota-bound session of an unauthenticated caller."""

    session_id: str
    queries_used: int = Field(0, ge=0)
    queries_limit: int = Field(3, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime | None = None
