"""Chat endpoint of the mock backend."""

import uuid
from datetime import UTC, datetime
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from lexitax.api.constants import MessageRole
from lexitax.api.schemas import ChatQuery, ChatResponse, Message
from lexitax.auth.schemas import User
from lexitax.chat.constants import DEFAULT_CONVERSATION_TITLE, derive_title
from lexitax.chat.mock_responses import extract_references, get_mock_response, match_keyword_group
from lexitax.server.dependencies import get_current_user, get_store
from lexitax.server.store import BackendStore

router = APIRouter(prefix="/chat", tags=["Chat"])


def build_answer(conversation_id: str, query: str) -> ChatResponse:
    """Canned answer to query, shaped as a ChatResponse."""
    response = get_mock_response(query)
    return ChatResponse(
        message_id=uuid.uuid4().hex,
        conversation_id=conversation_id,
        response=response,
        confidence=1.0 if match_keyword_group(query) else 0.0,
        sources=extract_references(response),
    )


@router.post("/query/", response_model=ChatResponse)
async def query(
    request: ChatQuery,
    current_user: User = Depends(get_current_user),
    store: BackendStore = Depends(get_store),
) -> ChatResponse:
    """
    Answer a query and record both messages in the conversation.

    Raises:
        HTTPException: 404 if the conversation is not the caller's
    """
    conversation = store.get_conversation(request.conversation_id, current_user.id)
    if conversation is None:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Conversation not found")

    answer = build_answer(conversation.id, request.message)
    conversation.messages.append(
        Message(
            id=uuid.uuid4().hex,
            conversation_id=conversation.id,
            role=MessageRole.USER,
            content=request.message,
        )
    )
    conversation.messages.append(
        Message(
            id=answer.message_id,
            conversation_id=conversation.id,
            role=MessageRole.ASSISTANT,
            content=answer.response,
            confidence_score=answer.confidence,
            sources=tuple(answer.sources),
            created_at=answer.created_at,
        )
    )
    if conversation.title == DEFAULT_CONVERSATION_TITLE:
        conversation.title = derive_title(request.message)
    conversation.updated_at = datetime.now(UTC)
    return answer
