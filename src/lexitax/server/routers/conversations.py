"""Conversation endpoints of the mock backend."""

from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from lexitax.api.schemas import Conversation, CreateConversationRequest
from lexitax.auth.schemas import User
from lexitax.server.dependencies import get_current_user, get_store
from lexitax.server.store import BackendStore

router = APIRouter(prefix="/conversations", tags=["Conversations"])


@router.get("/", response_model=list[Conversation])
async def list_conversations(
    current_user: User = Depends(get_current_user),
    store: BackendStore = Depends(get_store),
) -> list[Conversation]:
    """List the caller's conversations, newest first."""
    return store.list_conversations(current_user.id)


@router.post("/", response_model=Conversation, status_code=HTTPStatus.CREATED)
async def create_conversation(
    request: CreateConversationRequest,
    current_user: User = Depends(get_current_user),
    store: BackendStore = Depends(get_store),
) -> Conversation:
    """Create a conversation; an empty title gets the default."""
    return store.create_conversation(current_user.id, request.title)


@router.get("/{conversation_id}/", response_model=Conversation)
async def get_conversation(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    store: BackendStore = Depends(get_store),
) -> Conversation:
    """
    Fetch one of the caller's conversations.

    Raises:
        HTTPException: 404 if it does not exist or belongs to someone else
    """
    conversation = store.get_conversation(conversation_id, current_user.id)
    if conversation is None:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail="Conversation not found")
    return conversation
