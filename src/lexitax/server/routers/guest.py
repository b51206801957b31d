"""Guest endpoints of the mock backend."""

import uuid
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from lexitax.api.schemas import ChatResponse, GuestQuery, GuestQueryCount
from lexitax.server.dependencies import get_guest_key, get_store
from lexitax.server.routers.chat import build_answer
from lexitax.server.store import BackendStore
from lexitax.utils.logger import logger

router = APIRouter(prefix="/guest", tags=["Guest"])


@router.get("/query-count/", response_model=GuestQueryCount)
async def query_count(
    guest_key: str = Depends(get_guest_key),
    store: BackendStore = Depends(get_store),
) -> GuestQueryCount:
    """How many guest queries the caller has used and has left."""
    used = min(store.guest_queries_used(guest_key), store.guest_query_limit)
    return GuestQueryCount(
        queries_used=used, queries_remaining=store.guest_query_limit - used
    )


@router.post("/query/", response_model=ChatResponse)
async def guest_query(
    request: GuestQuery,
    guest_key: str = Depends(get_guest_key),
    store: BackendStore = Depends(get_store),
) -> ChatResponse:
    """
    Answer a guest query while the guest has quota left.

    Raises:
        HTTPException: 429 once the guest limit is reached
    """
    if store.guest_queries_used(guest_key) >= store.guest_query_limit:
        raise HTTPException(
            status_code=HTTPStatus.TOO_MANY_REQUESTS,
            detail=f"Guest mode is limited to {store.guest_query_limit} queries. Please sign in to continue.",
        )

    used = store.record_guest_query(guest_key)
    logger.info("[MockBackend] Guest query", queries_used=used)
    return build_answer(f"guest-{uuid.uuid4().hex}", request.message)
