"""Auth endpoints of the mock backend: signup, login, logout."""

from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from lexitax.auth.schemas import AuthResponse, LoginRequest, SignupRequest
from lexitax.server.dependencies import get_bearer_token, get_store
from lexitax.server.store import BackendStore
from lexitax.utils.logger import logger

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/signup/", response_model=AuthResponse, status_code=HTTPStatus.CREATED)
async def signup(
    request: SignupRequest,
    store: BackendStore = Depends(get_store),
) -> AuthResponse:
    """
    Register a user and sign them in.

    Raises:
        HTTPException: 400 on missing fields, 409 if the email is taken
    """
    if not request.email or not request.password or not request.full_name:
        raise HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail="All fields are required")
    if store.get_user_by_email(request.email) is not None:
        raise HTTPException(
            status_code=HTTPStatus.CONFLICT, detail="An account with this email already exists"
        )

    user = store.create_user(request.email, request.password, request.full_name)
    token = store.issue_token(user)
    logger.info("[MockBackend] User signed up", user_id=user.id)
    return AuthResponse(
        id=user.id, email=user.email, full_name=user.full_name, access_token=token
    )


@router.post("/login/", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    store: BackendStore = Depends(get_store),
) -> AuthResponse:
    """
    Sign a user in.

    Raises:
        HTTPException: 401 on unknown email or wrong password
    """
    user = store.authenticate(request.email, request.password)
    if user is None:
        raise HTTPException(status_code=HTTPStatus.UNAUTHORIZED, detail="Invalid email or password")

    token = store.issue_token(user)
    logger.info("[MockBackend] User logged in", user_id=user.id)
    return AuthResponse(
        id=user.id, email=user.email, full_name=user.full_name, access_token=token
    )


@router.post("/logout/")
async def logout(
    token: str | None = Depends(get_bearer_token),
    store: BackendStore = Depends(get_store),
) -> dict:
    """Revoke the caller's token, if any."""
    if token:
        store.revoke_token(token)
    return {"success": True}
