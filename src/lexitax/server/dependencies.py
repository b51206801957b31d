"""FastAPI dependencies for the mock backend."""

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from lexitax.auth.schemas import User
from lexitax.server.store import BackendStore

security = HTTPBearer(auto_error=False)


def get_store(request: Request) -> BackendStore:
    return request.app.state.store


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    return credentials.credentials if credentials else None


def get_current_user(
    token: str | None = Depends(get_bearer_token),
    store: BackendStore = Depends(get_store),
) -> User:
    """
    Resolve the bearer token to a user.

    Raises:
        HTTPException: 401 if the token is missing, invalid or revoked
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No authentication token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = store.user_for_token(token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_guest_key(request: Request) -> str:
    """Guests are told apart by client address."""
    return request.client.host if request.client else "anonymous"
