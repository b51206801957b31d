"""FastAPI application serving the LexiTax REST contract from memory."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from lexitax.chat.constants import GUEST_QUERY_LIMIT
from lexitax.server.routers.auth import router as auth_router
from lexitax.server.routers.chat import router as chat_router
from lexitax.server.routers.conversations import router as conversations_router
from lexitax.server.routers.guest import router as guest_router
from lexitax.server.store import BackendStore


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Errors are returned as {"error": message}, the shape the client parses."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def create_app(
    store: BackendStore | None = None, guest_query_limit: int = GUEST_QUERY_LIMIT
) -> FastAPI:
    """
    Build the mock backend.

    Args:
        store: Pre-populated state; a fresh empty store when None
        guest_query_limit: Queries each guest may make

    Returns:
        FastAPI: The application, with every route under /api
    """
    app = FastAPI(
        title="LexiTax Mock API",
        description="In-memory stand-in for the LexiTax backend",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.store = store or BackendStore(guest_query_limit=guest_query_limit)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(auth_router, prefix="/api")
    app.include_router(conversations_router, prefix="/api")
    app.include_router(chat_router, prefix="/api")
    app.include_router(guest_router, prefix="/api")

    @app.get("/healthcheck")
    async def healthcheck():
        """Health check endpoint."""
        return {"status": "ok", "message": "LexiTax mock API is running"}

    return app
