"""FastAPI dependencies.

Stores and services live on ``app.state`` and are wired by the application
lifespan (or directly by tests), never imported as module globals.
"""

from fastapi import Depends, Header, HTTPException, Request, status

from sessionstore.domain import NotFoundError, Session, is_valid_id
from sessionstore.services.session import SessionService
from sessionstore.stores.base import UserStore

SESSION_HEADER = "X-Session-ID"


def _not_authenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )


def get_session_service(request: Request) -> SessionService:
    """Dependency to get the session service."""
    return request.app.state.session_service


def get_user_store(request: Request) -> UserStore:
    """Dependency to get the user store."""
    return request.app.state.user_store


def get_session_id(
    x_session_id: str | None = Header(default=None, alias=SESSION_HEADER),
) -> int:
    """Parse the session id header; 401 when missing, malformed or out of range."""
    if not x_session_id:
        raise _not_authenticated()
    try:
        session_id = int(x_session_id)
    except ValueError as e:
        raise _not_authenticated() from e
    if not is_valid_id(session_id):
        raise _not_authenticated()
    return session_id


async def require_session(
    session_id: int = Depends(get_session_id),
    service: SessionService = Depends(get_session_service),
) -> Session:
    """Dependency resolving the caller's live session or raising 401."""
    try:
        return await service.validate(session_id)
    except NotFoundError as e:
        raise _not_authenticated() from e
