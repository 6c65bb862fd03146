"""Session API endpoints: login, logout, refresh."""

from fastapi import APIRouter, Depends, HTTPException, status

from sessionstore.api.deps import get_session_id, get_session_service, require_session
from sessionstore.domain import NotFoundError, Session
from sessionstore.schemas.session import LoginRequest, MessageResponse, SessionResponse
from sessionstore.services.session import SessionService

router = APIRouter(tags=["sessions"])


def _to_response(session: Session) -> SessionResponse:
    return SessionResponse(
        session_id=session.id,
        expires_at=session.expires_at,
        end_of_life=session.end_of_life,
    )


@router.post(
    "/login/",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def login(
    request: LoginRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """Open a session for credentials that were verified upstream.

    The returned ``session_id`` goes in the ``X-Session-ID`` header of
    subsequent requests.
    """
    session = await service.login(request.encrypted_credentials)
    return _to_response(session)


@router.post("/logout/", response_model=MessageResponse)
async def logout(
    session_id: int = Depends(get_session_id),
    service: SessionService = Depends(get_session_service),
) -> MessageResponse:
    """End the session. Logging out twice is not an error."""
    await service.logout(session_id)
    return MessageResponse(message="Logged out")


@router.post("/refresh/", response_model=SessionResponse)
async def refresh(
    session: Session = Depends(require_session),
    service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """Push the idle expiry forward by the configured idle timeout."""
    await service.refresh(session.id)
    try:
        refreshed = await service.validate(session.id)
    except NotFoundError as e:
        # Logged out or swept between the two calls
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        ) from e
    return _to_response(refreshed)


@router.get("/sessions/current", response_model=SessionResponse)
async def current_session(
    session: Session = Depends(require_session),
) -> SessionResponse:
    return _to_response(session)
