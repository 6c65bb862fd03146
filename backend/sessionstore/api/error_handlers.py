"""Global exception handlers.

A storage outage fails the one request that hit it with 503; the process
keeps serving.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from sessionstore.core.logging import get_logger
from sessionstore.domain import StorageUnavailableError

logger = get_logger("api.errors")


def register_error_handlers(app: FastAPI) -> None:
    """Register global error handlers on the FastAPI app."""

    @app.exception_handler(StorageUnavailableError)
    async def storage_unavailable_handler(
        request: Request, exc: StorageUnavailableError
    ) -> JSONResponse:
        logger.error(
            f"Storage unavailable on {request.url.path}: {exc}",
            extra={"path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"detail": "Session store unavailable"},
        )
