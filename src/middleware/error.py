from datetime import datetime

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from src.shared.utils import get_logger

logger = get_logger(__name__)


def _error_body(request: Request, status_code: int, message: str) -> dict:
    return {
        "statusCode": status_code,
        "timestamp": datetime.now().isoformat(),
        "path": request.url.path,
        "method": request.method,
        "message": message,
    }


async def http_exception_handler(request: Request, exc: Exception):
    """Global exception handler for HTTP errors."""
    if isinstance(exc, HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(request, exc.status_code, exc.detail),
            headers=getattr(exc, "headers", None),
        )

    logger.error(f"Unhandled exception: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(
            request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error"
        ),
    )
