import time

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from task_comments.core.log import get_logger
from task_comments.store.base import StoreError

logger = get_logger("errors")


class APIError(Exception):
    """An error that is answered with {"error": message} and the given status code."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class BadRequestError(APIError):
    def __init__(self, message: str):
        super().__init__(status.HTTP_400_BAD_REQUEST, message)


class NotFoundError(APIError):
    def __init__(self, message: str):
        super().__init__(status.HTTP_404_NOT_FOUND, message)


async def api_error_handler(request: Request, exc: APIError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def store_exception_handler(request: Request, exc: StoreError):
    logger.error("Store error", extra={"path": request.url.path, "method": request.method, "error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server error"}
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Invalid request body", extra={"path": request.url.path, "errors": str(exc.errors())})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"}
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded):
    client_host = request.client.host if request.client else None
    logger.warning("Rate limit exceeded", extra={"client": client_host, "limit": exc.detail})

    limit_item = exc.limit.limit
    now = int(time.time())
    reset_at = now + limit_item.get_expiry()
    # slowapi records the limit it just checked on the request
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    if view_rate_limit is not None:
        window_stats = request.app.state.limiter.limiter.get_window_stats(view_rate_limit[0], *view_rate_limit[1])
        reset_at = int(window_stats[0])

    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": "Rate limit exceeded"},
        headers={
            "X-RateLimit-Limit": str(limit_item.amount),
            "X-RateLimit-Reset": str(reset_at),
            "Retry-After": str(max(reset_at - now, 1))
        }
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unexpected error", extra={"path": request.url.path, "method": request.method, "error": repr(exc)})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Server error"}
    )
