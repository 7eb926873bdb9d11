from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded

from task_comments.api.routes import comment, health
from task_comments.core.config import settings
from task_comments.core.exceptions import (
    APIError,
    api_error_handler,
    general_exception_handler,
    rate_limit_exception_handler,
    store_exception_handler,
    validation_exception_handler,
)
from task_comments.core.log import get_logger
from task_comments.core.rate_limit import limiter
from task_comments.store.base import DocumentStore, StoreError, build_store

logger = get_logger("main")


def create_app(store: Optional[DocumentStore] = None) -> FastAPI:
    """
    Build the API around a store handle.

    Args:
        store: Store to serve from. Defaults to the one selected by
            settings.DATABASE_URL.

    Returns:
        FastAPI: The configured application
    """
    if store is None:
        store = build_store(settings.DATABASE_URL, echo=settings.DB_ECHO)

    app = FastAPI(
        title="Task Comments API",
        version="1.0.0",
        description="Comments on tasks, backed by a document store"
    )
    app.state.store = store
    app.state.limiter = limiter

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StoreError, store_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health.router)
    app.include_router(comment.router)

    @app.on_event("startup")
    async def startup_event():
        logger.info("Starting up Task Comments API...")
        await app.state.store.connect()
        logger.info("Store connected successfully")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("Shutting down Task Comments API...")
        await app.state.store.disconnect()
        logger.info("Store disconnected successfully")

    return app


app = create_app()

if __name__ == '__main__':
    import uvicorn
    uvicorn.run(
        "task_comments.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.ENVIRONMENT == "development"
    )
