from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from task_comments.api.deps import get_store
from task_comments.core.log import get_logger
from task_comments.store.base import DocumentStore, StoreError

logger = get_logger("health")

router = APIRouter(tags=["health"])


@router.get("/")
async def root():
    return {"message": "Task Comment API is running!", "status": "OK"}


@router.get("/health")
async def health_check():
    """Health check endpoint for load balancers"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc),
        "service": "task-comments-api"
    }


@router.get("/health/ready")
async def readiness_check(store: DocumentStore = Depends(get_store)):
    """Readiness check - verify the store answers"""
    try:
        await store.ping()
    except StoreError as e:
        logger.error("Readiness check failed", extra={"error": str(e)})
        return JSONResponse(status_code=503, content={"error": "Service unavailable"})

    return {
        "status": "ready",
        "services": {"database": "ok"},
        "timestamp": datetime.now(timezone.utc)
    }
