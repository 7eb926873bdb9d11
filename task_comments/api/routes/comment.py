from fastapi import APIRouter, Body, Depends, Request, status
from pydantic import ValidationError
from typing import Any, List, Optional

from task_comments.api.deps import get_store
from task_comments.core.exceptions import BadRequestError, NotFoundError
from task_comments.core.log import get_logger
from task_comments.core.rate_limit import limiter, comment_rate_limit
from task_comments.schemas.comment import CommentRead, CommentText
from task_comments.store.base import DocumentStore

logger = get_logger("comment")

router = APIRouter(tags=["comments"])


def comment_text(payload: Any) -> Optional[str]:
    """The usable text of a request body, or None when it is missing, falsy or not text-like."""
    try:
        return CommentText.model_validate(payload).text
    except ValidationError:
        return None


# ----- Create a new comment -----
@router.post("/tasks/{task_id}/comments", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
@limiter.limit(comment_rate_limit)
async def create_comment(
        request: Request,  # Required for slowapi
        task_id: str,
        payload: Any = Body(None, description="JSON object with a text field"),
        store: DocumentStore = Depends(get_store)
):
    """Create a comment on an existing task."""
    # Verify task exists
    task = await store.find_task(task_id)
    if not task:
        logger.warning("Task not found for comment creation", extra={"task_id": task_id})
        raise NotFoundError("Task not found")

    text = comment_text(payload)
    if not text:
        logger.warning("Comment creation without text", extra={"task_id": task_id})
        raise BadRequestError("Text is required")

    comment = await store.create_comment(task.id, text)
    logger.info("Comment created", extra={"comment_id": comment.id, "task_id": task.id})
    return comment


# ----- Get comments for a task -----
@router.get("/tasks/{task_id}/comments", response_model=List[CommentRead])
@limiter.limit(comment_rate_limit)
async def get_task_comments(
        request: Request,  # Required for slowapi
        task_id: str,
        store: DocumentStore = Depends(get_store)
):
    """List the comments of a task, oldest first. Unknown tasks simply have no comments."""
    comments = await store.find_comments(task_id)
    logger.info("Fetched comments", extra={"task_id": task_id, "total_comments": len(comments)})
    return comments


# ----- Update comment -----
@router.put("/comments/{comment_id}", response_model=CommentRead)
@limiter.limit(comment_rate_limit)
async def update_comment(
        request: Request,  # Required for slowapi
        comment_id: str,
        payload: Any = Body(None, description="JSON object with a text field"),
        store: DocumentStore = Depends(get_store)
):
    """Replace the text of a comment (the only mutable field)."""
    text = comment_text(payload)
    if not text:
        logger.warning("Comment update without text", extra={"comment_id": comment_id})
        raise BadRequestError("Text is required")

    updated_comment = await store.update_comment(comment_id, text)
    if not updated_comment:
        logger.warning("Comment not found for update", extra={"comment_id": comment_id})
        raise NotFoundError("Comment not found")

    logger.info("Comment updated", extra={"comment_id": comment_id})
    return updated_comment


# ----- Delete comment -----
@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
@limiter.limit(comment_rate_limit)
async def delete_comment(
        request: Request,  # Required for slowapi
        comment_id: str,
        store: DocumentStore = Depends(get_store)
):
    """Delete a comment."""
    deleted_comment = await store.delete_comment(comment_id)
    if not deleted_comment:
        logger.warning("Comment not found for deletion", extra={"comment_id": comment_id})
        raise NotFoundError("Comment not found")

    logger.info("Comment deleted", extra={"comment_id": comment_id, "task_id": deleted_comment.task_id})
    return None
