from fastapi import Request

from task_comments.store.base import DocumentStore


def get_store(request: Request) -> DocumentStore:
    """The store handle created with the app; handlers never reassign it."""
    return request.app.state.store
