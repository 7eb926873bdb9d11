import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from task_comments.schemas.comment import CommentRead
from task_comments.schemas.task import TaskRead


class StoreError(Exception):
    """Any failure raised by the persistence layer (connectivity, malformed ids, driver errors)."""


def parse_id(value: str) -> str:
    """Normalize a document identifier, raising StoreError if it is not a UUID."""
    try:
        return str(uuid.UUID(str(value)))
    except ValueError as e:
        raise StoreError(f"Malformed identifier: {value!r}") from e


class DocumentStore(ABC):
    """
    Persistence contract used by the request handlers.

    Lookups return None when no document matches. Every other failure
    surfaces as StoreError.
    """

    async def connect(self) -> None:
        pass

    async def disconnect(self) -> None:
        pass

    @abstractmethod
    async def ping(self) -> None:
        ...

    @abstractmethod
    async def create_task(self, title: str) -> TaskRead:
        ...

    @abstractmethod
    async def find_task(self, task_id: str) -> Optional[TaskRead]:
        ...

    @abstractmethod
    async def create_comment(self, task_id: str, text: str) -> CommentRead:
        ...

    @abstractmethod
    async def find_comments(self, task_id: str) -> List[CommentRead]:
        """Comments referencing task_id, oldest first."""

    @abstractmethod
    async def update_comment(self, comment_id: str, text: str) -> Optional[CommentRead]:
        """Atomically set the text of one comment and return the updated document."""

    @abstractmethod
    async def delete_comment(self, comment_id: str) -> Optional[CommentRead]:
        """Atomically remove one comment and return what was deleted."""


def build_store(database_url: str, echo: bool = False) -> DocumentStore:
    """Pick the store implementation for a connection target."""
    if database_url.startswith("memory://"):
        from task_comments.store.memory import InMemoryStore
        return InMemoryStore()

    from task_comments.store.sql import SQLAlchemyStore
    return SQLAlchemyStore(database_url, echo=echo)
