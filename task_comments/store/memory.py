import asyncio
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from task_comments.schemas.comment import CommentRead
from task_comments.schemas.task import TaskRead
from task_comments.store.base import DocumentStore, parse_id


class InMemoryStore(DocumentStore):
    """Dict-backed store. Documents keep insertion order, which is the listing order."""

    def __init__(self):
        self.tasks: Dict[str, TaskRead] = {}
        self.comments: Dict[str, CommentRead] = {}
        self._lock = asyncio.Lock()

    async def ping(self) -> None:
        return None

    async def create_task(self, title: str) -> TaskRead:
        task = TaskRead(id=str(uuid.uuid4()), title=title, created_at=datetime.now(timezone.utc))
        async with self._lock:
            self.tasks[task.id] = task
        return task

    async def find_task(self, task_id: str) -> Optional[TaskRead]:
        return self.tasks.get(parse_id(task_id))

    async def create_comment(self, task_id: str, text: str) -> CommentRead:
        comment = CommentRead(
            id=str(uuid.uuid4()),
            task_id=parse_id(task_id),
            text=text,
            created_at=datetime.now(timezone.utc)
        )
        async with self._lock:
            self.comments[comment.id] = comment
        return comment

    async def find_comments(self, task_id: str) -> List[CommentRead]:
        task_id = parse_id(task_id)
        return [comment for comment in self.comments.values() if comment.task_id == task_id]

    async def update_comment(self, comment_id: str, text: str) -> Optional[CommentRead]:
        comment_id = parse_id(comment_id)
        async with self._lock:
            comment = self.comments.get(comment_id)
            if comment is None:
                return None
            # Replacing the value keeps the key's position in the dict
            updated = comment.model_copy(update={"text": text})
            self.comments[comment_id] = updated
        return updated

    async def delete_comment(self, comment_id: str) -> Optional[CommentRead]:
        comment_id = parse_id(comment_id)
        async with self._lock:
            return self.comments.pop(comment_id, None)
