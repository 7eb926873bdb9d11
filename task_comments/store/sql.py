from typing import List, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from tenacity import retry, stop_after_attempt, wait_fixed, retry_if_exception_type

from task_comments.core.log import get_logger
from task_comments.db.base import Base
from task_comments.db.session import make_engine, make_session_factory
from task_comments.models.comment import Comment
from task_comments.models.task import Task
from task_comments.schemas.comment import CommentRead
from task_comments.schemas.task import TaskRead
from task_comments.store.base import DocumentStore, StoreError, parse_id

logger = get_logger("store.sql")

_COMMENT_COLUMNS = (Comment.id, Comment.task_id, Comment.text, Comment.created_at)


class SQLAlchemyStore(DocumentStore):
    """Store backed by an async SQLAlchemy engine (asyncpg or aiosqlite)."""

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = make_engine(database_url, echo=echo)
        self.session_factory = make_session_factory(self.engine)

    async def _run_create_all(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    @retry(
        stop=stop_after_attempt(3),  # Retry 3 times
        wait=wait_fixed(2),  # Wait 2s between retries
        retry=retry_if_exception_type(OperationalError),  # Retry on DB connection errors
        reraise=True
    )
    async def _create_schema(self):
        await self._run_create_all()

    async def connect(self) -> None:
        try:
            await self._create_schema()
        except SQLAlchemyError as e:
            raise StoreError(f"Could not initialise database: {e}") from e
        logger.info("Database schema ready", extra={"url": self.engine.url.render_as_string(hide_password=True)})

    async def disconnect(self) -> None:
        await self.engine.dispose()
        logger.info("Database engine disposed")

    async def ping(self) -> None:
        try:
            async with self.session_factory() as db:
                await db.execute(select(1))
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    # ----- Create a new task -----
    async def create_task(self, title: str) -> TaskRead:
        try:
            async with self.session_factory() as db:
                new_task = Task(title=title)
                db.add(new_task)
                await db.commit()
                return TaskRead.model_validate(new_task)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    # ----- Get a single task by ID -----
    async def find_task(self, task_id: str) -> Optional[TaskRead]:
        task_id = parse_id(task_id)
        try:
            async with self.session_factory() as db:
                result = await db.execute(select(Task).where(Task.id == task_id))
                task = result.scalars().first()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return TaskRead.model_validate(task) if task else None

    # ----- Create a new comment -----
    async def create_comment(self, task_id: str, text: str) -> CommentRead:
        task_id = parse_id(task_id)
        try:
            async with self.session_factory() as db:
                new_comment = Comment(task_id=task_id, text=text)
                db.add(new_comment)
                await db.commit()
                return CommentRead.model_validate(new_comment)
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

    # ----- Get comments for a specific task -----
    async def find_comments(self, task_id: str) -> List[CommentRead]:
        task_id = parse_id(task_id)
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    select(Comment)
                    .where(Comment.task_id == task_id)
                    .order_by(Comment.seq.asc())
                )
                comments = result.scalars().all()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e
        return [CommentRead.model_validate(comment) for comment in comments]

    # ----- Update a comment -----
    async def update_comment(self, comment_id: str, text: str) -> Optional[CommentRead]:
        """Update the text of a comment in a single UPDATE ... RETURNING statement."""
        comment_id = parse_id(comment_id)
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    update(Comment)
                    .where(Comment.id == comment_id)
                    .values(text=text)
                    .returning(*_COMMENT_COLUMNS)
                    .execution_options(synchronize_session=False)
                )
                updated_comment = result.fetchone()
                await db.commit()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

        if updated_comment is None:
            return None
        return CommentRead.model_validate(dict(updated_comment._mapping))

    # ----- Delete a comment -----
    async def delete_comment(self, comment_id: str) -> Optional[CommentRead]:
        comment_id = parse_id(comment_id)
        try:
            async with self.session_factory() as db:
                result = await db.execute(
                    delete(Comment)
                    .where(Comment.id == comment_id)
                    .returning(*_COMMENT_COLUMNS)
                    .execution_options(synchronize_session=False)
                )
                deleted_comment = result.fetchone()
                await db.commit()
        except SQLAlchemyError as e:
            raise StoreError(str(e)) from e

        if deleted_comment is None:
            return None
        return CommentRead.model_validate(dict(deleted_comment._mapping))
