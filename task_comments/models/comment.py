from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from task_comments.db.base import Base
from task_comments.models.task import new_id, utcnow


class Comment(Base):
    __tablename__ = "comments"

    # Insertion sequence; listings are ordered by it
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, default=new_id)
    # Not a ForeignKey: the task reference is only checked when the comment is created
    task_id = Column(String(36), nullable=False)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (Index("ix_comments_task_id_seq", "task_id", "seq"),)
