from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import Optional
import enum

from .common import utcnow


class TaskPriority(str, enum.Enum):
    HIGH = "alta"
    MEDIUM = "media"
    LOW = "baja"


class TaskStatus(str, enum.Enum):
    PENDING = "pendiente"
    IN_PROGRESS = "en progreso"
    DONE = "hecha"


DEFAULT_CATEGORY = "general"


class Task(SQLModel, table=True):
    """Task record, always owned by exactly one user."""
    __tablename__ = "tasks"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    title: str
    description: str = Field(default="")
    priority: str = Field(default=TaskPriority.MEDIUM.value, index=True)
    status: str = Field(default=TaskStatus.PENDING.value, index=True)
    due_date: Optional[datetime] = None
    completed: bool = Field(default=False)
    completed_at: Optional[datetime] = None
    category: str = Field(default=DEFAULT_CATEGORY)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    user: Optional["User"] = Relationship(back_populates="tasks")
