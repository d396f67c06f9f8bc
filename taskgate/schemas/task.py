from datetime import datetime, timezone
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from ..models import DEFAULT_CATEGORY, TaskPriority, TaskStatus
from .base import Envelope

# English spellings accepted on input, stored as the canonical values
PRIORITY_ALIASES = {
    "high": TaskPriority.HIGH.value,
    "medium": TaskPriority.MEDIUM.value,
    "low": TaskPriority.LOW.value,
}
STATUS_ALIASES = {
    "pending": TaskStatus.PENDING.value,
    "in_progress": TaskStatus.IN_PROGRESS.value,
    "in progress": TaskStatus.IN_PROGRESS.value,
    "done": TaskStatus.DONE.value,
}


def normalize_priority(value):
    if isinstance(value, str):
        return PRIORITY_ALIASES.get(value.strip().lower(), value.strip().lower())
    return value


def normalize_status(value):
    if isinstance(value, str):
        return STATUS_ALIASES.get(value.strip().lower(), value.strip().lower())
    return value


class TaskWrite(BaseModel):
    """Body of POST /tasks and PUT /tasks/{id}.

    Every field has the creation default, so an update that omits a field
    resets it instead of keeping the previous value.
    """
    title: str = Field(
        default="",
        validate_default=True,
        validation_alias=AliasChoices("titulo", "title"),
    )
    description: str = Field(default="", validation_alias=AliasChoices("descripcion", "description"))
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM,
        validation_alias=AliasChoices("prioridad", "priority"),
    )
    status: TaskStatus = Field(
        default=TaskStatus.PENDING,
        validation_alias=AliasChoices("estado", "status"),
    )
    due_date: Optional[datetime] = Field(
        default=None,
        validation_alias=AliasChoices("fechaLimite", "dueDate", "due_date"),
    )
    category: str = Field(
        default=DEFAULT_CATEGORY,
        validation_alias=AliasChoices("categoria", "category"),
    )

    @field_validator("title", mode="before")
    @classmethod
    def _strip_title(cls, value):
        if value is None:
            value = ""
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("Title is required")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value):
        return "" if value is None else value

    @field_validator("priority", mode="before")
    @classmethod
    def _priority(cls, value):
        if value is None or value == "":
            return TaskPriority.MEDIUM
        return normalize_priority(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value):
        if value is None or value == "":
            return TaskStatus.PENDING
        return normalize_status(value)

    @field_validator("due_date", mode="before")
    @classmethod
    def _blank_due_date(cls, value):
        return None if value == "" else value

    @field_validator("due_date")
    @classmethod
    def _due_date_as_naive_utc(cls, value):
        # Stored naive, in UTC
        if value is not None and value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_CATEGORY
        return value.strip() if isinstance(value, str) else value


def _public(name: str, public: str, **kwargs):
    """Field read from the model attribute and written under its public name."""
    return Field(validation_alias=AliasChoices(name, public), serialization_alias=public, **kwargs)


class Task(BaseModel):
    """Task as sent to clients, using the public field names."""
    id: int
    user_id: int
    title: str = _public("title", "titulo")
    description: str = _public("description", "descripcion")
    priority: str = _public("priority", "prioridad")
    status: str = _public("status", "estado")
    created_at: datetime = _public("created_at", "fechaCreacion")
    due_date: Optional[datetime] = _public("due_date", "fechaLimite", default=None)
    completed: bool = _public("completed", "completada")
    completed_at: Optional[datetime] = _public("completed_at", "fechaCompletada", default=None)
    category: str = _public("category", "categoria")
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskResponse(Envelope):
    task: Task


class TaskChangeResponse(TaskResponse):
    message: str


class TaskListResponse(Envelope):
    tasks: List[Task]
    total: int


class MessageResponse(Envelope):
    message: str
