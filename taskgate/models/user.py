from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import Optional, List

from .common import utcnow


class User(SQLModel, table=True):
    """User model for authentication and profile data.

    The bcrypt hash lives in ``hashed_password`` and is never part of any
    response schema.
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    email: str = Field(unique=True, index=True)
    hashed_password: str
    avatar_url: str = Field(default="")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    # Tasks are removed by the database-level cascade on tasks.user_id
    tasks: List["Task"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "passive_deletes": True},
    )
