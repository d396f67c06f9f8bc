from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from .base import Envelope


class UserCreate(BaseModel):
    # Presence and length are checked by the credential store
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class User(BaseModel):
    """Public view of a user; the password hash is never included."""
    id: int
    username: str
    email: str
    avatar_url: str = ""
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TokenClaims(BaseModel):
    """Identity carried inside a signed token."""
    id: int
    username: str
    email: str
    exp: Optional[int] = None


class AuthResponse(Envelope):
    message: str
    token: str
    user: User


class ProfileResponse(Envelope):
    user: User
