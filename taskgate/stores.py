"""Storage-facing components.

Both classes receive their session from the caller instead of reaching for
a global handle, so tests can hand them an in-memory database.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, or_, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from .errors import ConflictError, InvalidCredentials, NotFound, ValidationError
from .models import Task, TaskStatus, User
from .models.common import utcnow
from .schemas.task import TaskWrite
from .schemas.user import TokenClaims
from .security import TokenService, get_password_hash, token_service, verify_password

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def claims_for(user: User) -> TokenClaims:
    return TokenClaims(id=user.id, username=user.username, email=user.email)


class CredentialStore:
    """Registration, login and profile lookups over the users table."""

    def __init__(self, session: Session, tokens: TokenService = token_service):
        self.session = session
        self.tokens = tokens

    def find_by_email(self, email: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.email == email)).first()

    def register(self, username: Optional[str], email: Optional[str], password: Optional[str]) -> Tuple[str, User]:
        """Create an account and return a token for it along with the stored user."""
        username, email = _clean(username), _clean(email)
        if not username or not email or not password:
            raise ValidationError("All fields are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        # A storage failure here propagates as a 500, never as a conflict
        existing = self.session.exec(
            select(User.id).where(or_(User.email == email, User.username == username))
        ).first()
        if existing is not None:
            raise ConflictError()

        user = User(username=username, email=email, hashed_password=get_password_hash(password))
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration of the same identity
            self.session.rollback()
            raise ConflictError()
        self.session.refresh(user)

        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return self.tokens.issue(claims_for(user)), user

    def authenticate(self, email: Optional[str], password: Optional[str]) -> Tuple[str, User]:
        """Check credentials and return a fresh token.

        Unknown email and wrong password raise the same error so callers
        cannot tell which accounts exist.
        """
        email = _clean(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = self.find_by_email(email)
        if user is None or not verify_password(password, user.hashed_password):
            logger.info("Rejected login attempt")
            raise InvalidCredentials()
        return self.tokens.issue(claims_for(user)), user

    def get_profile(self, user_id: int) -> User:
        user = self.session.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def delete_user(self, user_id: int) -> None:
        """Remove a user; their tasks go with them through the foreign key cascade."""
        result = self.session.exec(delete(User).where(User.id == user_id))
        if result.rowcount == 0:
            self.session.rollback()
            raise NotFound("User not found")
        self.session.commit()
        logger.info("Deleted user id=%s", user_id)


def _task_values(data: TaskWrite) -> dict:
    """Column values for a full write of the task fields."""
    now = utcnow()
    done = data.status == TaskStatus.DONE
    return {
        "title": data.title,
        "description": data.description,
        "priority": data.priority.value,
        "status": data.status.value,
        "due_date": data.due_date,
        "category": data.category,
        "completed": done,
        "completed_at": now if done else None,
        "updated_at": now,
    }


class TaskRepository:
    """CRUD over tasks, every call scoped to the owning user."""

    def __init__(self, session: Session):
        self.session = session

    def list(self, owner_id: int, status: Optional[str] = None, priority: Optional[str] = None) -> List[Task]:
        query = select(Task).where(Task.user_id == owner_id)
        if status:
            query = query.where(Task.status == status)
        if priority:
            query = query.where(Task.priority == priority)
        query = query.order_by(Task.created_at.desc(), Task.id.desc())
        return list(self.session.exec(query).all())

    def create(self, owner_id: int, data: TaskWrite) -> Task:
        values = _task_values(data)
        task = Task(user_id=owner_id, created_at=values["updated_at"], **values)
        self.session.add(task)
        try:
            self.session.commit()
        except IntegrityError:
            # Owner was deleted after the token was issued
            self.session.rollback()
            raise NotFound("User not found")
        self.session.refresh(task)
        return task

    def get(self, owner_id: int, task_id: int) -> Task:
        task = self.session.exec(
            select(Task).where(Task.id == task_id, Task.user_id == owner_id)
        ).first()
        if task is None:
            raise NotFound("Task not found")
        return task

    def update(self, owner_id: int, task_id: int, data: TaskWrite) -> Task:
        """Replace every writable field; ``created_at`` is left as it was."""
        values = _task_values(data)
        if values["completed"]:
            # A task that was already done keeps its original completion time
            values["completed_at"] = func.coalesce(Task.completed_at, values["completed_at"])
        result = self.session.exec(
            update(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.session.rollback()
            raise NotFound("Task not found")
        self.session.commit()
        # Re-read so the response reflects what is stored
        self.session.expire_all()
        return self.get(owner_id, task_id)

    def delete(self, owner_id: int, task_id: int) -> None:
        result = self.session.exec(
            delete(Task)
            .where(Task.id == task_id, Task.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.session.rollback()
            raise NotFound("Task not found")
        self.session.commit()

    def find_duplicate_titles(self, owner_id: int) -> List[Tuple[str, int]]:
        """Titles that appear more than once for a user, most repeated first."""
        count = func.count(Task.id)
        query = (
            select(Task.title, count)
            .where(Task.user_id == owner_id)
            .group_by(Task.title)
            .having(count > 1)
            .order_by(count.desc())
        )
        return [(title, total) for title, total in self.session.exec(query).all()]
