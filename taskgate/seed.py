"""Demo account and sample tasks for local development."""
import logging
from datetime import timedelta

from sqlalchemy import func
from sqlmodel import Session, select

from .models import Task, TaskPriority, TaskStatus, User
from .models.common import utcnow
from .security import get_password_hash
from .stores import TaskRepository

logger = logging.getLogger(__name__)

DEMO_USERNAME = "test"
DEMO_EMAIL = "test@example.com"
DEMO_PASSWORD = "123456"

# (title, description, priority, status, category, due in days)
SAMPLE_TASKS = [
    ("Finish the mobile app", "Wrap up the task manager client", TaskPriority.HIGH, TaskStatus.IN_PROGRESS, "work", 7),
    ("Team meeting", "Review progress on the current sprint", TaskPriority.MEDIUM, TaskStatus.PENDING, "meeting", 2),
    ("Buy groceries", "Milk, eggs, bread and fruit", TaskPriority.LOW, TaskStatus.PENDING, "personal", 1),
    ("Send monthly report", "Prepare and send the activity report", TaskPriority.HIGH, TaskStatus.DONE, "work", -1),
]


def ensure_demo_user(session: Session) -> User:
    user = session.exec(select(User).where(User.email == DEMO_EMAIL)).first()
    if user:
        logger.info("Demo user already exists (id=%s)", user.id)
        return user

    user = User(
        username=DEMO_USERNAME,
        email=DEMO_EMAIL,
        hashed_password=get_password_hash(DEMO_PASSWORD),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Demo user created: %s / %s (id=%s)", DEMO_USERNAME, DEMO_EMAIL, user.id)
    return user


def insert_sample_tasks(session: Session, user: User) -> int:
    """Add the sample tasks the user does not have yet; returns how many were inserted."""
    now = utcnow()
    inserted = 0
    for index, (title, description, priority, status, category, due_days) in enumerate(SAMPLE_TASKS):
        exists = session.exec(
            select(Task.id).where(Task.user_id == user.id, Task.title == title)
        ).first()
        if exists is not None:
            logger.debug("Sample task %r already present (id=%s)", title, exists)
            continue

        done = status == TaskStatus.DONE
        # Stagger creation times two hours apart so ordering is visible
        created_at = now - timedelta(hours=2 * index)
        session.add(Task(
            user_id=user.id,
            title=title,
            description=description,
            priority=priority.value,
            status=status.value,
            category=category,
            due_date=now + timedelta(days=due_days),
            completed=done,
            completed_at=now - timedelta(hours=12) if done else None,
            created_at=created_at,
            updated_at=created_at,
        ))
        inserted += 1
    session.commit()
    return inserted


def seed_demo_data(session: Session) -> int:
    user = ensure_demo_user(session)
    inserted = insert_sample_tasks(session, user)

    for title, count in TaskRepository(session).find_duplicate_titles(user.id):
        logger.warning("Demo user has %d tasks titled %r", count, title)

    total_users = session.exec(select(func.count(User.id))).one()
    demo_tasks = session.exec(select(func.count(Task.id)).where(Task.user_id == user.id)).one()
    logger.info(
        "Seed complete: %d sample tasks inserted, %d users registered, demo user has %d tasks",
        inserted, total_users, demo_tasks,
    )
    return inserted
