from contextlib import contextmanager

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import NullPool
from sqlmodel import Session, SQLModel, create_engine

from .config import DATABASE_URL

# Import all models to ensure they are registered with SQLModel metadata
from .models import Task, User  # noqa: F401


def _create_engine(url: str = DATABASE_URL) -> Engine:
    if url.startswith("sqlite"):
        return create_engine(
            url,
            echo=False,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        url,
        echo=False,
        pool_pre_ping=True,
        poolclass=NullPool,
    )


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    if type(dbapi_connection).__module__.startswith("sqlite3"):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = _create_engine()


def get_db():
    """Dependency to get database session."""
    with Session(engine) as db:
        yield db


@contextmanager
def get_session():
    """Session for code running outside a request, such as startup seeding and ``seed_demo.py``."""
    session = Session(engine)
    try:
        yield session
    finally:
        session.close()


def create_tables(bind: Engine = engine) -> None:
    """Create all database tables."""
    SQLModel.metadata.create_all(bind=bind)
