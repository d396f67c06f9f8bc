import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import API_VERSION, CORS_ORIGINS, LOG_LEVEL, SEED_DEMO_DATA
from .database import create_tables, get_session
from .errors import register_exception_handlers
from .routers import auth, tasks
from .seed import seed_demo_data

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s - %(message)s",
        stream=sys.stdout,
    )
    for _noisy in ("sqlalchemy.engine", "httpx", "httpcore"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


def create_app(seed_demo: bool = SEED_DEMO_DATA) -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Taskgate API",
        description="Multi-user task tracking API with token authentication",
        version=API_VERSION,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(tasks.router, prefix="/tasks", tags=["tasks"])

    # Create tables on startup
    @app.on_event("startup")
    def on_startup():
        create_tables()
        logger.info("Database tables ready")
        if seed_demo:
            with get_session() as session:
                seed_demo_data(session)

    @app.get("/")
    def read_root():
        return {
            "success": True,
            "message": "Task management API is running",
            "version": API_VERSION,
        }

    return app


app = create_app()
