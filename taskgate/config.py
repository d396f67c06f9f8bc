from pathlib import Path
import os

from dotenv import load_dotenv

# Load environment variables from the project root .env (if present).
PROJECT_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(PROJECT_ROOT / ".env")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskgate.db")
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
# Tokens live for 24 hours unless overridden.
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "false").lower() in ("1", "true", "yes")

_cors_origins = os.getenv("CORS_ORIGINS", "*")
CORS_ORIGINS = [origin.strip() for origin in _cors_origins.split(",") if origin.strip()]

API_VERSION = "1.0.0"
