import os

from dotenv import load_dotenv

from src.models.settings import Settings

# Use validate=False so a missing or partial .env still yields defaults
settings = Settings.from_env_file(validate=False)

# Load environment variables (will override .env file values)
load_dotenv()


def env_bool(key: str, default: bool = False) -> bool:
    """Parse boolean from environment variable."""
    value = os.environ.get(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


class Config:
    # Use settings from model, but allow environment variables to override
    DEBUG = env_bool("DEBUG", settings.debug)
    LOG_LEVEL = os.environ.get("LOG_LEVEL", settings.log_level)
    SECRET_KEY = os.environ.get("SECRET_KEY", settings.secret_key)

    # WTF Configuration
    WTF_CSRF_ENABLED = True
    WTF_CSRF_TIME_LIMIT = None  # No time limit on CSRF tokens

    # Database URL - SQLite database in data directory
    DATA_DIR = os.environ.get("DATA_DIR", settings.data_dir)
    DATABASE_NAME = os.environ.get("DATABASE_NAME", settings.database_name)
    DATABASE_URL = f"sqlite+aiosqlite:///{DATA_DIR}/{DATABASE_NAME}.db"

    # Seconds between a mutation's write and the todo list invalidation
    MUTATION_LATENCY = float(
        os.environ.get("MUTATION_LATENCY", str(settings.mutation_latency))
    )

    # Seconds a UI session may sit idle, with nothing pending, before eviction
    SESSION_IDLE_TTL = float(
        os.environ.get("SESSION_IDLE_TTL", str(settings.session_idle_ttl))
    )
