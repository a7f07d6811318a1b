import os

# Storage configuration
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "sql")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./events.db")

# Redis configuration
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = os.getenv("PORT", "3000")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_storage_backend() -> str:
    return STORAGE_BACKEND.strip().lower()


def get_database_url() -> str:
    return DATABASE_URL


def get_redis_url() -> str:
    return REDIS_URL


def get_host() -> str:
    return HOST


def get_port() -> int:
    return int(PORT)


def get_log_level() -> str:
    return LOG_LEVEL.upper()
