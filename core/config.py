"""
Environment-driven settings.

Values are read from the process environment, with a `.env` file in the
working directory loaded first. Every getter reads the environment on each
call so tests can override variables with monkeypatch.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load environment
load_dotenv()


DEFAULT_STORAGE_BACKEND = "sql"
DEFAULT_MONGO_DB_NAME = "korean_trainer"
DEFAULT_STORAGE_KEY = "vocab"
DEFAULT_REQUEST_RETENTION = 0.9
DEFAULT_MAXIMUM_INTERVAL = 36500


def is_test_mode() -> bool:
    """Check if running in test mode."""
    return os.getenv("TEST_MODE", "false").lower() == "true"


def get_storage_backend() -> str:
    return os.getenv("STORAGE_BACKEND", DEFAULT_STORAGE_BACKEND).strip().lower()


def get_database_url() -> str:
    """
    Get the SQLAlchemy database URL.

    Falls back to a local SQLite file; TEST_MODE selects a separate file so
    test runs never touch real review history.
    """
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    db_name = "test_vocab.db" if is_test_mode() else "vocab.db"
    return f"sqlite:///{db_name}"


def get_mongo_uri() -> str:
    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")
    return mongo_uri


def get_mongo_db_name() -> str:
    return os.getenv("MONGO_DB_NAME", DEFAULT_MONGO_DB_NAME)


def get_storage_key() -> str:
    return os.getenv("VOCAB_STORAGE_KEY", DEFAULT_STORAGE_KEY)


def get_request_retention() -> float:
    """
    Target probability of recall when a card comes due.

    Must lie strictly between 0 and 1.
    """
    retention = _get_float("REQUEST_RETENTION", DEFAULT_REQUEST_RETENTION)
    if not 0.0 < retention < 1.0:
        raise ValueError(f"REQUEST_RETENTION must be in (0, 1), got {retention}")
    return retention


def get_maximum_interval() -> int:
    maximum = _get_int("MAXIMUM_INTERVAL", DEFAULT_MAXIMUM_INTERVAL)
    if maximum < 1:
        raise ValueError(f"MAXIMUM_INTERVAL must be at least 1, got {maximum}")
    return maximum


def get_learn_language() -> str:
    return os.getenv("LEARN_LANGUAGE", "Korean")


def get_user_language() -> str:
    return os.getenv("USER_LANGUAGE", "English")


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
