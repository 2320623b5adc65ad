import datetime

import pytest

from core.fsrs import Scheduler
from core.storage import MemoryStorage
from core.vocab import VocabularyStore


UTC = datetime.timezone.utc


@pytest.fixture(autouse=True)
def isolate_env(monkeypatch):
    # Keep a developer's .env from leaking into test runs
    for name in (
        "STORAGE_BACKEND",
        "DATABASE_URL",
        "MONGO_URI",
        "VOCAB_STORAGE_KEY",
        "REQUEST_RETENTION",
        "MAXIMUM_INTERVAL",
        "LEARN_LANGUAGE",
        "USER_LANGUAGE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TEST_MODE", "true")


@pytest.fixture
def now():
    return datetime.datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture
def scheduler():
    return Scheduler()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage, scheduler):
    return VocabularyStore(storage, scheduler=scheduler)
