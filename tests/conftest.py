"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import mongomock
import pytest

from app import create_app
from config import Config
from repositories.job_repository import JobRepository


class StepClock:
    """Returns a strictly increasing time on every call."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def database():
    client = mongomock.MongoClient()
    yield client["freelanceMarketplace_test"]
    client.close()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def repo(database, clock) -> JobRepository:
    return JobRepository(database, clock=clock)


@pytest.fixture
def job_data() -> Dict[str, Any]:
    """Valid job posting data."""
    return {
        "title": "Landing page redesign",
        "postedBy": "Alice Doe",
        "category": "Web Development",
        "summary": "Rebuild our marketing landing page in React.",
        "coverImage": "https://img.example.com/landing.png",
        "userEmail": "alice@example.com",
    }


@pytest.fixture
def app(database, clock):
    app = create_app(Config(app_env="testing", log_level="WARNING"), database)
    app.config["TESTING"] = True
    app.extensions["job_repository"].clock = clock
    return app


@pytest.fixture
def client(app):
    return app.test_client()
