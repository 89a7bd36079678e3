"""Pytest configuration and fixtures."""

import os

# Settings require a database URL at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

from collections.abc import Callable, Generator
from datetime import datetime
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from studystack.api.v1.endpoints.utils import get_current_user_id
from studystack.core.database import get_session
from studystack.main import app
from studystack.models import Card

TEST_USER_ID = "000000000000000000000000"
OTHER_USER_ID = "111111111111111111111111"

API = "/api/v1"

# In-memory SQLite shared across connections
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    SQLModel.metadata.create_all(test_engine)

    session = Session(test_engine)
    try:
        yield session
    finally:
        session.close()
        SQLModel.metadata.drop_all(test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, Any, None]:
    """Create a test client with database session."""

    def override_get_session() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_current_user_id] = lambda: TEST_USER_ID

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_card(db_session: Session) -> Callable[..., Card]:
    """Factory persisting a card with a full path by default."""

    def _make_card(
        content: str = "Cats are mammals.",
        subject: str = "Bio",
        module: Optional[str] = "Animals",
        chapter: Optional[str] = "Mammals",
        section: Optional[str] = "Pets",
        topic: Optional[str] = "Cats",
        owner: str = TEST_USER_ID,
        stage: int = 0,
        schedule_next_review: Optional[datetime] = None,
        next_review: Optional[datetime] = None,
        keywords: Optional[list] = None,
        order: int = 0,
    ) -> Card:
        card = Card(
            subject=subject,
            module=module,
            chapter=chapter,
            section=section,
            topic=topic,
            content=content,
            keywords=keywords or [],
            order=order,
            created_by=owner,
            schedule_stage=stage,
            schedule_next_review=schedule_next_review,
            next_review=next_review,
        )
        db_session.add(card)
        db_session.commit()
        db_session.refresh(card)
        return card

    return _make_card


def topic_url(subject="Bio", module="Animals", chapter="Mammals", section="Pets", topic="Cats") -> str:
    return f"{API}/subjects/{subject}/modules/{module}/chapters/{chapter}/sections/{section}/topics/{topic}"
