"""
Pytest configuration and fixtures

Every test gets its own in-memory SQLite database built from the ORM
metadata, so nothing leaks between tests. The FastAPI client shares the
test's session and has the OpenAI-backed generator and the notifier
swapped for fakes.
"""
import os
import sys

# Must be set before core.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("LOG_FORMAT", "text")

# Add the parent directory to the path so we can import from services
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from core.config import settings  # noqa: E402
from core.database import Base, get_db  # noqa: E402
import models  # noqa: E402,F401

from tests.qt_fakes import FakeOpenAI, PushRecorder, scripture_response, devotional_response  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Known-clean secrets/keys regardless of the developer's .env."""
    monkeypatch.setattr(settings, "CRON_SECRET", None)
    monkeypatch.setattr(settings, "CRON_REQUIRE_SECRET", False)
    monkeypatch.setattr(settings, "PUSH_SEND_SECRET", None)
    monkeypatch.setattr(settings, "OPENAI_API_KEY", None)
    monkeypatch.setattr(settings, "VAPID_PRIVATE_KEY", None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def fake_openai():
    """Two well-formed model responses: scripture, then devotional."""
    return FakeOpenAI([scripture_response(), devotional_response()])


@pytest.fixture
def push_recorder():
    return PushRecorder()


@pytest.fixture
def client(db_session, fake_openai, push_recorder):
    from main import app
    from services.qt_generator import QTContentGenerator, get_qt_generator
    from services.qt_notifier import QTNotifier, get_qt_notifier

    def _override_get_db():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_qt_generator] = lambda: QTContentGenerator(client=fake_openai)
    app.dependency_overrides[get_qt_notifier] = lambda: QTNotifier(push_sender=push_recorder)

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
