from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from onboarding_hub.config import settings
from onboarding_hub.database import get_db
from onboarding_hub.dependencies import get_content_generator, get_mailer
from onboarding_hub.main import app
from onboarding_hub.schemas.content import GeneratedContent
from onboarding_hub.services.content_service import (
    AIServiceNotConfigured,
    ContentGenerationError,
)
from onboarding_hub.services.email_service import EmailDeliveryError


def _set_sqlite_pragmas(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class FakeMailer:
    def __init__(self):
        self.sent = []
        self.fail = False

    async def send(self, to, subject, html_body):
        if self.fail:
            raise EmailDeliveryError("Email service error: rejected")
        self.sent.append({"to": to, "subject": subject, "html": html_body})
        return {"id": f"email-{len(self.sent)}"}


class FakeStream:
    """Async iterator shaped like a streamed chat completion."""

    def __init__(self, parts):
        self._parts = list(parts)
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for part in self._parts:
            yield SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=part))])

    async def close(self):
        self.closed = True


class FakeContentGenerator:
    def __init__(self):
        self.configured = True
        self.error = None
        self.content = GeneratedContent(
            welcome_message="Welcome to the project.",
            next_steps=[
                {"title": "Kickoff call", "description": "Meet the team"},
                {"title": "Access setup", "description": "Grant repository access"},
            ],
        )
        self.stream_parts = ["The project ", "is on track."]
        self.last_stream = None
        self.last_project_data = None
        self.sow_texts = []

    async def generate_welcome_content(self, sow_text):
        if not self.configured:
            raise AIServiceNotConfigured("AI service not configured")
        if self.error:
            raise ContentGenerationError(self.error)
        self.sow_texts.append(sow_text)
        return self.content

    async def open_insight_stream(self, project_data, user_query):
        if self.error:
            raise ContentGenerationError(self.error)
        self.last_project_data = project_data
        self.last_stream = FakeStream(self.stream_parts)
        return self.last_stream


@pytest.fixture
def tmp_data(tmp_path):
    data_path = tmp_path / "OnboardingHub"
    data_path.mkdir()
    return data_path


@pytest.fixture
def test_db(tmp_data):
    db_path = tmp_data / "db.sqlite"
    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _set_sqlite_pragmas)
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False)

    from onboarding_hub.database import init_db
    init_db(db_path)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()
    engine.dispose()


@pytest.fixture
def fake_mailer():
    return FakeMailer()


@pytest.fixture
def fake_generator():
    return FakeContentGenerator()


@pytest.fixture
def client(tmp_data, test_db, fake_mailer, fake_generator):
    original_data_path = settings.data_path
    settings.data_path = tmp_data
    app.dependency_overrides[get_mailer] = lambda: fake_mailer
    app.dependency_overrides[get_content_generator] = lambda: fake_generator
    c = TestClient(app)
    yield c
    settings.data_path = original_data_path
