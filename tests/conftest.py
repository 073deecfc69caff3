import json
import os

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["OPENROUTER_API_KEY"] = "test-api-key"
os.environ["REQUIRE_AUTH"] = "false"
os.environ["PROCESSING_MODE"] = "sequential"
os.environ["DETAIL_SCORE_THRESHOLD"] = "65"

from fastapi.testclient import TestClient

from cv_screener.core.config import settings
from cv_screener.core.security import generate_api_token, hash_api_token
from cv_screener.database import Base, build_engine, get_db, get_session_factory, init_db
from cv_screener.main import app
from cv_screener.models.profile import Profile
from cv_screener.services import text_extractor
from cv_screener.services.ai_orchestrator import AIOrchestrator, AIDomain


def analysis_json(ats="70%", name="Jane Doe", edu=None, skills=None, experience=None, fenced=True):
    """A model response in the shape the analysis prompt asks for."""
    payload = json.dumps({
        "ATS": ats,
        "Name": name,
        "Phone": "+1 555 0100",
        "Mail": "jane@example.com",
        "Edu": ["BSc Computer Science"] if edu is None else edu,
        "SKILLS": [["Languages", "Python, SQL"], ["Cloud", "AWS"]] if skills is None else skills,
        "EXPERIENCE": ["Backend Engineer at Acme", "Intern at Initech"] if experience is None else experience,
    })
    return f"```json\n{payload}\n```" if fenced else payload


class FakeAI:
    """
    Stands in for AIOrchestrator.call_model.
    OCR calls return `ocr_text`; analysis calls go through `analyze(cv_text)`.
    """

    def __init__(self):
        self.ocr_text = "Scanned CV text"
        self.analyze = lambda cv_text: analysis_json()
        self.calls = []

    def __call__(self, messages, temperature=None, domain=AIDomain.GENERAL, model_name=None):
        self.calls.append({"messages": messages, "domain": domain, "model_name": model_name})
        if domain == AIDomain.OCR:
            if isinstance(self.ocr_text, Exception):
                raise self.ocr_text
            return self.ocr_text
        user_content = messages[-1]["content"]
        cv_text = user_content.split("---\n", 1)[1].rsplit("\n---", 1)[0]
        return self.analyze(cv_text)


@pytest.fixture
def fake_ai(monkeypatch):
    fake = FakeAI()
    monkeypatch.setattr(AIOrchestrator, "call_model", staticmethod(fake))
    return fake


@pytest.fixture
def fake_pdf(monkeypatch):
    """PDF bytes in tests are plain UTF-8 text; a b"%BAD" prefix makes parsing fail."""
    def _extract(data):
        if data.startswith(b"%BAD"):
            raise ValueError("EOF marker not found")
        return data.decode("utf-8")
    monkeypatch.setattr(text_extractor, "extract_pdf_text", _extract)


@pytest.fixture
def engine():
    """Fresh in-memory database per test."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_profile(db_session):
    """Create a profile and return (profile, api_token)."""
    def _make_profile(email="recruiter@example.com", credits=5):
        token = generate_api_token()
        profile = Profile(email=email, credits=credits, api_token_hash=hash_api_token(token))
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile, token
    return _make_profile


@pytest.fixture
def auth_required(monkeypatch):
    monkeypatch.setattr(settings, "require_auth", True)


@pytest.fixture
def client(session_factory):
    """TestClient wired to the per-test database for requests and background work."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_analysis():
    return analysis_json
