"""
Test configuration and fixtures.

Provides:
- In-memory SQLite schema, rebuilt for every test
- FastAPI TestClient
- Admin account and bearer headers
- A fake Google OAuth/Calendar backend patched over requests
"""
import itertools
import os
from datetime import date
from typing import Generator

import pytest

# Configure before the application modules read settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["GOOGLE_CLIENT_ID"] = "client-id.apps.googleusercontent.com"
os.environ["GOOGLE_CLIENT_SECRET"] = "client-secret"
os.environ["GOOGLE_REFRESH_TOKEN"] = "refresh-token"
os.environ["GOOGLE_CALENDAR_ID"] = "owner@example.com"
os.environ["GOOGLE_CALENDAR_IDEMPOTENT_EVENTS"] = "false"

import requests
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from claryon.main import app
from claryon.core.auth import AuthUtils
from claryon.core.database import engine, Base, SessionLocal
from claryon.models import Admin, BlogPost, BlogPostStatus, Testimonial


# =============================================================================
# Database & client
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh schema per test; the app's get_db shares the same in-memory connection."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db) -> TestClient:
    return TestClient(app)


# =============================================================================
# Auth
# =============================================================================

@pytest.fixture(scope="function")
def admin_user(db: Session) -> Admin:
    admin = Admin(
        username="editor",
        email="editor@example.com",
        name="Site Editor",
        hashed_password=AuthUtils.hash_password("s3cret-pass"),
        is_active=True,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@pytest.fixture(scope="function")
def admin_headers(admin_user: Admin) -> dict:
    token = AuthUtils.create_access_token({"sub": admin_user.username, "admin_id": admin_user.id})
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Content factories
# =============================================================================

@pytest.fixture
def make_post(db: Session):
    counter = itertools.count(1)

    def _make_post(**overrides) -> BlogPost:
        n = next(counter)
        values = {
            "title": f"Post number {n}",
            "slug": f"post-number-{n}",
            "status": BlogPostStatus.PUBLISHED,
            "publication_date": date(2024, 1, n),
            "body_content_type": "markdown",
            "body_content": {"type": "markdown", "text": f"Body {n}"},
            "tags": ["news"],
        }
        values.update(overrides)
        post = BlogPost(**values)
        db.add(post)
        db.commit()
        db.refresh(post)
        return post

    return _make_post


@pytest.fixture
def make_testimonial(db: Session):
    def _make_testimonial(**overrides) -> Testimonial:
        values = {
            "client_name": "Jane Client",
            "quote": "Excellent advice from start to finish.",
            "is_published": True,
            "rating": 5,
        }
        values.update(overrides)
        testimonial = Testimonial(**values)
        db.add(testimonial)
        db.commit()
        db.refresh(testimonial)
        return testimonial

    return _make_testimonial


# =============================================================================
# Fake Google
# =============================================================================

class FakeResponse:
    def __init__(self, status_code: int, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or ("" if payload is None else str(payload))

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeGoogle:
    """Records every call and answers like the token endpoint and events API would."""

    def __init__(self):
        self.token_calls = []
        self.event_calls = []
        self.get_calls = []
        self.events = {}
        self.token_response = None
        self.event_response = None
        self._ids = itertools.count(1)

    @property
    def calls(self) -> int:
        return len(self.token_calls) + len(self.event_calls) + len(self.get_calls)

    def fail_token(self, status_code=400, body='{"error": "invalid_grant", "error_description": "Bad Request"}'):
        self.token_response = FakeResponse(status_code, text=body)

    def fail_event(self, status_code=403, message="The caller does not have permission"):
        self.event_response = FakeResponse(
            status_code,
            payload={"error": {"code": status_code, "message": message,
                               "errors": [{"reason": "forbidden", "message": message}]}},
        )

    def post(self, url, data=None, json=None, params=None, headers=None, timeout=None):
        if "oauth2" in url or url.endswith("/token"):
            self.token_calls.append({"url": url, "data": data, "timeout": timeout})
            if self.token_response is not None:
                return self.token_response
            return FakeResponse(200, payload={"access_token": "ya29.fake-token", "expires_in": 3599})

        self.event_calls.append({"url": url, "json": json, "params": params, "headers": headers})
        if self.event_response is not None:
            return self.event_response

        event_id = json.get("id") or f"evt{next(self._ids):04d}"
        if event_id in self.events:
            return FakeResponse(409, payload={"error": {"code": 409, "message": "The requested identifier already exists."}})

        event = {
            "id": event_id,
            "htmlLink": f"https://www.google.com/calendar/event?eid={event_id}",
            "summary": json.get("summary"),
        }
        if "conferenceData" in json:
            event["hangoutLink"] = f"https://meet.google.com/{event_id}"
        self.events[event_id] = event
        return FakeResponse(200, payload=event)

    def get(self, url, headers=None, timeout=None):
        self.get_calls.append({"url": url, "headers": headers})
        event_id = url.rsplit("/", 1)[-1]
        if event_id in self.events:
            return FakeResponse(200, payload=self.events[event_id])
        return FakeResponse(404, payload={"error": {"code": 404, "message": "Not Found"}})


@pytest.fixture
def fake_google(monkeypatch) -> FakeGoogle:
    fake = FakeGoogle()
    monkeypatch.setattr(requests, "post", fake.post)
    monkeypatch.setattr(requests, "get", fake.get)
    return fake
