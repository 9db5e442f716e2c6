from datetime import timedelta
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.models  # noqa: F401
from app.api.deps import get_notifier
from app.core.security import create_access_token
from app.db import get_session
from app.main import app as fastapi_app
from app.models import ROLE_EVENT_MANAGER, ROLE_VOLUNTEER, Event, User
from app.models.types import utcnow
from app.services.applications import ApplicationLifecycle
from app.services.membership import add_team_member
from app.services.realtime import get_publisher


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def notify(self, user_id, text, category, event_id=None):
        self.sent.append((user_id, text, category, event_id))


class FailingNotifier:
    def __init__(self):
        self.calls = 0

    def notify(self, user_id, text, category, event_id=None):
        self.calls += 1
        raise RuntimeError("notification store unavailable")


class RecordingPublisher:
    def __init__(self):
        self.published = []

    def publish(self, channel, event, payload):
        self.published.append((channel, event, payload))


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return FailingNotifier()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def lifecycle(session, notifier):
    return ApplicationLifecycle(session, notifier)


@pytest.fixture
def make_user(session):
    def _make_user(role=ROLE_VOLUNTEER, **overrides) -> User:
        suffix = uuid4().hex[:8]
        defaults = dict(
            email=f"{role}-{suffix}@example.com",
            name=f"{role.replace('_', ' ').title()} {suffix}",
            role=role,
        )
        defaults.update(overrides)
        user = User(**defaults)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def manager(make_user):
    return make_user(ROLE_EVENT_MANAGER, name="Maria Manager")


@pytest.fixture
def volunteer(make_user):
    return make_user(ROLE_VOLUNTEER, name="Victor Volunteer")


@pytest.fixture
def make_event(session):
    def _make_event(creator: User, title="Beach Cleanup", days_ahead=1, **overrides) -> Event:
        defaults = dict(
            title=title,
            description="Pick up litter along the shore",
            date=utcnow() + timedelta(days=days_ahead),
            location="North Beach",
            created_by=creator.id,
        )
        defaults.update(overrides)
        event = Event(**defaults)
        session.add(event)
        session.flush()
        add_team_member(session, event.id, creator.id)
        session.commit()
        session.refresh(event)
        return event

    return _make_event


@pytest.fixture
def client(session, notifier, publisher):
    fastapi_app.dependency_overrides[get_session] = lambda: session
    fastapi_app.dependency_overrides[get_notifier] = lambda: notifier
    fastapi_app.dependency_overrides[get_publisher] = lambda: publisher
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth():
    def _auth(user: User) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _auth
