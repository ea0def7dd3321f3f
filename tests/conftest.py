# tests/conftest.py
import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# -------------------------------------------------------------------------------------------------
# Environment setup (must happen BEFORE importing the app)
# -------------------------------------------------------------------------------------------------
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DATABASE_URL"] = ""
os.environ["EMAIL_PROVIDER_URL"] = ""

from agenthub.api import deps  # noqa: E402
from agenthub.api.app import app  # noqa: E402
from agenthub.db import Agent, Base, Opportunity, Profile, get_db  # noqa: E402

# -------------------------------------------------------------------------------------------------
# In-memory DB shared by every session in the test
# -------------------------------------------------------------------------------------------------
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture(scope="function", autouse=True)
def reset_db():
    """Drop + recreate tables before each test function."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function")
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def _override_get_db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


app.dependency_overrides[get_db] = _override_get_db


# -------------------------------------------------------------------------------------------------
# Email senders: record calls instead of delivering
# -------------------------------------------------------------------------------------------------
class RecordingSender:
    def __init__(self, result: bool = True, error: Exception | None = None):
        self.result = result
        self.error = error
        self.calls: list[dict] = []

    def __call__(self, db, **kwargs) -> bool:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture(scope="function")
def confirmation_sender():
    sender = RecordingSender()
    app.dependency_overrides[deps.get_confirmation_sender] = lambda: sender
    yield sender
    app.dependency_overrides.pop(deps.get_confirmation_sender, None)


@pytest.fixture(scope="function")
def status_sender():
    sender = RecordingSender()
    app.dependency_overrides[deps.get_status_sender] = lambda: sender
    yield sender
    app.dependency_overrides.pop(deps.get_status_sender, None)


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


# -------------------------------------------------------------------------------------------------
# Data helpers
# -------------------------------------------------------------------------------------------------
def make_agent(db, email: str = "maria@example.com", username: str | None = "maria") -> Agent:
    profile = Profile(email=email, username=username, first_name="Maria", last_name="Garcia", role="agent")
    db.add(profile)
    db.flush()
    agent = Agent(user_id=profile.id)
    db.add(agent)
    db.commit()
    db.refresh(agent)
    return agent


@pytest.fixture(scope="function")
def staff(db) -> Profile:
    profile = Profile(email="admin@agenthub.com", username="admin", first_name="Sys", last_name="Admin", role="admin")
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture(scope="function")
def agent(db) -> Agent:
    return make_agent(db)


@pytest.fixture(scope="function")
def opportunity(db) -> Opportunity:
    opp = Opportunity(name="TechCare Premium Support", client="TechCare Inc.", status="active")
    db.add(opp)
    db.commit()
    db.refresh(opp)
    return opp


@pytest.fixture(scope="function")
def staff_headers(staff) -> dict:
    return {"X-User-ID": staff.id}


@pytest.fixture(scope="function")
def agent_headers(agent) -> dict:
    return {"X-User-ID": agent.user_id}
