import os

# The app module builds its own engine at import time; keep it off disk
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import date, time, timedelta
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from troop_events.auth import create_access_token
from troop_events.config import Config
from troop_events.database import Base, get_db, make_engine
from troop_events.models import Badge, Helper, User
from troop_events.services.event_store import EventStore


FUTURE = date.today() + timedelta(days=30)


@pytest.fixture
def engine(tmp_path):
    db_engine = make_engine(f"sqlite:///{tmp_path / 'troop_events_test.db'}")
    Base.metadata.create_all(bind=db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def other_session(engine, monkeypatch):
    """A second connection to the same database that gives up on a lock after one second."""
    monkeypatch.setattr(Config, "DB_LOCK_TIMEOUT", 1)
    other_engine = make_engine(str(engine.url))
    session = sessionmaker(autocommit=False, autoflush=False, bind=other_engine)()
    yield session
    session.close()
    other_engine.dispose()


@pytest.fixture
def seed(db):
    """Users for every role, two helper profiles and two badges."""
    admin = User(username="akela", first_name="Ann", last_name="Kay", email="akela@troop.test", role="admin")
    leader = User(username="baloo", first_name="Ben", last_name="Lowe", email="baloo@troop.test", role="leader")
    helper_user_1 = User(username="kaa", first_name="Kim", last_name="Ash", email="kaa@troop.test", role="helper")
    helper_user_2 = User(username="hathi", first_name="Hal", last_name="Thi", email="hathi@troop.test", role="helper")
    scout_1 = User(username="mowgli", first_name="Mo", last_name="Gli", email="mowgli@troop.test", role="public")
    scout_2 = User(username="bagheera", first_name="Bea", last_name="Ghee", email="bagheera@troop.test", role="public")
    scout_3 = User(username="rikki", first_name="Rick", last_name="Tikki", email="rikki@troop.test", role="public")
    db.add_all([admin, leader, helper_user_1, helper_user_2, scout_1, scout_2, scout_3])
    db.flush()

    helper_1 = Helper(user_id=helper_user_1.id, skills="first aid")
    helper_2 = Helper(user_id=helper_user_2.id, skills="cooking")
    badge_1 = Badge(name="Camper", category="outdoor")
    badge_2 = Badge(name="Navigator", category="skills")
    db.add_all([helper_1, helper_2, badge_1, badge_2])
    db.commit()

    return SimpleNamespace(
        admin=admin, leader=leader,
        helper_user_1=helper_user_1, helper_user_2=helper_user_2,
        scout_1=scout_1, scout_2=scout_2, scout_3=scout_3,
        helper_1=helper_1, helper_2=helper_2,
        badge_1=badge_1, badge_2=badge_2,
    )


@pytest.fixture
def make_event(db, seed):
    store = EventStore(db)

    def _make_event(badge_ids=None, **fields):
        data = {
            "title": "Troop meeting",
            "start_date": FUTURE,
            "start_time": time(18, 0),
            "end_time": time(20, 0),
        }
        data.update(fields)
        return store.create(data, badge_ids=badge_ids, created_by=seed.leader.id)

    return _make_event


@pytest.fixture
def client(db):
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}
    return _auth_headers
