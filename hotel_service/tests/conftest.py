import os

# Must be set before the app module builds its default engine
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "Test")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from common.config.settings import Settings, get_settings
from common.db.database import Base, build_engine, get_db
from hotel_service.app.main import app
from hotel_service.app.backend.services.dates import get_today

# Pinned "today": the seeded January 2026 bookings lie in the future
TODAY = date(2026, 1, 1)


@pytest.fixture
def engine(tmp_path):
    test_engine = build_engine(f"sqlite:///{tmp_path / 'hotel_booking_test.db'}")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def settings():
    return Settings(app_env="Test")


@pytest.fixture
def client(session_factory, settings):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_today] = lambda: TODAY
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded_client(client):
    reset = client.post("/api/admin/reset")
    assert reset.status_code == 200, reset.text
    seed = client.post("/api/admin/seed")
    assert seed.status_code == 200, seed.text
    return client


@pytest.fixture
def hotel_id_by_name(seeded_client):
    def lookup(name):
        response = seeded_client.get("/api/hotels", params={"name": name})
        assert response.status_code == 200, response.text
        items = response.json()["items"]
        assert items, f"No hotels returned for search term '{name}'"
        return items[0]["id"]
    return lookup
