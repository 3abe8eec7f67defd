from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fittrack import create_app
from fittrack.extensions import db

_ISOLATED_ENV = (
    "APP_ENV",
    "ENFORCE_WORKOUT_OWNERSHIP",
    "SESSION_ABSOLUTE_LIFETIME_HOURS",
    "SESSION_COOKIE_DOMAIN",
    "SESSION_COOKIE_NAME",
    "SESSION_COOKIE_SAMESITE",
    "SESSION_COOKIE_SECURE",
    "SESSION_LIFETIME_HOURS",
    "SESSION_REFRESH_EACH_REQUEST",
)

RUNNING = {
    "exercise": "Running",
    "duration": 30,
    "calories": 300,
    "date": "2024-02-10",
    "intensity": "High",
    "muscleGroup": "Legs",
}


@pytest.fixture
def make_app(tmp_path, monkeypatch):
    """Build apps against a throwaway SQLite database with extra env vars."""

    created = []

    def _make(**env):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'fittrack.db'}")
        monkeypatch.setenv("SESSION_SECRET", "testing-secret")
        monkeypatch.setenv("FLASK_ENV", "development")
        monkeypatch.setenv("BCRYPT_ROUNDS", "4")
        for name in _ISOLATED_ENV:
            monkeypatch.delenv(name, raising=False)
        for name, value in env.items():
            monkeypatch.setenv(name, value)

        app = create_app()
        app.config["TESTING"] = True
        created.append(app)
        return app

    yield _make

    for app in created:
        with app.app_context():
            db.session.remove()
            db.engine.dispose()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register():
    """Sign up and log in ``email`` on ``client``."""

    def _register(client, email="runner@example.com", password="password123"):
        signup = client.post("/auth/signup", json={"email": email, "password": password})
        assert signup.status_code == 201, signup.get_json()
        login = client.post("/auth/login", json={"email": email, "password": password})
        assert login.status_code == 200, login.get_json()
        return client

    return _register


@pytest.fixture
def auth_client(client, register):
    return register(client)


@pytest.fixture
def running_workout():
    return dict(RUNNING)
