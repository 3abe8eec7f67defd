from __future__ import annotations

import os
import sys
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest import TestCase
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fittrack import create_app
from fittrack.extensions import db


class AppFactoryConfigTests(TestCase):
    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.database_url = f"sqlite:///{Path(self.tmpdir.name) / 'fittrack.db'}"

    def _create(self, environ):
        base = {
            "SESSION_SECRET": "testing-secret",
            "BCRYPT_ROUNDS": "4",
            "FLASK_ENV": "development",
            "DATABASE_URL": self.database_url,
        }
        base.update(environ)
        cleared = {name: value for name, value in os.environ.items() if not name.startswith("SESSION_")}
        cleared.pop("ENFORCE_WORKOUT_OWNERSHIP", None)
        for name in ("APP_ENV", "FLASK_SECRET_KEY", "SECRET_KEY", "LOG_LEVEL"):
            cleared.pop(name, None)
        cleared.update(base)
        with patch.dict(os.environ, cleared, clear=True):
            app = create_app()
        self.addCleanup(self._dispose, app)
        return app

    @staticmethod
    def _dispose(app) -> None:
        with app.app_context():
            db.session.remove()
            db.engine.dispose()

    def test_production_requires_database_url(self) -> None:
        with self.assertRaises(RuntimeError):
            self._create({"FLASK_ENV": "production", "DATABASE_URL": ""})

    def test_development_cookie_policy(self) -> None:
        app = self._create({})

        self.assertEqual("testing-secret", app.config["SECRET_KEY"])
        self.assertEqual("sqlalchemy", app.config["SESSION_TYPE"])
        self.assertTrue(app.config["SESSION_COOKIE_HTTPONLY"])
        self.assertEqual("Strict", app.config["SESSION_COOKIE_SAMESITE"])
        self.assertFalse(app.config["SESSION_COOKIE_SECURE"])
        self.assertEqual("fittrack_session", app.config["SESSION_COOKIE_NAME"])
        self.assertEqual(self.database_url, app.config["SQLALCHEMY_DATABASE_URI"])
        self.assertFalse(app.config["ENFORCE_WORKOUT_OWNERSHIP"])

    def test_production_marks_cookie_secure(self) -> None:
        app = self._create({"FLASK_ENV": "production"})

        self.assertTrue(app.config["IS_PRODUCTION"])
        self.assertTrue(app.config["SESSION_COOKIE_SECURE"])

    def test_environment_overrides(self) -> None:
        app = self._create(
            {
                "SESSION_LIFETIME_HOURS": "2",
                "BCRYPT_ROUNDS": "6",
                "ENFORCE_WORKOUT_OWNERSHIP": "true",
                "SESSION_COOKIE_NAME": "custom_session",
            }
        )

        self.assertEqual(2 * 3600, app.config["PERMANENT_SESSION_LIFETIME"].total_seconds())
        self.assertEqual(6, app.config["BCRYPT_ROUNDS"])
        self.assertTrue(app.config["ENFORCE_WORKOUT_OWNERSHIP"])
        self.assertEqual("custom_session", app.config["SESSION_COOKIE_NAME"])

    def test_invalid_integer_setting_fails_fast(self) -> None:
        with self.assertRaises(RuntimeError):
            self._create({"BCRYPT_ROUNDS": "ten"})

    def test_secret_key_falls_back_to_random_value(self) -> None:
        app = self._create({"SESSION_SECRET": ""})

        self.assertEqual(64, len(app.config["SECRET_KEY"]))
