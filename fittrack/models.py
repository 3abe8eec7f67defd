"""Database models for FitTrack."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, Optional
from uuid import uuid4

from .extensions import db


INTENSITY_LEVELS = ("Low", "Medium", "High")

# Public (camelCase) field name -> model attribute. Client-supplied filter,
# sort and projection names are only ever resolved through this mapping.
WORKOUT_FIELDS: Dict[str, str] = {
    "id": "id",
    "exercise": "exercise",
    "muscleGroup": "muscle_group",
    "duration": "duration",
    "calories": "calories",
    "intensity": "intensity",
    "date": "date",
    "notes": "notes",
    "userId": "user_id",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def new_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite drops tzinfo on the way back; treat naive values as UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="microseconds").replace("+00:00", "Z")


def _number(value: Optional[float]) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    email = db.Column(db.String(320), nullable=False, unique=True, index=True)
    password_hash = db.Column(db.String(128), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)


class Workout(db.Model):
    """A single exercise session."""

    __tablename__ = "workouts"

    id = db.Column(db.String(32), primary_key=True, default=new_id)
    user_id = db.Column(db.String(32), nullable=True, index=True)
    exercise = db.Column(db.String(255), nullable=False, index=True)
    muscle_group = db.Column(db.String(255), nullable=False)
    duration = db.Column(db.Float, nullable=False)
    calories = db.Column(db.Float, nullable=False)
    intensity = db.Column(db.String(16), nullable=False)
    date = db.Column(db.String(10), nullable=False)
    notes = db.Column(db.Text, nullable=False, default="")
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    def touch(self) -> None:
        """Advance ``updated_at``, keeping it strictly after ``created_at``."""

        now = utcnow()
        floor = max(
            (as_utc(value) for value in (self.created_at, self.updated_at) if value is not None),
            default=None,
        )
        if floor is not None and now <= floor:
            now = floor + timedelta(microseconds=1)
        self.updated_at = now

    def to_dict(self, fields: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Serialise the workout; ``fields`` restricts the keys, ``id`` is always kept."""

        document = {
            "id": self.id,
            "exercise": self.exercise,
            "muscleGroup": self.muscle_group,
            "duration": _number(self.duration),
            "calories": _number(self.calories),
            "intensity": self.intensity,
            "date": self.date,
            "notes": self.notes or "",
            "userId": self.user_id,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }
        if fields is None:
            return document
        wanted = {"id", *fields}
        return {key: value for key, value in document.items() if key in wanted}
