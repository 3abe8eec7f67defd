"""Workout store backed by the ``workouts`` table."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ..errors import InvalidId
from ..extensions import db
from ..models import WORKOUT_FIELDS, Workout, new_id, utcnow

logger = logging.getLogger(__name__)

_ID_PATTERN = re.compile(r"[0-9a-f]{32}")

# Fields the store stamps itself; callers cannot write them.
SERVER_MANAGED_FIELDS = frozenset({"id", "createdAt", "updatedAt"})


def is_valid_id(value: Any) -> bool:
    return isinstance(value, str) and _ID_PATTERN.fullmatch(value) is not None


def _column(field: str):
    """Resolve a public field name to its column, or ``None`` if unknown."""

    attribute = WORKOUT_FIELDS.get(field)
    if attribute is None:
        return None
    return getattr(Workout, attribute)


def _assign(workout: Workout, fields: Mapping[str, Any]) -> None:
    for field, value in fields.items():
        if field in SERVER_MANAGED_FIELDS:
            continue
        attribute = WORKOUT_FIELDS.get(field)
        if attribute is None:
            continue
        setattr(workout, attribute, value)


class WorkoutStore:
    """CRUD access to workouts.

    Each call is atomic at the single-row level; there are no multi-call
    transactions. Field names passed in filters, sort keys and projections
    are public camelCase names and anything outside :data:`WORKOUT_FIELDS`
    is ignored.
    """

    @staticmethod
    def ensure_valid_id(workout_id: Any) -> None:
        if not is_valid_id(workout_id):
            raise InvalidId()

    def find(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        sort: Optional[str] = None,
        projection: Optional[Iterable[str]] = None,
    ) -> List[Dict[str, Any]]:
        statement = select(Workout)
        for field, value in (filters or {}).items():
            column = _column(field)
            if column is None:
                logger.debug("workout_store.find.unknown_filter", extra={"field": field})
                continue
            statement = statement.where(column == value)

        sort_column = _column(sort) if sort else None
        if sort_column is not None:
            # Tie-break on id so equal sort keys come back in a stable order.
            statement = statement.order_by(sort_column.asc(), Workout.id.asc())

        # A requested projection with no known names still narrows to ``id``.
        fields = [field for field in projection if field in WORKOUT_FIELDS] if projection else None
        workouts = db.session.execute(statement).scalars().all()
        return [workout.to_dict(fields) for workout in workouts]

    def get(self, workout_id: str) -> Optional[Workout]:
        self.ensure_valid_id(workout_id)
        return db.session.get(Workout, workout_id)

    def find_by_id(self, workout_id: str) -> Optional[Dict[str, Any]]:
        workout = self.get(workout_id)
        return workout.to_dict() if workout else None

    def insert(self, fields: Mapping[str, Any], user_id: Optional[str] = None) -> str:
        now = utcnow()
        workout = Workout(id=new_id(), notes="", created_at=now, updated_at=now)
        _assign(workout, fields)
        workout.user_id = user_id
        db.session.add(workout)
        self._commit()
        return workout.id

    def insert_many(self, documents: Iterable[Mapping[str, Any]], user_id: Optional[str] = None) -> int:
        now = utcnow()
        count = 0
        for fields in documents:
            workout = Workout(id=new_id(), notes="", created_at=now, updated_at=now)
            _assign(workout, fields)
            workout.user_id = user_id
            db.session.add(workout)
            count += 1
        self._commit()
        return count

    def update_by_id(
        self,
        workout_id: str,
        fields: Mapping[str, Any],
        owner_id: Optional[str] = None,
    ) -> int:
        """Shallow-merge ``fields`` into the workout and re-stamp ``updatedAt``.

        When ``owner_id`` is given only a workout created by that user
        matches. Returns the number of matched workouts (0 or 1).
        """
        self.ensure_valid_id(workout_id)
        statement = select(Workout).where(Workout.id == workout_id)
        if owner_id is not None:
            statement = statement.where(Workout.user_id == owner_id)
        workout = db.session.execute(statement).scalar_one_or_none()
        if workout is None:
            return 0

        _assign(workout, {k: v for k, v in fields.items() if k != "userId"})
        workout.touch()
        self._commit()
        return 1

    def delete_by_id(self, workout_id: str, owner_id: Optional[str] = None) -> int:
        self.ensure_valid_id(workout_id)
        statement = delete(Workout).where(Workout.id == workout_id)
        if owner_id is not None:
            statement = statement.where(Workout.user_id == owner_id)
        result = db.session.execute(statement)
        self._commit()
        return result.rowcount

    def delete_all(self) -> int:
        result = db.session.execute(delete(Workout))
        self._commit()
        return result.rowcount

    @staticmethod
    def _commit() -> None:
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise
