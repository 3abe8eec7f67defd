"""Validation of workout payloads."""

from __future__ import annotations

import math
from datetime import date
from typing import Any, Dict, Mapping

from ..errors import ValidationError
from ..models import INTENSITY_LEVELS

REQUIRED_FIELDS = ("exercise", "duration", "calories", "date", "intensity", "muscleGroup")
WRITABLE_FIELDS = frozenset(REQUIRED_FIELDS) | {"notes"}


def _missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are not numbers here.
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    # NaN, Infinity and ints too large for a float column cannot be stored
    # or serialised back as JSON.
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _check_text(name: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{name} must be a non-empty string")
    return value.strip()


def _check_duration(value: Any) -> Any:
    if not _is_number(value) or value <= 0:
        raise ValidationError("Duration must be positive number")
    return value


def _check_calories(value: Any) -> Any:
    if not _is_number(value) or value < 0:
        raise ValidationError("Calories must be non-negative number")
    return value


def _check_intensity(value: Any) -> str:
    if value not in INTENSITY_LEVELS:
        raise ValidationError("Intensity must be Low, Medium, or High")
    return value


def _check_date(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("Date must be a calendar date (YYYY-MM-DD)")
    try:
        return date.fromisoformat(value.strip()).isoformat()
    except ValueError as exc:
        raise ValidationError("Date must be a calendar date (YYYY-MM-DD)") from exc


def _check_notes(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError("Notes must be a string")
    return value


# Order matters: the first violated rule wins.
_CHECKS = (
    ("duration", _check_duration),
    ("calories", _check_calories),
    ("intensity", _check_intensity),
    ("exercise", lambda value: _check_text("Exercise", value)),
    ("muscleGroup", lambda value: _check_text("Muscle group", value)),
    ("date", _check_date),
    ("notes", _check_notes),
)


def _apply_checks(payload: Mapping[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for field, check in _CHECKS:
        if field in payload:
            cleaned[field] = check(payload[field])
    return cleaned


def validate_new_workout(payload: Any) -> Dict[str, Any]:
    """Return the cleaned fields of a workout to create.

    Raises :class:`ValidationError` for the first violated rule: missing
    required fields, then duration, calories, intensity and the remaining
    field checks.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    if any(_missing(payload.get(field)) for field in REQUIRED_FIELDS):
        raise ValidationError("Missing required fields")

    cleaned = _apply_checks({key: payload[key] for key in WRITABLE_FIELDS if key in payload})
    cleaned.setdefault("notes", "")
    return cleaned


def validate_workout_update(payload: Any) -> Dict[str, Any]:
    """Return the cleaned fields of a partial update.

    Every supplied field goes through the same rule as on create. Unknown
    and server-managed fields are rejected rather than merged.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")

    unknown = sorted(key for key in payload if key not in WRITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

    for field in REQUIRED_FIELDS:
        if field in payload and _missing(payload[field]):
            raise ValidationError(f"{field} cannot be empty")

    cleaned = _apply_checks(payload)
    if not cleaned:
        raise ValidationError("No fields to update")
    return cleaned
