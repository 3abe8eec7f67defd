"""Credential store backed by the ``users`` table."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import DuplicateEmail
from ..extensions import db
from ..models import User

logger = logging.getLogger(__name__)


class UserStore:
    """Lookup and insert of user records.

    E-mail uniqueness is enforced by a unique constraint on ``users.email``;
    the lookup done by the signup route is only a fast path.
    """

    def find_by_email(self, email: str) -> Optional[User]:
        return db.session.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

    def insert(self, email: str, password_hash: str) -> User:
        user = User(email=email, password_hash=password_hash)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            logger.info("user_store.insert.duplicate_email")
            raise DuplicateEmail() from exc
        except SQLAlchemyError:
            db.session.rollback()
            raise
        return user

    def delete_all(self) -> int:
        """Remove every user. Only used by the seed script."""

        result = db.session.execute(delete(User))
        db.session.commit()
        return result.rowcount
