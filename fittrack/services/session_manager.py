"""Login session lifecycle on top of Flask-Session.

The session id is an opaque random token generated by Flask-Session and sent
in an http-only cookie; the association with the user lives in the
server-side ``sessions`` table. A session is ``Absent`` until :meth:`create`,
``Active`` until :meth:`destroy` or expiry, then gone.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from flask import current_app, session
from sqlalchemy.exc import SQLAlchemyError

from ..errors import SessionStoreError

logger = logging.getLogger(__name__)

USER_ID_KEY = "user_id"
USER_EMAIL_KEY = "user_email"
ISSUED_AT_KEY = "issued_at"


@dataclass(frozen=True)
class SessionIdentity:
    """The authenticated principal attached to a request."""

    user_id: str
    email: str


class SessionManager:
    """Create, validate and destroy the login session of the current request.

    Parameters
    ----------
    absolute_lifetime:
        Hard cap measured from login. The record's own expiry (see
        ``PERMANENT_SESSION_LIFETIME``) is not extended by reads unless
        ``SESSION_REFRESH_EACH_REQUEST`` is on; this cap holds either way.
    """

    def __init__(self, absolute_lifetime: timedelta) -> None:
        self._absolute_lifetime = absolute_lifetime

    def create(self, user_id: str, email: str) -> str:
        """Start a fresh session for ``user_id`` and return its id.

        Any session the browser already carried is dropped and a new id is
        issued, so a pre-login id cannot be fixed by an attacker.
        """
        session.clear()
        session[USER_ID_KEY] = user_id
        session[USER_EMAIL_KEY] = email
        session[ISSUED_AT_KEY] = int(time.time())
        session.permanent = True
        try:
            current_app.session_interface.regenerate(session)
        except SQLAlchemyError as exc:
            logger.exception("session.create.store_failed", extra={"user_id": user_id})
            raise SessionStoreError() from exc
        logger.info("session.create", extra={"user_id": user_id})
        return session.sid

    def validate(self) -> Optional[SessionIdentity]:
        """Return the identity bound to the request's session, if any.

        Expired or destroyed sessions never reach this point: Flask-Session
        drops records past their expiry when the cookie is resolved.
        """
        user_id = session.get(USER_ID_KEY)
        if not user_id:
            return None

        issued_at = session.get(ISSUED_AT_KEY)
        if not isinstance(issued_at, (int, float)) or self._past_absolute_lifetime(issued_at):
            logger.info("session.validate.expired", extra={"user_id": user_id})
            try:
                self.destroy()
            except SessionStoreError:
                logger.warning("session.validate.cleanup_failed", exc_info=True)
            return None

        return SessionIdentity(user_id=user_id, email=session.get(USER_EMAIL_KEY, ""))

    def destroy(self) -> None:
        """Remove the server-side record and expire the cookie.

        Destroying a request that carries no session is a no-op.
        """
        if not session:
            return

        user_id = session.get(USER_ID_KEY)
        try:
            # Deletes the stored record under the current id right away and
            # moves the request onto an unused id, which the cleared session
            # below then deletes (together with the cookie) on response.
            current_app.session_interface.regenerate(session)
        except SQLAlchemyError as exc:
            logger.exception("session.destroy.store_failed", extra={"user_id": user_id})
            raise SessionStoreError() from exc
        session.clear()
        logger.info("session.destroy", extra={"user_id": user_id})

    def _past_absolute_lifetime(self, issued_at: float) -> bool:
        return time.time() - issued_at > self._absolute_lifetime.total_seconds()
