"""Authentication guard for protected FitTrack endpoints."""

from __future__ import annotations

from functools import wraps
import logging

from flask import current_app, g, request

from ..errors import Unauthorized
from ..services.session_manager import SessionIdentity

logger = logging.getLogger(__name__)


def current_identity() -> SessionIdentity | None:
    """Resolve the request's session without requiring one."""

    if "identity" not in g:
        g.identity = current_app.session_manager.validate()
    return g.identity


def login_required(view):
    """Decorator ensuring a valid session before the view runs.

    On success the identity is available as ``g.identity``; otherwise the
    request is answered with 401 and the view is never called.
    """

    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_identity() is None:
            logger.info("auth.unauthorized", extra={"path": request.path})
            raise Unauthorized()
        return view(*args, **kwargs)

    return wrapped
