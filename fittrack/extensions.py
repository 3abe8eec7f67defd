"""Application-wide Flask extensions."""

from flask_sqlalchemy import SQLAlchemy


# A single SQLAlchemy handle shared across the application. The engine and its
# connection pool are bound once per app in :func:`fittrack.create_app`, so
# every store works against the same pooled connection handle.
db = SQLAlchemy()
