"""Flask extensions for the application."""

from __future__ import annotations

from typing import TYPE_CHECKING

from firebase_admin import firestore
from flask import current_app, g
from flask_wtf.csrf import CSRFProtect

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

csrf = CSRFProtect()


def get_db() -> Client:
    """Return the Firestore client for the current request."""
    if "db" not in g:
        g.db = current_app.config.get("FIRESTORE_CLIENT") or firestore.client()
    return g.db
