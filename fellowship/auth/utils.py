"""Principal resolution and capability checks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from firebase_admin import auth
from flask import current_app, request, session

from fellowship.constants import ROLE_PASTOR, USERS_COLLECTION
from fellowship.core.documents import get_document
from fellowship.errors import ForbiddenError, UserNotFound

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_principal() -> str | None:
    """Return the uid of the authenticated caller, or None.

    A server-side session created by ``/auth/session_login`` wins; otherwise a
    Firebase ID token in the ``Authorization`` header is verified.
    """
    user_id = session.get("user_id")
    if user_id:
        return user_id

    token = _bearer_token()
    if token is None:
        return None

    try:
        decoded_token = auth.verify_id_token(token)
    except (
        auth.InvalidIdTokenError,
        auth.ExpiredIdTokenError,
        auth.RevokedIdTokenError,
        ValueError,
    ) as e:
        current_app.logger.warning(f"Rejected ID token: {e}")
        return None
    return decoded_token.get("uid")


def require_user(db: Client, user_id: str) -> dict[str, Any]:
    """Load the caller's own user record."""
    user = get_document(db, USERS_COLLECTION, user_id)
    if user is None:
        raise UserNotFound()
    return user


def is_pastor(user: dict[str, Any] | None) -> bool:
    """Return True if the user holds the Pastor role."""
    return bool(user) and user.get("role") == ROLE_PASTOR


def require_pastor(user: dict[str, Any], message: str) -> None:
    """Raise ForbiddenError unless the user is a Pastor."""
    if not is_pastor(user):
        raise ForbiddenError(message)


def require_admin(user: dict[str, Any], message: str) -> None:
    """Raise ForbiddenError unless the user is an administrator."""
    if not user.get("isAdmin", False):
        raise ForbiddenError(message)
