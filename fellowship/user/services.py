"""Service layer for the user directory: profiles, lookups and search."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from fellowship.auth.utils import require_user
from fellowship.constants import (
    COURSES_COLLECTION,
    GRIDS_COLLECTION,
    SEARCH_MIN_TERM_LENGTH,
    SEARCH_RESULT_LIMIT,
    SERVICE_AREAS_COLLECTION,
    USERS_COLLECTION,
)
from fellowship.core.documents import (
    fetch_documents,
    find_all,
    find_first,
    get_document,
    stream_all,
)
from fellowship.errors import (
    ForbiddenError,
    LeaderNotFound,
    ProfileAlreadyComplete,
)

from .models import UserSummary, to_summary

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

PROFILE_FIELDS = ("name", "gender", "phone", "birthday")


def _as_datetime(value: Any) -> Any:
    """Firestore stores datetimes, not dates; pin bare dates to midnight UTC."""
    if isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return datetime.datetime.combine(
            value, datetime.time.min, tzinfo=datetime.timezone.utc
        )
    return value


class DirectoryService:
    """Service class for user lookups and profile maintenance."""

    @staticmethod
    def resolve_courses(db: Client, user: dict[str, Any]) -> list[dict[str, Any]]:
        """Resolve a user's currentCourses, dropping courses that no longer exist."""
        return fetch_documents(db, COURSES_COLLECTION, user.get("currentCourses") or [])

    @staticmethod
    def get_my_profile(db: Client, user_id: str) -> dict[str, Any]:
        """Return the caller's record with its references resolved."""
        user = require_user(db, user_id)
        return {
            **user,
            "leader": get_document(db, USERS_COLLECTION, user.get("leader")),
            "grid": get_document(db, GRIDS_COLLECTION, user.get("gridId")),
            "service": get_document(
                db, SERVICE_AREAS_COLLECTION, user.get("serviceId")
            ),
            "courses": DirectoryService.resolve_courses(db, user),
        }

    @staticmethod
    def get_user_by_email(db: Client, email: str) -> UserSummary | None:
        """Exact-match lookup on the email index."""
        if not email:
            return None
        user = find_first(db, USERS_COLLECTION, "email", email)
        return to_summary(user) if user else None

    @staticmethod
    def search_users_by_email(
        db: Client, user_id: str, search_term: str
    ) -> list[UserSummary]:
        """Case-insensitive substring search on email, excluding the caller."""
        if not search_term or len(search_term) < SEARCH_MIN_TERM_LENGTH:
            return []

        search_lower = search_term.lower()
        matches = []
        # No index covers substring matching, so this scans the collection.
        for user in stream_all(db, USERS_COLLECTION):
            if user["id"] == user_id:
                continue
            email = user.get("email")
            if not email or search_lower not in email.lower():
                continue
            matches.append(to_summary(user))
            if len(matches) >= SEARCH_RESULT_LIMIT:
                break
        return matches

    @staticmethod
    def update_my_profile(db: Client, user_id: str, updates: dict[str, Any]) -> None:
        """Patch only the profile fields that were supplied."""
        patch = {
            field: _as_datetime(value)
            for field, value in updates.items()
            if field in PROFILE_FIELDS
        }
        require_user(db, user_id)
        if not patch:
            return
        db.collection(USERS_COLLECTION).document(user_id).update(patch)

    @staticmethod
    def complete_profile(
        db: Client,
        user_id: str,
        name: str,
        role: str,
        gender: str,
        phone: str | None = None,
    ) -> None:
        """Set the required profile fields the first time a user signs in."""
        user = require_user(db, user_id)
        if user.get("role") and user.get("gender"):
            raise ProfileAlreadyComplete()

        update_data: dict[str, Any] = {
            "name": name,
            "role": role,
            "gender": gender,
            "isActiveInSchool": False,
            "currentCourses": [],
        }
        if phone is not None:
            update_data["phone"] = phone
        db.collection(USERS_COLLECTION).document(user_id).update(update_data)

    @staticmethod
    def get_disciples_by_leader(
        db: Client, user_id: str, leader_id: str
    ) -> list[dict[str, Any]]:
        """List a leader's disciples; leaders may only list their own."""
        if get_document(db, USERS_COLLECTION, leader_id) is None:
            raise LeaderNotFound()
        if leader_id != user_id:
            raise ForbiddenError("You can only view your own disciples.")
        return find_all(db, USERS_COLLECTION, "leader", leader_id)
