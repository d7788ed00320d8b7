"""Service layer for group activities and attendance responses."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from flask import current_app

from fellowship.constants import (
    ACTIVITIES_COLLECTION,
    ACTIVITY_ADDRESS_MIN_LENGTH,
    ACTIVITY_DESCRIPTION_MIN_LENGTH,
    ACTIVITY_NAME_MIN_LENGTH,
    ACTIVITY_RESPONSES_COLLECTION,
    GROUPS_COLLECTION,
    RESPONSE_CONFIRMED,
    RESPONSE_DENIED,
    RESPONSE_PENDING,
    USERS_COLLECTION,
)
from fellowship.core.documents import (
    fetch_documents,
    find_all,
    get_document,
    utcnow,
)
from fellowship.errors import (
    ActivityNotFound,
    ForbiddenError,
    GroupNotFound,
    ValidationError,
)
from fellowship.group.models import is_member
from fellowship.user.models import to_brief

from .models import response_id

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

_EPOCH = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)


def _as_utc(value: datetime.datetime) -> datetime.datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def clean_activity_fields(
    data: dict[str, Any], partial: bool = False
) -> dict[str, Any]:
    """Validate and normalise activity fields.

    With ``partial`` only the supplied fields are checked; otherwise all of
    them are required.
    """
    cleaned: dict[str, Any] = {}

    def text(field: str, min_length: int, message: str, strip: bool = True):
        if partial and field not in data:
            return
        value = (data.get(field) or "").strip()
        if len(value) < min_length:
            raise ValidationError(message)
        cleaned[field] = value if strip else data[field]

    text(
        "name",
        ACTIVITY_NAME_MIN_LENGTH,
        f"The name must be at least {ACTIVITY_NAME_MIN_LENGTH} characters.",
    )
    text("address", ACTIVITY_ADDRESS_MIN_LENGTH, "Please enter a valid address.")

    if not partial or data.get("dateTime") is not None:
        date_time = data.get("dateTime")
        if date_time is None:
            raise ValidationError("Date and Time: This field is required.")
        date_time = _as_utc(date_time)
        if date_time < utcnow():
            raise ValidationError("The date and time must be in the future.")
        cleaned["dateTime"] = date_time

    text(
        "description",
        ACTIVITY_DESCRIPTION_MIN_LENGTH,
        "The description must be at least "
        f"{ACTIVITY_DESCRIPTION_MIN_LENGTH} characters.",
        strip=False,
    )
    return cleaned


class ActivityService:
    """Service class for activity operations."""

    @staticmethod
    def _member_group(db: Client, user_id: str, group_id: str) -> dict[str, Any]:
        group = get_document(db, GROUPS_COLLECTION, group_id)
        if group is None:
            raise GroupNotFound()
        if not is_member(group, user_id):
            raise ForbiddenError("You do not have access to this group.")
        return group

    @staticmethod
    def _require_activity(db: Client, activity_id: str) -> dict[str, Any]:
        activity = get_document(db, ACTIVITIES_COLLECTION, activity_id)
        if activity is None:
            raise ActivityNotFound()
        return activity

    @staticmethod
    def get_activities_by_group(
        db: Client, user_id: str, group_id: str
    ) -> list[dict[str, Any]]:
        """List a group's activities, newest first, with their creators."""
        ActivityService._member_group(db, user_id, group_id)

        activities = find_all(db, ACTIVITIES_COLLECTION, "groupId", group_id)
        activities.sort(key=lambda a: a.get("dateTime") or _EPOCH, reverse=True)
        creators = {
            user["id"]: user
            for user in fetch_documents(
                db, USERS_COLLECTION, [a.get("createdBy") for a in activities]
            )
        }
        for activity in activities:
            activity["creator"] = to_brief(creators.get(activity.get("createdBy")))
        return activities

    @staticmethod
    def get_activity_with_responses(
        db: Client, user_id: str, activity_id: str
    ) -> dict[str, Any]:
        """Return an activity with its responses grouped by status.

        Members who never answered are listed as pending.
        """
        activity = ActivityService._require_activity(db, activity_id)
        group = ActivityService._member_group(db, user_id, activity.get("groupId"))

        leader_ids = group.get("leaders") or []
        disciple_ids = group.get("disciples") or []
        responses = find_all(
            db, ACTIVITY_RESPONSES_COLLECTION, "activityId", activity_id
        )
        users = {
            user["id"]: user
            for user in fetch_documents(
                db,
                USERS_COLLECTION,
                [
                    activity.get("createdBy"),
                    *leader_ids,
                    *disciple_ids,
                    *(r.get("userId") for r in responses),
                ],
            )
        }

        grouped: dict[str, list[dict[str, Any]]] = {
            RESPONSE_CONFIRMED: [],
            RESPONSE_PENDING: [],
            RESPONSE_DENIED: [],
        }
        for response in responses:
            response["user"] = to_brief(users.get(response.get("userId")))
            grouped.setdefault(response.get("status"), []).append(response)

        responded = {response.get("userId") for response in responses}
        for member_id in [*leader_ids, *disciple_ids]:
            if member_id in responded or member_id not in users:
                continue
            grouped[RESPONSE_PENDING].append(
                {
                    "id": None,
                    "activityId": activity_id,
                    "userId": member_id,
                    "status": RESPONSE_PENDING,
                    "respondedAt": None,
                    "user": to_brief(users[member_id]),
                }
            )

        activity["creator"] = to_brief(users.get(activity.get("createdBy")))
        return {
            "activity": activity,
            "group": {
                "id": group["id"],
                "name": group.get("name"),
                "leaders": [to_brief(users[uid]) for uid in leader_ids if uid in users],
                "disciples": [
                    to_brief(users[uid]) for uid in disciple_ids if uid in users
                ],
            },
            "responses": {
                RESPONSE_CONFIRMED: grouped[RESPONSE_CONFIRMED],
                RESPONSE_PENDING: grouped[RESPONSE_PENDING],
                RESPONSE_DENIED: grouped[RESPONSE_DENIED],
            },
            "userResponse": next(
                (r for r in responses if r.get("userId") == user_id), None
            ),
        }

    @staticmethod
    def get_my_activity_response(
        db: Client, user_id: str, activity_id: str
    ) -> dict[str, Any] | None:
        """Return the caller's stored response, or None."""
        return get_document(
            db, ACTIVITY_RESPONSES_COLLECTION, response_id(activity_id, user_id)
        )

    @staticmethod
    def create_activity(db: Client, user_id: str, data: dict[str, Any]) -> str:
        """Schedule an activity for a group the caller leads."""
        group = get_document(db, GROUPS_COLLECTION, data.get("groupId"))
        if group is None:
            raise GroupNotFound()
        if user_id not in (group.get("leaders") or []):
            raise ForbiddenError("Only leaders can create activities.")

        fields = clean_activity_fields(data)
        now = utcnow()
        _, activity_ref = db.collection(ACTIVITIES_COLLECTION).add(
            {
                "groupId": group["id"],
                **fields,
                "createdBy": user_id,
                "createdAt": now,
                "updatedAt": now,
            }
        )
        current_app.logger.info(
            f"Activity {activity_ref.id} created in group {group['id']} by {user_id}"
        )
        return activity_ref.id

    @staticmethod
    def respond_to_activity(
        db: Client, user_id: str, activity_id: str, status: str
    ) -> str:
        """Record the caller's attendance intent, replacing any earlier answer."""
        activity = ActivityService._require_activity(db, activity_id)
        group = get_document(db, GROUPS_COLLECTION, activity.get("groupId"))
        if group is None:
            raise GroupNotFound()
        if not is_member(group, user_id):
            raise ForbiddenError("You cannot respond to this activity.")

        doc_id = response_id(activity_id, user_id)
        db.collection(ACTIVITY_RESPONSES_COLLECTION).document(doc_id).set(
            {
                "activityId": activity_id,
                "userId": user_id,
                "status": status,
                "respondedAt": utcnow(),
            }
        )
        return doc_id

    @staticmethod
    def update_activity(
        db: Client, user_id: str, activity_id: str, updates: dict[str, Any]
    ) -> None:
        """Edit an activity; only its creator may."""
        activity = ActivityService._require_activity(db, activity_id)
        if activity.get("createdBy") != user_id:
            raise ForbiddenError("Only the creator can update the activity.")

        patch = clean_activity_fields(updates, partial=True)
        patch["updatedAt"] = utcnow()
        db.collection(ACTIVITIES_COLLECTION).document(activity_id).update(patch)

    @staticmethod
    def delete_activity(db: Client, user_id: str, activity_id: str) -> None:
        """Delete an activity and every response to it; only its creator may."""
        activity = ActivityService._require_activity(db, activity_id)
        if activity.get("createdBy") != user_id:
            raise ForbiddenError("Only the creator can delete the activity.")

        responses_ref = db.collection(ACTIVITY_RESPONSES_COLLECTION)
        for response in find_all(
            db, ACTIVITY_RESPONSES_COLLECTION, "activityId", activity_id
        ):
            responses_ref.document(response["id"]).delete()
        db.collection(ACTIVITIES_COLLECTION).document(activity_id).delete()
        current_app.logger.info(f"Activity {activity_id} deleted by {user_id}")
