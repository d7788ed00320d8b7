"""Data models for the activity blueprint."""

from __future__ import annotations

import datetime
from typing import Literal, TypedDict

from fellowship.core.types import FirestoreDocument
from fellowship.user.models import UserBrief

ResponseStatus = Literal["confirmed", "pending", "denied"]


class Activity(FirestoreDocument, total=False):
    """A scheduled event owned by a group."""

    groupId: str
    name: str
    address: str
    dateTime: datetime.datetime
    description: str
    createdBy: str

    # Calculated fields
    creator: UserBrief | None


class ActivityResponse(TypedDict, total=False):
    """A member's attendance intent for one activity."""

    id: str | None
    activityId: str
    userId: str
    status: ResponseStatus
    respondedAt: datetime.datetime | None

    # Calculated fields
    user: UserBrief | None


def response_id(activity_id: str, user_id: str) -> str:
    """Document id of the single response a user may hold for an activity."""
    return f"{activity_id}_{user_id}"
