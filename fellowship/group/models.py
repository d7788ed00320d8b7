"""Data models for the group blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from fellowship.core.types import FirestoreDocument


class Group(FirestoreDocument, total=False):
    """A group document in Firestore."""

    name: str
    address: str
    district: str
    minAge: int | None
    maxAge: int | None
    day: str
    time: str
    leaders: list[Any]
    disciples: list[Any]
    invitationCode: str


class JoinResult(TypedDict):
    """The outcome of joining a group by invitation code."""

    success: bool
    groupId: str
    leaderId: str


def is_member(group: dict[str, Any], user_id: str) -> bool:
    """Return True if the user leads the group or is one of its disciples."""
    return user_id in (group.get("leaders") or []) or user_id in (
        group.get("disciples") or []
    )
