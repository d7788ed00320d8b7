"""Data models for the user blueprint."""

from __future__ import annotations

from typing import Any, Literal, TypedDict

from fellowship.core.types import FirestoreDocument

Role = Literal["Pastor", "Member"]
Gender = Literal["Male", "Female"]


class User(FirestoreDocument, total=False):
    """A user document in Firestore."""

    name: str
    email: str
    phone: str
    birthday: Any
    role: Role
    gender: Gender
    gridId: str | None
    leader: str
    isActiveInSchool: bool
    currentCourses: list[str]
    serviceId: str | None
    isAdmin: bool


class UserSummary(TypedDict):
    """The public projection of a user returned by directory lookups."""

    id: str
    name: str | None
    email: str | None
    role: Role | None
    gender: Gender | None


class UserBrief(TypedDict):
    """The minimal projection of a user embedded in activities."""

    id: str
    name: str | None
    email: str | None


def to_summary(user: dict[str, Any]) -> UserSummary:
    """Project a user onto the fields safe to show in directory results."""
    return {
        "id": user["id"],
        "name": user.get("name"),
        "email": user.get("email"),
        "role": user.get("role"),
        "gender": user.get("gender"),
    }


def to_brief(user: dict[str, Any] | None) -> UserBrief | None:
    """Project a user onto id, name and email."""
    if user is None:
        return None
    return {"id": user["id"], "name": user.get("name"), "email": user.get("email")}
