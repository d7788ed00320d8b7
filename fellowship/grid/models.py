"""Data models for the grid blueprint."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypedDict

from fellowship.core.types import FirestoreDocument

if TYPE_CHECKING:
    from fellowship.user.models import User


class Grid(FirestoreDocument, total=False):
    """A grid document in Firestore. Its document id is the pastor's uid."""

    name: str
    pastorId: str

    # Calculated fields
    pastor: User | None


class GridStats(TypedDict):
    """Aggregate counters over a grid's members."""

    totalMembers: int
    membersInSchool: int
    totalGroups: int
    maleCount: int
    femaleCount: int


def empty_stats() -> GridStats:
    """Stats reported for a pastor who has not created a grid yet."""
    return {
        "totalMembers": 0,
        "membersInSchool": 0,
        "totalGroups": 0,
        "maleCount": 0,
        "femaleCount": 0,
    }
