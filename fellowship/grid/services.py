"""Service layer for pastor-owned grids."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import current_app

from fellowship.auth.utils import is_pastor, require_pastor, require_user
from fellowship.constants import (
    GENDER_FEMALE,
    GENDER_MALE,
    GRIDS_COLLECTION,
    GROUPS_COLLECTION,
    SEARCH_MIN_TERM_LENGTH,
    SEARCH_RESULT_LIMIT,
    USERS_COLLECTION,
)
from fellowship.core.documents import (
    fetch_documents,
    find_all,
    find_first,
    get_document,
    stream_all,
    utcnow,
)
from fellowship.core.types import APIResponse
from fellowship.errors import (
    ForbiddenError,
    GridAlreadyExists,
    GridNotFound,
    UserAlreadyInOtherGrid,
    UserNotFound,
    UserNotInThisGrid,
)

from .models import GridStats, empty_stats

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

PASTOR_ONLY = "Only pastors can manage a grid."


class GridService:
    """Service class for grid operations."""

    @staticmethod
    def _pastor_grid(db: Client, pastor_id: str) -> dict[str, Any] | None:
        return find_first(db, GRIDS_COLLECTION, "pastorId", pastor_id)

    @staticmethod
    def search_grids_by_name(db: Client, search_term: str) -> list[dict[str, Any]]:
        """Case-insensitive substring search on grid names."""
        if not search_term or len(search_term) < SEARCH_MIN_TERM_LENGTH:
            return []

        search_lower = search_term.lower()
        grids = [
            grid
            for grid in stream_all(db, GRIDS_COLLECTION)
            if search_lower in (grid.get("name") or "").lower()
        ][:SEARCH_RESULT_LIMIT]

        pastors = {
            pastor["id"]: pastor
            for pastor in fetch_documents(
                db, USERS_COLLECTION, [grid.get("pastorId") for grid in grids]
            )
        }
        results = []
        for grid in grids:
            pastor = pastors.get(grid.get("pastorId"))
            results.append(
                {
                    "id": grid["id"],
                    "name": grid.get("name"),
                    "pastor": (
                        {"name": pastor.get("name"), "email": pastor.get("email")}
                        if pastor
                        else None
                    ),
                }
            )
        return results

    @staticmethod
    def get_my_grid(db: Client, user_id: str) -> dict[str, Any] | None:
        """Return the caller's grid with its pastor, or None."""
        user = require_user(db, user_id)
        if not is_pastor(user):
            return None
        grid = GridService._pastor_grid(db, user_id)
        if grid is None:
            return None
        grid["pastor"] = user
        return grid

    @staticmethod
    def get_grid_members(db: Client, user_id: str) -> list[dict[str, Any]]:
        """List every user whose gridId points at the caller's grid."""
        user = require_user(db, user_id)
        require_pastor(user, "Only pastors can view grid members.")
        grid = GridService._pastor_grid(db, user_id)
        if grid is None:
            return []
        return find_all(db, USERS_COLLECTION, "gridId", grid["id"])

    @staticmethod
    def get_grid_stats(db: Client, user_id: str) -> GridStats:
        """Aggregate member counters for the caller's grid."""
        user = require_user(db, user_id)
        require_pastor(user, "Only pastors can view grid statistics.")
        grid = GridService._pastor_grid(db, user_id)
        if grid is None:
            return empty_stats()

        members = find_all(db, USERS_COLLECTION, "gridId", grid["id"])
        member_ids = {member["id"] for member in members}
        total_groups = sum(
            1
            for group in stream_all(db, GROUPS_COLLECTION)
            if member_ids.intersection(group.get("leaders") or [])
        )
        return {
            "totalMembers": len(members),
            "membersInSchool": sum(
                1 for member in members if member.get("isActiveInSchool") is True
            ),
            "totalGroups": total_groups,
            "maleCount": sum(1 for m in members if m.get("gender") == GENDER_MALE),
            "femaleCount": sum(1 for m in members if m.get("gender") == GENDER_FEMALE),
        }

    @staticmethod
    def create_grid(db: Client, user_id: str, name: str) -> str:
        """Create the caller's grid, keyed by the pastor's uid."""
        user = require_user(db, user_id)
        require_pastor(user, "Only pastors can create a grid.")

        grid_ref = db.collection(GRIDS_COLLECTION).document(user_id)
        if grid_ref.get().exists or GridService._pastor_grid(db, user_id):
            raise GridAlreadyExists()

        now = utcnow()
        grid_ref.set(
            {"name": name, "pastorId": user_id, "createdAt": now, "updatedAt": now}
        )
        current_app.logger.info(f"Grid {grid_ref.id} created by {user_id}")
        return grid_ref.id

    @staticmethod
    def add_member_to_grid(db: Client, user_id: str, user_email: str) -> APIResponse:
        """Attach the user with the given email to the caller's grid."""
        user = require_user(db, user_id)
        require_pastor(user, PASTOR_ONLY)
        grid = GridService._pastor_grid(db, user_id)
        if grid is None:
            raise GridNotFound("You need to create a grid first.")

        member = find_first(db, USERS_COLLECTION, "email", user_email)
        if member is None:
            raise UserNotFound("No user found with that email.")

        current_grid = member.get("gridId")
        if current_grid == grid["id"]:
            return {"success": True, "message": "User already belongs to this grid."}
        if current_grid:
            raise UserAlreadyInOtherGrid()

        db.collection(USERS_COLLECTION).document(member["id"]).update(
            {"gridId": grid["id"]}
        )
        current_app.logger.info(f"User {member['id']} added to grid {grid['id']}")
        return {"success": True, "message": "User added to the grid."}

    @staticmethod
    def remove_member_from_grid(db: Client, user_id: str, member_id: str) -> None:
        """Detach a member from the caller's grid."""
        user = require_user(db, user_id)
        require_pastor(user, PASTOR_ONLY)
        grid = GridService._pastor_grid(db, user_id)
        if grid is None:
            raise GridNotFound()

        member = get_document(db, USERS_COLLECTION, member_id)
        if member is None:
            raise UserNotFound()
        if member.get("gridId") != grid["id"]:
            raise UserNotInThisGrid()

        db.collection(USERS_COLLECTION).document(member_id).update({"gridId": None})
        current_app.logger.info(f"User {member_id} removed from grid {grid['id']}")

    @staticmethod
    def update_grid(db: Client, user_id: str, grid_id: str, name: str) -> None:
        """Rename a grid owned by the caller."""
        grid = get_document(db, GRIDS_COLLECTION, grid_id)
        if grid is None:
            raise GridNotFound()
        if grid.get("pastorId") != user_id:
            raise ForbiddenError("You can only update your own grid.")
        db.collection(GRIDS_COLLECTION).document(grid_id).update(
            {"name": name, "updatedAt": utcnow()}
        )
