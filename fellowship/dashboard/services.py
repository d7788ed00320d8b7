"""Assembles the home dashboard from the directory, group and grid services."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fellowship.auth.utils import is_pastor, require_user
from fellowship.constants import GRIDS_COLLECTION
from fellowship.core.documents import find_first
from fellowship.group.services import GroupService
from fellowship.user.services import DirectoryService

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


class DashboardService:
    """Service class for the dashboard view."""

    @staticmethod
    def get_dashboard(db: Client, user_id: str) -> dict[str, Any]:
        """Return everything the home screen shows for the caller."""
        user = require_user(db, user_id)
        grid = (
            find_first(db, GRIDS_COLLECTION, "pastorId", user_id)
            if is_pastor(user)
            else None
        )
        return {
            "user": user,
            "groupAsDisciple": GroupService.get_group_as_disciple(db, user_id),
            "groupsAsLeader": GroupService.get_groups_as_leader(db, user_id),
            "courses": DirectoryService.resolve_courses(db, user),
            "grid": grid,
        }
