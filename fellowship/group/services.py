"""Service layer for groups, invitation codes and leader assignment."""

from __future__ import annotations

import secrets
from typing import TYPE_CHECKING, Any

from flask import current_app

from fellowship.auth.utils import require_user
from fellowship.constants import (
    GROUPS_COLLECTION,
    INVITATION_CODE_ALPHABET,
    INVITATION_CODE_ATTEMPTS,
    INVITATION_CODE_LENGTH,
    LEADER_CHAIN_MAX_HOPS,
    MAX_GROUP_LEADERS,
    USERS_COLLECTION,
)
from fellowship.core.documents import (
    fetch_documents,
    find_containing,
    find_first,
    get_document,
    utcnow,
)
from fellowship.errors import (
    AlreadyInGroup,
    DuplicateResourceError,
    ForbiddenError,
    GroupNotFound,
    UserNotFound,
    ValidationError,
)
from fellowship.user.services import DirectoryService

from .models import JoinResult, is_member

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def generate_invitation_code() -> str:
    """Return a random code of uppercase letters and digits."""
    return "".join(
        secrets.choice(INVITATION_CODE_ALPHABET) for _ in range(INVITATION_CODE_LENGTH)
    )


def enrich_group(
    db: Client, group: dict[str, Any], include_disciples: bool = True
) -> dict[str, Any]:
    """Replace leader and disciple ids with user records, dropping dangling ids."""
    leader_ids = group.get("leaders") or []
    disciple_ids = (group.get("disciples") or []) if include_disciples else []
    users = {
        user["id"]: user
        for user in fetch_documents(db, USERS_COLLECTION, leader_ids + disciple_ids)
    }
    enriched = dict(group)
    enriched["leaders"] = [users[uid] for uid in leader_ids if uid in users]
    if include_disciples:
        enriched["disciples"] = [users[uid] for uid in disciple_ids if uid in users]
    return enriched


def leads_back_to(db: Client, leader_id: str, user_id: str) -> bool:
    """Return True if walking up from leader_id reaches user_id.

    The walk is bounded so a corrupted chain cannot loop forever.
    """
    current_id: str | None = leader_id
    visited: set[str] = set()
    for _ in range(LEADER_CHAIN_MAX_HOPS):
        if not current_id or current_id in visited:
            return False
        if current_id == user_id:
            return True
        visited.add(current_id)
        current = get_document(db, USERS_COLLECTION, current_id)
        current_id = current.get("leader") if current else None
    return False


class GroupService:
    """Service class for group composition and membership."""

    @staticmethod
    def get_groups_as_leader(db: Client, user_id: str) -> list[dict[str, Any]]:
        """Return every group the caller leads, enriched."""
        groups = find_containing(db, GROUPS_COLLECTION, "leaders", user_id)
        return [enrich_group(db, group) for group in groups]

    @staticmethod
    def get_group_as_disciple(db: Client, user_id: str) -> dict[str, Any] | None:
        """Return the group the caller attends under their assigned leader.

        The first group (in storage order) led by the caller's leader that also
        lists the caller as a disciple wins.
        """
        user = require_user(db, user_id)
        leader_id = user.get("leader")
        if not leader_id:
            return None

        for group in find_containing(db, GROUPS_COLLECTION, "leaders", leader_id):
            if user_id in (group.get("disciples") or []):
                return enrich_group(db, group)
        return None

    @staticmethod
    def get_group_by_invitation_code(db: Client, code: str) -> dict[str, Any] | None:
        """Public lookup of a group by its invitation code, with leaders resolved."""
        if not code:
            return None
        group = find_first(db, GROUPS_COLLECTION, "invitationCode", code)
        if group is None:
            return None
        return enrich_group(db, group, include_disciples=False)

    @staticmethod
    def get_group_by_id(db: Client, user_id: str, group_id: str) -> dict[str, Any]:
        """Return a group with its disciples' courses, for members only."""
        group = get_document(db, GROUPS_COLLECTION, group_id)
        if group is None:
            raise GroupNotFound()
        if not is_member(group, user_id):
            raise ForbiddenError("You do not have access to this group.")

        enriched = enrich_group(db, group)
        enriched["disciples"] = [
            {**disciple, "courses": DirectoryService.resolve_courses(db, disciple)}
            for disciple in enriched["disciples"]
        ]
        return enriched

    @staticmethod
    def _unique_invitation_code(db: Client) -> str:
        for _ in range(INVITATION_CODE_ATTEMPTS):
            code = generate_invitation_code()
            if find_first(db, GROUPS_COLLECTION, "invitationCode", code) is None:
                return code
        raise DuplicateResourceError(
            "Could not generate a unique invitation code. Please try again."
        )

    @staticmethod
    def create_group(db: Client, user_id: str, data: dict[str, Any]) -> str:
        """Create a group led by the caller and an optional co-leader."""
        user = require_user(db, user_id)
        leaders = [user_id]

        co_leader_id = data.get("coLeaderId")
        if co_leader_id:
            if co_leader_id == user_id:
                raise ValidationError("You cannot add yourself as co-leader.")
            co_leader = get_document(db, USERS_COLLECTION, co_leader_id)
            if co_leader is None:
                raise UserNotFound("Co-leader not found.")
            if co_leader.get("gender") == user.get("gender"):
                raise ValidationError(
                    "The co-leader must be of a different gender than you."
                )
            leaders.append(co_leader_id)

        if len(leaders) > MAX_GROUP_LEADERS:
            raise ValidationError(
                f"A group can have at most {MAX_GROUP_LEADERS} leaders."
            )

        min_age, max_age = data.get("minAge"), data.get("maxAge")
        if min_age is not None and max_age is not None:
            if min_age > max_age:
                raise ValidationError(
                    "Minimum age cannot be greater than maximum age."
                )
        if (min_age is not None and min_age < 0) or (
            max_age is not None and max_age < 0
        ):
            raise ValidationError("Ages must be positive numbers.")

        now = utcnow()
        group_data = {
            "name": data["name"],
            "address": data["address"],
            "district": data["district"],
            "minAge": min_age,
            "maxAge": max_age,
            "day": data["day"],
            "time": data["time"],
            "leaders": leaders,
            "disciples": [],
            "invitationCode": GroupService._unique_invitation_code(db),
            "createdAt": now,
            "updatedAt": now,
        }
        _, group_ref = db.collection(GROUPS_COLLECTION).add(group_data)
        current_app.logger.info(f"Group {group_ref.id} created by {user_id}")
        return group_ref.id

    @staticmethod
    def _assign_leader(
        db: Client, user: dict[str, Any], leader_ids: list[str]
    ) -> str:
        if len(leader_ids) == 1:
            return leader_ids[0]
        if len(leader_ids) == MAX_GROUP_LEADERS:
            for leader in fetch_documents(db, USERS_COLLECTION, leader_ids):
                if leader.get("gender") == user.get("gender"):
                    return leader["id"]
            raise ValidationError(
                "No leader could be assigned. Please contact an administrator."
            )
        raise ValidationError("The group has no valid leaders.")

    @staticmethod
    def join_group(db: Client, user_id: str, invitation_code: str) -> JoinResult:
        """Join a group as a disciple of its same-gender leader."""
        user = require_user(db, user_id)
        if user.get("leader"):
            raise AlreadyInGroup(
                "You already belong to a group. You can only belong to one at a time."
            )

        group = find_first(db, GROUPS_COLLECTION, "invitationCode", invitation_code)
        if group is None:
            raise GroupNotFound("Invalid invitation code.")

        leader_ids = group.get("leaders") or []
        disciple_ids = group.get("disciples") or []
        if user_id in leader_ids:
            raise AlreadyInGroup("You are already a leader of this group.")
        if user_id in disciple_ids:
            raise AlreadyInGroup("You already belong to this group.")

        leader_id = GroupService._assign_leader(db, user, leader_ids)
        if leads_back_to(db, leader_id, user_id):
            raise ValidationError("Joining this group would create a leadership loop.")

        db.collection(USERS_COLLECTION).document(user_id).update({"leader": leader_id})
        db.collection(GROUPS_COLLECTION).document(group["id"]).update(
            {"disciples": [*disciple_ids, user_id], "updatedAt": utcnow()}
        )
        current_app.logger.info(
            f"User {user_id} joined group {group['id']} under leader {leader_id}"
        )
        return {"success": True, "groupId": group["id"], "leaderId": leader_id}

    @staticmethod
    def update_group(
        db: Client, user_id: str, group_id: str, updates: dict[str, Any]
    ) -> None:
        """Patch a group's name or address; leaders only."""
        group = get_document(db, GROUPS_COLLECTION, group_id)
        if group is None:
            raise GroupNotFound()
        if user_id not in (group.get("leaders") or []):
            raise ForbiddenError("Only leaders can update the group.")

        patch: dict[str, Any] = {
            field: updates[field] for field in ("name", "address") if field in updates
        }
        patch["updatedAt"] = utcnow()
        db.collection(GROUPS_COLLECTION).document(group_id).update(patch)
