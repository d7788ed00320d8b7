"""Service layer for service areas and their assignment to users."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import current_app

from fellowship.auth.utils import require_admin, require_user
from fellowship.constants import (
    SERVICE_AREA_NAME_MIN_LENGTH,
    SERVICE_AREAS_COLLECTION,
    USERS_COLLECTION,
)
from fellowship.core.documents import find_all, get_document, stream_all, utcnow
from fellowship.errors import ServiceAreaNotFound, UserNotFound, ValidationError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client


def _clean_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    if len(cleaned) < SERVICE_AREA_NAME_MIN_LENGTH:
        raise ValidationError(
            f"The name must be at least {SERVICE_AREA_NAME_MIN_LENGTH} characters."
        )
    return cleaned


class ServiceAreaService:
    """Service class for service area operations."""

    @staticmethod
    def _require_area(db: Client, service_id: str) -> dict[str, Any]:
        area = get_document(db, SERVICE_AREAS_COLLECTION, service_id)
        if area is None:
            raise ServiceAreaNotFound()
        return area

    @staticmethod
    def get_all_service_areas(db: Client) -> list[dict[str, Any]]:
        """Return every service area, alphabetically."""
        areas = stream_all(db, SERVICE_AREAS_COLLECTION)
        return sorted(areas, key=lambda area: (area.get("name") or "").lower())

    @staticmethod
    def get_service_area_by_id(db: Client, service_id: str) -> dict[str, Any] | None:
        """Return one service area, or None."""
        return get_document(db, SERVICE_AREAS_COLLECTION, service_id)

    @staticmethod
    def get_my_service_area(db: Client, user_id: str) -> dict[str, Any] | None:
        """Return the service area the caller serves in, or None."""
        user = require_user(db, user_id)
        return get_document(db, SERVICE_AREAS_COLLECTION, user.get("serviceId"))

    @staticmethod
    def create_service_area(db: Client, user_id: str, name: str) -> str:
        """Create a service area; administrators only."""
        user = require_user(db, user_id)
        require_admin(user, "Only administrators can create service areas.")
        cleaned = _clean_name(name)

        _, area_ref = db.collection(SERVICE_AREAS_COLLECTION).add({"name": cleaned})
        current_app.logger.info(f"Service area {area_ref.id} created by {user_id}")
        return area_ref.id

    @staticmethod
    def update_service_area(
        db: Client, user_id: str, service_id: str, name: str | None = None
    ) -> None:
        """Rename a service area; administrators only."""
        user = require_user(db, user_id)
        require_admin(user, "Only administrators can update service areas.")
        ServiceAreaService._require_area(db, service_id)

        update_data: dict[str, Any] = {"updatedAt": utcnow()}
        if name is not None:
            update_data["name"] = _clean_name(name)
        db.collection(SERVICE_AREAS_COLLECTION).document(service_id).update(
            update_data
        )

    @staticmethod
    def delete_service_area(db: Client, user_id: str, service_id: str) -> None:
        """Delete a service area after unassigning everyone serving in it."""
        user = require_user(db, user_id)
        require_admin(user, "Only administrators can delete service areas.")
        ServiceAreaService._require_area(db, service_id)

        holders = find_all(db, USERS_COLLECTION, "serviceId", service_id)
        for holder in holders:
            db.collection(USERS_COLLECTION).document(holder["id"]).update(
                {"serviceId": None}
            )
        db.collection(SERVICE_AREAS_COLLECTION).document(service_id).delete()
        current_app.logger.info(
            f"Service area {service_id} deleted; {len(holders)} users unassigned"
        )

    @staticmethod
    def assign_service_area(db: Client, user_id: str, service_id: str) -> None:
        """Assign a service area to the caller."""
        require_user(db, user_id)
        ServiceAreaService._require_area(db, service_id)
        db.collection(USERS_COLLECTION).document(user_id).update(
            {"serviceId": service_id}
        )

    @staticmethod
    def remove_service_area(db: Client, user_id: str) -> None:
        """Clear the caller's service area."""
        require_user(db, user_id)
        db.collection(USERS_COLLECTION).document(user_id).update({"serviceId": None})

    @staticmethod
    def assign_service_area_to_user(
        db: Client, admin_id: str, target_id: str, service_id: str
    ) -> None:
        """Assign a service area to another user; administrators only."""
        admin = require_user(db, admin_id)
        require_admin(
            admin, "Only administrators can assign service areas to others."
        )
        if get_document(db, USERS_COLLECTION, target_id) is None:
            raise UserNotFound()
        ServiceAreaService._require_area(db, service_id)
        db.collection(USERS_COLLECTION).document(target_id).update(
            {"serviceId": service_id}
        )

    @staticmethod
    def remove_service_area_from_user(
        db: Client, admin_id: str, target_id: str
    ) -> None:
        """Clear another user's service area; administrators only."""
        admin = require_user(db, admin_id)
        require_admin(
            admin, "Only administrators can remove service areas from others."
        )
        if get_document(db, USERS_COLLECTION, target_id) is None:
            raise UserNotFound()
        db.collection(USERS_COLLECTION).document(target_id).update({"serviceId": None})
