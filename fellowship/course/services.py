"""Service layer for the course catalog and enrollment."""

from __future__ import annotations

import datetime
from typing import TYPE_CHECKING, Any

from flask import current_app

from fellowship.auth.utils import require_pastor, require_user
from fellowship.constants import COURSES_COLLECTION, USERS_COLLECTION
from fellowship.core.documents import (
    fetch_documents,
    get_document,
    stream_all,
    utcnow,
)
from fellowship.errors import CourseNotFound
from fellowship.user.services import DirectoryService

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client

_EPOCH = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)


class CourseService:
    """Service class for course operations."""

    @staticmethod
    def get_all_courses(db: Client) -> list[dict[str, Any]]:
        """Return the whole catalog, newest first."""
        courses = stream_all(db, COURSES_COLLECTION)
        return sorted(
            courses, key=lambda course: course.get("createdAt") or _EPOCH, reverse=True
        )

    @staticmethod
    def get_my_courses(db: Client, user_id: str) -> list[dict[str, Any]]:
        """Return the courses the caller is enrolled in."""
        user = require_user(db, user_id)
        return DirectoryService.resolve_courses(db, user)

    @staticmethod
    def get_course_by_id(db: Client, course_id: str) -> dict[str, Any] | None:
        """Return a single course, or None."""
        return get_document(db, COURSES_COLLECTION, course_id)

    @staticmethod
    def create_course(
        db: Client, user_id: str, name: str, description: str | None = None
    ) -> str:
        """Add a course to the catalog; pastors only."""
        user = require_user(db, user_id)
        require_pastor(user, "Only pastors can create courses.")

        now = utcnow()
        _, course_ref = db.collection(COURSES_COLLECTION).add(
            {
                "name": name,
                "description": description,
                "createdAt": now,
                "updatedAt": now,
            }
        )
        current_app.logger.info(f"Course {course_ref.id} created by {user_id}")
        return course_ref.id

    @staticmethod
    def update_course(
        db: Client, user_id: str, course_id: str, updates: dict[str, Any]
    ) -> None:
        """Patch a course's name or description; pastors only."""
        user = require_user(db, user_id)
        require_pastor(user, "Only pastors can update courses.")
        if get_document(db, COURSES_COLLECTION, course_id) is None:
            raise CourseNotFound()

        patch: dict[str, Any] = {
            field: updates[field]
            for field in ("name", "description")
            if field in updates
        }
        patch["updatedAt"] = utcnow()
        db.collection(COURSES_COLLECTION).document(course_id).update(patch)

    @staticmethod
    def enroll_in_courses(db: Client, user_id: str, course_ids: list[str]) -> None:
        """Add courses to the caller's enrollment, keeping order and no repeats."""
        user = require_user(db, user_id)
        found = {
            course["id"]
            for course in fetch_documents(db, COURSES_COLLECTION, course_ids)
        }
        if any(course_id not in found for course_id in course_ids):
            raise CourseNotFound("One or more courses do not exist.")

        current = user.get("currentCourses") or []
        enrolled = list(dict.fromkeys([*current, *course_ids]))
        db.collection(USERS_COLLECTION).document(user_id).update(
            {"currentCourses": enrolled}
        )

    @staticmethod
    def unenroll_from_courses(db: Client, user_id: str, course_ids: list[str]) -> None:
        """Drop the given courses from the caller's enrollment."""
        user = require_user(db, user_id)
        dropped = set(course_ids)
        remaining = [
            course_id
            for course_id in user.get("currentCourses") or []
            if course_id not in dropped
        ]
        db.collection(USERS_COLLECTION).document(user_id).update(
            {"currentCourses": remaining}
        )

    @staticmethod
    def update_school_status(db: Client, user_id: str, is_active: bool) -> None:
        """Mark whether the caller is currently studying."""
        require_user(db, user_id)
        db.collection(USERS_COLLECTION).document(user_id).update(
            {"isActiveInSchool": is_active}
        )
