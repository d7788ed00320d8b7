"""Shared fixtures for service and route tests."""

import datetime
import unittest
from typing import Any
from unittest.mock import patch

from mockfirestore import MockFirestore

from fellowship import create_app
from tests.conftest import patch_mockfirestore

patch_mockfirestore()


def days_from_now(days: int) -> datetime.datetime:
    """An aware UTC datetime offset from now."""
    return datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(days=days)


class FirestoreTestCase(unittest.TestCase):
    """Runs each test inside an app context backed by a fresh MockFirestore."""

    def setUp(self) -> None:
        self.db = MockFirestore()
        patchers = {
            "init_app": patch("firebase_admin.initialize_app"),
            "verify_id_token": patch("firebase_admin.auth.verify_id_token"),
        }
        self.mocks = {name: p.start() for name, p in patchers.items()}
        for p in patchers.values():
            self.addCleanup(p.stop)

        self.app = create_app(
            {
                "TESTING": True,
                "WTF_CSRF_ENABLED": False,
                "FIRESTORE_CLIENT": self.db,
                "SECRET_KEY": "test",
            }
        )
        self.client = self.app.test_client()
        self.app_context = self.app.app_context()
        self.app_context.push()

    def tearDown(self) -> None:
        self.app_context.pop()
        self.db.reset()

    def login(self, user_id: str) -> None:
        with self.client.session_transaction() as sess:
            sess["user_id"] = user_id

    def add_user(self, user_id: str, **fields: Any) -> str:
        data = {
            "name": fields.pop("name", user_id.title()),
            "email": fields.pop("email", f"{user_id}@example.com"),
            "role": fields.pop("role", "Member"),
            "gender": fields.pop("gender", "Male"),
            "isActiveInSchool": fields.pop("isActiveInSchool", False),
            "currentCourses": fields.pop("currentCourses", []),
            **fields,
        }
        self.db.collection("users").document(user_id).set(data)
        return user_id

    def add_pastor(self, user_id: str, **fields: Any) -> str:
        return self.add_user(user_id, role="Pastor", **fields)

    def add_group(self, group_id: str, leaders: list, disciples=None, **fields: Any):
        data = {
            "name": fields.pop("name", f"Group {group_id}"),
            "address": "1 Main Street",
            "district": "Centro",
            "day": "Friday",
            "time": "19:00",
            "leaders": leaders,
            "disciples": disciples or [],
            "invitationCode": fields.pop("invitationCode", group_id.upper()[:6]),
            "createdAt": days_from_now(-10),
            "updatedAt": days_from_now(-10),
            **fields,
        }
        self.db.collection("groups").document(group_id).set(data)
        return group_id

    def add_course(self, course_id: str, name: str, created_days_ago: int = 1) -> str:
        self.db.collection("courses").document(course_id).set(
            {
                "name": name,
                "description": None,
                "createdAt": days_from_now(-created_days_ago),
                "updatedAt": days_from_now(-created_days_ago),
            }
        )
        return course_id

    def get_user(self, user_id: str) -> dict:
        return self.db.collection("users").document(user_id).get().to_dict()
