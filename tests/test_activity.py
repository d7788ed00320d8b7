"""Tests for activities and attendance responses."""

from fellowship.activity.services import ActivityService
from fellowship.errors import (
    ActivityNotFound,
    ForbiddenError,
    GroupNotFound,
    ValidationError,
)
from tests.helpers import FirestoreTestCase, days_from_now


def activity_data(**overrides):
    data = {
        "groupId": "g1",
        "name": "Picnic",
        "address": "Central Park",
        "dateTime": days_from_now(7),
        "description": "Bring something to share.",
    }
    data.update(overrides)
    return data


class ActivityServiceTestCase(FirestoreTestCase):
    """Tests for ActivityService."""

    def setUp(self) -> None:
        super().setUp()
        self.add_user("l1", name="Leader")
        self.add_user("d1", name="Disciple One")
        self.add_user("d2", name="Disciple Two")
        self.add_user("outsider")
        self.add_group("g1", leaders=["l1"], disciples=["d1", "d2"])

    def test_create_activity(self) -> None:
        activity_id = ActivityService.create_activity(
            self.db, "l1", activity_data(name="  Picnic  ")
        )

        activity = self.db.collection("activities").document(activity_id).get()
        data = activity.to_dict()
        self.assertEqual(data["name"], "Picnic")
        self.assertEqual(data["createdBy"], "l1")
        self.assertEqual(data["groupId"], "g1")

    def test_create_activity_rules(self) -> None:
        with self.assertRaises(ForbiddenError):
            ActivityService.create_activity(self.db, "d1", activity_data())
        with self.assertRaises(ValidationError):
            ActivityService.create_activity(self.db, "l1", activity_data(name=" a "))
        with self.assertRaises(ValidationError):
            ActivityService.create_activity(self.db, "l1", activity_data(address="x"))
        with self.assertRaises(ValidationError):
            ActivityService.create_activity(
                self.db, "l1", activity_data(description="short")
            )
        with self.assertRaises(ValidationError):
            ActivityService.create_activity(
                self.db, "l1", activity_data(dateTime=days_from_now(-1))
            )
        with self.assertRaises(GroupNotFound):
            ActivityService.create_activity(
                self.db, "l1", activity_data(groupId="missing")
            )

    def test_activities_by_group_newest_first(self) -> None:
        later = ActivityService.create_activity(
            self.db, "l1", activity_data(dateTime=days_from_now(20))
        )
        sooner = ActivityService.create_activity(
            self.db, "l1", activity_data(dateTime=days_from_now(2))
        )

        activities = ActivityService.get_activities_by_group(self.db, "d1", "g1")

        self.assertEqual([a["id"] for a in activities], [later, sooner])
        self.assertEqual(
            activities[0]["creator"],
            {"id": "l1", "name": "Leader", "email": "l1@example.com"},
        )
        with self.assertRaises(ForbiddenError):
            ActivityService.get_activities_by_group(self.db, "outsider", "g1")

    def test_responding_twice_keeps_one_response(self) -> None:
        activity_id = ActivityService.create_activity(self.db, "l1", activity_data())

        first = ActivityService.respond_to_activity(
            self.db, "d1", activity_id, "confirmed"
        )
        second = ActivityService.respond_to_activity(
            self.db, "d1", activity_id, "denied"
        )

        self.assertEqual(first, second)
        responses = [
            doc.to_dict() for doc in self.db.collection("activityResponses").stream()
        ]
        self.assertEqual(len(responses), 1)
        self.assertEqual(responses[0]["status"], "denied")
        mine = ActivityService.get_my_activity_response(self.db, "d1", activity_id)
        self.assertEqual(mine["status"], "denied")

    def test_respond_requires_membership(self) -> None:
        activity_id = ActivityService.create_activity(self.db, "l1", activity_data())

        with self.assertRaises(ForbiddenError):
            ActivityService.respond_to_activity(
                self.db, "outsider", activity_id, "confirmed"
            )
        with self.assertRaises(ActivityNotFound):
            ActivityService.respond_to_activity(self.db, "d1", "missing", "confirmed")

    def test_activity_with_responses_fills_pending(self) -> None:
        activity_id = ActivityService.create_activity(self.db, "l1", activity_data())
        ActivityService.respond_to_activity(self.db, "d1", activity_id, "confirmed")

        result = ActivityService.get_activity_with_responses(self.db, "d1", activity_id)

        responses = result["responses"]
        self.assertEqual([r["userId"] for r in responses["confirmed"]], ["d1"])
        self.assertEqual(responses["confirmed"][0]["user"]["name"], "Disciple One")
        self.assertCountEqual(
            [r["userId"] for r in responses["pending"]], ["l1", "d2"]
        )
        self.assertTrue(all(r["respondedAt"] is None for r in responses["pending"]))
        self.assertEqual(responses["denied"], [])
        self.assertEqual(result["userResponse"]["status"], "confirmed")
        self.assertEqual(result["group"]["leaders"][0]["id"], "l1")
        self.assertEqual(result["activity"]["creator"]["id"], "l1")

    def test_update_activity_creator_only(self) -> None:
        activity_id = ActivityService.create_activity(self.db, "l1", activity_data())

        with self.assertRaises(ForbiddenError):
            ActivityService.update_activity(
                self.db, "d1", activity_id, {"name": "Mine"}
            )
        with self.assertRaises(ValidationError):
            ActivityService.update_activity(
                self.db, "l1", activity_id, {"address": "x"}
            )

        ActivityService.update_activity(
            self.db, "l1", activity_id, {"name": " Barbecue "}
        )
        data = self.db.collection("activities").document(activity_id).get().to_dict()
        self.assertEqual(data["name"], "Barbecue")
        self.assertEqual(data["address"], "Central Park")

    def test_delete_activity_removes_responses(self) -> None:
        activity_id = ActivityService.create_activity(self.db, "l1", activity_data())
        other_id = ActivityService.create_activity(self.db, "l1", activity_data())
        ActivityService.respond_to_activity(self.db, "d1", activity_id, "confirmed")
        ActivityService.respond_to_activity(self.db, "d2", activity_id, "denied")
        ActivityService.respond_to_activity(self.db, "d1", other_id, "pending")

        with self.assertRaises(ForbiddenError):
            ActivityService.delete_activity(self.db, "d1", activity_id)

        ActivityService.delete_activity(self.db, "l1", activity_id)

        remaining = [
            doc.to_dict()
            for doc in self.db.collection("activityResponses").stream()
            if doc.exists
        ]
        self.assertEqual([r["activityId"] for r in remaining], [other_id])
        self.assertFalse(
            self.db.collection("activities").document(activity_id).get().exists
        )


class ActivityRoutesTestCase(FirestoreTestCase):
    """Tests for the activity blueprint routes."""

    def setUp(self) -> None:
        super().setUp()
        self.add_user("l1")
        self.add_user("d1")
        self.add_group("g1", leaders=["l1"], disciples=["d1"])

    def test_create_respond_and_read(self) -> None:
        self.login("l1")
        created = self.client.post(
            "/activities/",
            json={
                "groupId": "g1",
                "name": "Picnic",
                "address": "Central Park",
                "dateTime": days_from_now(7).strftime("%Y-%m-%dT%H:%M:%S"),
                "description": "Bring something to share.",
            },
        )
        self.assertEqual(created.status_code, 201)
        activity_id = created.get_json()["id"]

        self.login("d1")
        responded = self.client.post(
            f"/activities/{activity_id}/respond", json={"status": "confirmed"}
        )
        self.assertEqual(responded.get_json()["id"], f"{activity_id}_d1")

        detail = self.client.get(f"/activities/{activity_id}")
        self.assertEqual(
            [r["userId"] for r in detail.get_json()["responses"]["confirmed"]], ["d1"]
        )

        listed = self.client.get("/activities/group/g1")
        self.assertEqual([a["id"] for a in listed.get_json()], [activity_id])

    def test_respond_rejects_unknown_status(self) -> None:
        self.login("d1")

        response = self.client.post("/activities/a1/respond", json={"status": "maybe"})

        self.assertEqual(response.status_code, 400)

    def test_create_rejects_bad_datetime(self) -> None:
        self.login("l1")

        response = self.client.post(
            "/activities/",
            json={
                "groupId": "g1",
                "name": "Picnic",
                "address": "Central Park",
                "dateTime": "next friday",
                "description": "Bring something to share.",
            },
        )

        self.assertEqual(response.status_code, 400)
