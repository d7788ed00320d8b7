"""Tests for service areas."""

from fellowship.errors import (
    ForbiddenError,
    ServiceAreaNotFound,
    UserNotFound,
    ValidationError,
)
from fellowship.service_area.services import ServiceAreaService
from tests.helpers import FirestoreTestCase


class ServiceAreaServiceTestCase(FirestoreTestCase):
    """Tests for ServiceAreaService."""

    def setUp(self) -> None:
        super().setUp()
        self.add_user("admin", isAdmin=True)
        self.add_user("member")

    def test_create_is_admin_only_and_trims(self) -> None:
        service_id = ServiceAreaService.create_service_area(
            self.db, "admin", "  Music "
        )

        area = ServiceAreaService.get_service_area_by_id(self.db, service_id)
        self.assertEqual(area["name"], "Music")
        with self.assertRaises(ForbiddenError):
            ServiceAreaService.create_service_area(self.db, "member", "Media")
        with self.assertRaises(ValidationError):
            ServiceAreaService.create_service_area(self.db, "admin", " a ")

    def test_list_sorted_by_name(self) -> None:
        for name in ("Ushers", "media", "Kids"):
            ServiceAreaService.create_service_area(self.db, "admin", name)

        names = [a["name"] for a in ServiceAreaService.get_all_service_areas(self.db)]

        self.assertEqual(names, ["Kids", "media", "Ushers"])

    def test_update(self) -> None:
        service_id = ServiceAreaService.create_service_area(self.db, "admin", "Music")

        ServiceAreaService.update_service_area(self.db, "admin", service_id, "Worship")

        area = ServiceAreaService.get_service_area_by_id(self.db, service_id)
        self.assertEqual(area["name"], "Worship")
        self.assertIn("updatedAt", area)
        with self.assertRaises(ValidationError):
            ServiceAreaService.update_service_area(self.db, "admin", service_id, "x")
        with self.assertRaises(ServiceAreaNotFound):
            ServiceAreaService.update_service_area(self.db, "admin", "missing", "Name")

    def test_self_assignment(self) -> None:
        service_id = ServiceAreaService.create_service_area(self.db, "admin", "Music")

        ServiceAreaService.assign_service_area(self.db, "member", service_id)
        self.assertEqual(
            ServiceAreaService.get_my_service_area(self.db, "member")["id"], service_id
        )

        ServiceAreaService.remove_service_area(self.db, "member")
        self.assertIsNone(ServiceAreaService.get_my_service_area(self.db, "member"))

        with self.assertRaises(ServiceAreaNotFound):
            ServiceAreaService.assign_service_area(self.db, "member", "missing")

    def test_delete_unassigns_holders(self) -> None:
        service_id = ServiceAreaService.create_service_area(self.db, "admin", "Music")
        self.add_user("u1", serviceId=service_id)
        self.add_user("u2", serviceId=service_id)

        ServiceAreaService.delete_service_area(self.db, "admin", service_id)

        self.assertIsNone(self.get_user("u1")["serviceId"])
        self.assertIsNone(self.get_user("u2")["serviceId"])
        self.assertIsNone(
            ServiceAreaService.get_service_area_by_id(self.db, service_id)
        )

    def test_admin_assignment_for_others(self) -> None:
        service_id = ServiceAreaService.create_service_area(self.db, "admin", "Music")

        ServiceAreaService.assign_service_area_to_user(
            self.db, "admin", "member", service_id
        )
        self.assertEqual(self.get_user("member")["serviceId"], service_id)

        ServiceAreaService.remove_service_area_from_user(self.db, "admin", "member")
        self.assertIsNone(self.get_user("member")["serviceId"])

        with self.assertRaises(ForbiddenError):
            ServiceAreaService.assign_service_area_to_user(
                self.db, "member", "admin", service_id
            )
        with self.assertRaises(UserNotFound):
            ServiceAreaService.assign_service_area_to_user(
                self.db, "admin", "ghost", service_id
            )


class ServiceAreaRoutesTestCase(FirestoreTestCase):
    """Tests for the service area blueprint routes."""

    def setUp(self) -> None:
        super().setUp()
        self.add_user("admin", isAdmin=True)
        self.add_user("member")

    def test_routes(self) -> None:
        self.login("admin")
        created = self.client.post("/service-areas/", json={"name": "Music"})
        self.assertEqual(created.status_code, 201)
        service_id = created.get_json()["id"]

        self.login("member")
        self.client.put("/service-areas/mine", json={"serviceId": service_id})
        mine = self.client.get("/service-areas/mine")
        self.assertEqual(mine.get_json()["name"], "Music")

        forbidden = self.client.delete(f"/service-areas/{service_id}")
        self.assertEqual(forbidden.status_code, 403)

        self.client.delete("/service-areas/mine")
        self.assertIsNone(self.client.get("/service-areas/mine").get_json())
