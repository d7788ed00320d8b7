"""Tests for pastor-owned grids."""

from fellowship.errors import (
    ForbiddenError,
    GridAlreadyExists,
    GridNotFound,
    UserAlreadyInOtherGrid,
    UserNotFound,
    UserNotInThisGrid,
)
from fellowship.grid.services import GridService
from tests.helpers import FirestoreTestCase


class GridServiceTestCase(FirestoreTestCase):
    """Tests for GridService."""

    def setUp(self) -> None:
        super().setUp()
        self.add_pastor("pastorA", name="Pastor A", email="a@church.org")
        self.add_pastor("pastorB", name="Pastor B", email="b@church.org")
        self.add_user("member", email="m@x.com")

    def test_create_grid_once_per_pastor(self) -> None:
        grid_id = GridService.create_grid(self.db, "pastorA", "North")

        self.assertEqual(grid_id, "pastorA")
        grid = self.db.collection("grids").document(grid_id).get().to_dict()
        self.assertEqual(grid["name"], "North")
        self.assertEqual(grid["pastorId"], "pastorA")
        self.assertEqual(grid["createdAt"], grid["updatedAt"])

        with self.assertRaises(GridAlreadyExists):
            GridService.create_grid(self.db, "pastorA", "Another")

    def test_create_grid_requires_pastor(self) -> None:
        with self.assertRaises(ForbiddenError):
            GridService.create_grid(self.db, "member", "Mine")

    def test_scenario_add_member_and_conflicts(self) -> None:
        GridService.create_grid(self.db, "pastorA", "North")
        GridService.create_grid(self.db, "pastorB", "South")

        result = GridService.add_member_to_grid(self.db, "pastorA", "m@x.com")
        self.assertTrue(result["success"])
        self.assertEqual(self.get_user("member")["gridId"], "pastorA")

        again = GridService.add_member_to_grid(self.db, "pastorA", "m@x.com")
        self.assertEqual(again["message"], "User already belongs to this grid.")

        self.add_user("southerner", email="s@x.com", gridId="pastorB")
        with self.assertRaises(UserAlreadyInOtherGrid):
            GridService.add_member_to_grid(self.db, "pastorA", "s@x.com")
        self.assertEqual(self.get_user("southerner")["gridId"], "pastorB")

    def test_add_member_errors(self) -> None:
        with self.assertRaises(GridNotFound):
            GridService.add_member_to_grid(self.db, "pastorA", "m@x.com")

        GridService.create_grid(self.db, "pastorA", "North")
        with self.assertRaises(UserNotFound):
            GridService.add_member_to_grid(self.db, "pastorA", "nobody@x.com")
        with self.assertRaises(ForbiddenError):
            GridService.add_member_to_grid(self.db, "member", "m@x.com")

    def test_add_then_remove_round_trip(self) -> None:
        GridService.create_grid(self.db, "pastorA", "North")
        GridService.add_member_to_grid(self.db, "pastorA", "m@x.com")

        GridService.remove_member_from_grid(self.db, "pastorA", "member")

        self.assertIsNone(self.get_user("member")["gridId"])
        with self.assertRaises(UserNotInThisGrid):
            GridService.remove_member_from_grid(self.db, "pastorA", "member")

    def test_members_belong_to_exactly_one_pastor(self) -> None:
        GridService.create_grid(self.db, "pastorA", "North")
        GridService.create_grid(self.db, "pastorB", "South")
        self.add_user("u1", gridId="pastorA")
        self.add_user("u2", gridId="pastorA")
        self.add_user("u3", gridId="pastorB")

        members_a = [m["id"] for m in GridService.get_grid_members(self.db, "pastorA")]
        members_b = [m["id"] for m in GridService.get_grid_members(self.db, "pastorB")]

        self.assertCountEqual(members_a, ["u1", "u2"])
        self.assertEqual(members_b, ["u3"])

    def test_members_without_grid_and_for_members(self) -> None:
        self.assertEqual(GridService.get_grid_members(self.db, "pastorA"), [])
        with self.assertRaises(ForbiddenError):
            GridService.get_grid_members(self.db, "member")

    def test_grid_stats(self) -> None:
        self.assertEqual(
            GridService.get_grid_stats(self.db, "pastorA"),
            {
                "totalMembers": 0,
                "membersInSchool": 0,
                "totalGroups": 0,
                "maleCount": 0,
                "femaleCount": 0,
            },
        )

        GridService.create_grid(self.db, "pastorA", "North")
        self.add_user("u1", gridId="pastorA", gender="Male", isActiveInSchool=True)
        self.add_user("u2", gridId="pastorA", gender="Female")
        self.add_user("u3", gridId="pastorA", gender="Female", isActiveInSchool=True)
        self.add_user("outsider", gender="Male")
        self.add_group("g1", leaders=["u1", "u2"])
        self.add_group("g2", leaders=["u3"])
        self.add_group("g3", leaders=["outsider"])

        stats = GridService.get_grid_stats(self.db, "pastorA")

        self.assertEqual(stats["totalMembers"], 3)
        self.assertEqual(stats["membersInSchool"], 2)
        self.assertEqual(stats["totalGroups"], 2)
        self.assertEqual(stats["maleCount"], 1)
        self.assertEqual(stats["femaleCount"], 2)
        self.assertEqual(
            stats["maleCount"] + stats["femaleCount"], stats["totalMembers"]
        )

    def test_get_my_grid(self) -> None:
        self.assertIsNone(GridService.get_my_grid(self.db, "pastorA"))
        self.assertIsNone(GridService.get_my_grid(self.db, "member"))

        GridService.create_grid(self.db, "pastorA", "North")
        grid = GridService.get_my_grid(self.db, "pastorA")

        self.assertEqual(grid["name"], "North")
        self.assertEqual(grid["pastor"]["name"], "Pastor A")

    def test_search_grids_by_name(self) -> None:
        GridService.create_grid(self.db, "pastorA", "North Side")
        GridService.create_grid(self.db, "pastorB", "South Side")

        self.assertEqual(GridService.search_grids_by_name(self.db, "n"), [])
        results = GridService.search_grids_by_name(self.db, "NORTH")

        self.assertEqual(
            results,
            [
                {
                    "id": "pastorA",
                    "name": "North Side",
                    "pastor": {"name": "Pastor A", "email": "a@church.org"},
                }
            ],
        )
        self.assertEqual(len(GridService.search_grids_by_name(self.db, "side")), 2)

    def test_update_grid(self) -> None:
        GridService.create_grid(self.db, "pastorA", "North")

        with self.assertRaises(ForbiddenError):
            GridService.update_grid(self.db, "pastorB", "pastorA", "Stolen")
        with self.assertRaises(GridNotFound):
            GridService.update_grid(self.db, "pastorA", "missing", "Name")

        GridService.update_grid(self.db, "pastorA", "pastorA", "Renamed")
        grid = self.db.collection("grids").document("pastorA").get().to_dict()
        self.assertEqual(grid["name"], "Renamed")


class GridRoutesTestCase(FirestoreTestCase):
    """Tests for the grid blueprint routes."""

    def setUp(self) -> None:
        super().setUp()
        self.add_pastor("pastorA")
        self.add_user("member", email="m@x.com")

    def test_create_and_read_grid(self) -> None:
        self.login("pastorA")

        created = self.client.post("/grids/", json={"name": "North"})
        duplicate = self.client.post("/grids/", json={"name": "Again"})
        mine = self.client.get("/grids/mine")

        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.get_json(), {"id": "pastorA"})
        self.assertEqual(duplicate.status_code, 409)
        self.assertEqual(duplicate.get_json()["error"], "GridAlreadyExists")
        self.assertEqual(mine.get_json()["name"], "North")

    def test_create_grid_requires_name(self) -> None:
        self.login("pastorA")

        response = self.client.post("/grids/", json={})

        self.assertEqual(response.status_code, 400)

    def test_member_management_routes(self) -> None:
        self.login("pastorA")
        self.client.post("/grids/", json={"name": "North"})

        added = self.client.post("/grids/mine/members", json={"userEmail": "m@x.com"})
        members = self.client.get("/grids/mine/members")
        stats = self.client.get("/grids/mine/stats")
        removed = self.client.delete("/grids/mine/members/member")
        removed_again = self.client.delete("/grids/mine/members/member")

        self.assertEqual(added.status_code, 200)
        self.assertEqual([m["id"] for m in members.get_json()], ["member"])
        self.assertEqual(stats.get_json()["totalMembers"], 1)
        self.assertEqual(removed.status_code, 200)
        self.assertEqual(removed_again.status_code, 409)
        self.assertEqual(removed_again.get_json()["error"], "UserNotInThisGrid")

    def test_members_route_forbidden_for_members(self) -> None:
        self.login("member")

        response = self.client.get("/grids/mine/members")

        self.assertEqual(response.status_code, 403)

    def test_search_route_is_public(self) -> None:
        GridService.create_grid(self.db, "pastorA", "North Side")

        found = self.client.get("/grids/search?term=north")
        nothing = self.client.get("/grids/search?term=z")

        self.assertEqual(found.status_code, 200)
        self.assertEqual([grid["id"] for grid in found.get_json()], ["pastorA"])
        self.assertEqual(nothing.get_json(), [])
