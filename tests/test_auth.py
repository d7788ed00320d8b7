"""Tests for the auth blueprint."""

from tests.helpers import FirestoreTestCase


class AuthRoutesTestCase(FirestoreTestCase):
    """Tests for session login and logout."""

    def test_session_login_creates_session(self) -> None:
        self.add_user("u1")
        self.mocks["verify_id_token"].return_value = {"uid": "u1"}

        response = self.client.post("/auth/session_login", json={"idToken": "token"})

        self.assertEqual(response.status_code, 200)
        with self.client.session_transaction() as sess:
            self.assertEqual(sess["user_id"], "u1")
        self.assertEqual(self.client.get("/users/me").get_json()["id"], "u1")

    def test_session_login_requires_token(self) -> None:
        response = self.client.post("/auth/session_login", json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "Validation")

    def test_session_login_rejects_invalid_token(self) -> None:
        self.mocks["verify_id_token"].side_effect = ValueError("bad token")

        response = self.client.post("/auth/session_login", json={"idToken": "bad"})

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["error"], "Unauthenticated")

    def test_session_login_for_unknown_user(self) -> None:
        self.mocks["verify_id_token"].return_value = {"uid": "ghost"}

        response = self.client.post("/auth/session_login", json={"idToken": "token"})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["error"], "UserNotFound")

    def test_logout_clears_session(self) -> None:
        self.add_user("u1")
        self.login("u1")

        self.client.post("/auth/logout")

        self.assertEqual(self.client.get("/users/me").status_code, 401)
