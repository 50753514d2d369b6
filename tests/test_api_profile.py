"""HTTP tests for /users/profile (self-service)."""

import unittest

from tests.support import API, DEFAULT_PASSWORD, ApiTestCase

PROFILE = f"{API}/users/profile"


class TestProfile(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_user("alice", "alice@x.com")
        self.client = self.logged_in_client("alice@x.com")

    def test_get_profile_has_no_secrets(self) -> None:
        response = self.client.get(PROFILE)
        self.assertEqual(response.status_code, 200, response.text)
        user = response.json()["user"]
        self.assertEqual(user["username"], "alice")
        self.assertEqual(user["preferences"]["theme"], "light")
        self.assertNotIn("passwordHash", user)
        self.assertNotIn("passwordHistory", user["security"])
        self.assertNotIn("twoFactorSecret", user["security"])

    def test_update_profile(self) -> None:
        response = self.client.put(
            PROFILE, json={"profile": {"firstName": "Alice", "contact": "0123456789"}}
        )
        self.assertEqual(response.status_code, 200, response.text)
        profile = response.json()["user"]["profile"]
        self.assertEqual(profile["firstName"], "Alice")
        self.assertEqual(profile["contact"], "0123456789")

    def test_invalid_contact(self) -> None:
        response = self.client.put(PROFILE, json={"profile": {"contact": "12345"}})
        self.assertError(response, 400, "INVALID_CONTACT")

    def test_update_preferences(self) -> None:
        response = self.client.put(
            f"{PROFILE}/preferences", json={"preferences": {"theme": "dark", "itemsPerPage": 25}}
        )
        self.assertEqual(response.status_code, 200, response.text)
        prefs = response.json()["preferences"]
        self.assertEqual(prefs["theme"], "dark")
        self.assertEqual(prefs["itemsPerPage"], 25)

        response = self.client.get(f"{PROFILE}/preferences")
        self.assertEqual(response.json()["preferences"]["theme"], "dark")

    def test_invalid_preferences(self) -> None:
        response = self.client.put(f"{PROFILE}/preferences", json={"preferences": {"theme": "neon"}})
        self.assertError(response, 400, "INVALID_THEME")
        response = self.client.put(f"{PROFILE}/preferences", json={"preferences": {"itemsPerPage": 2}})
        self.assertError(response, 400, "INVALID_ITEMS_PER_PAGE")

    def test_change_password(self) -> None:
        response = self.client.post(
            f"{PROFILE}/change-password",
            json={"currentPassword": "not-my-password", "newPassword": "N3wPassword!"},
        )
        self.assertError(response, 400, "INCORRECT_PASSWORD")

        response = self.client.post(
            f"{PROFILE}/change-password",
            json={"currentPassword": DEFAULT_PASSWORD, "newPassword": DEFAULT_PASSWORD},
        )
        self.assertError(response, 400, "PASSWORD_IN_HISTORY")

        response = self.client.post(
            f"{PROFILE}/change-password",
            json={"currentPassword": DEFAULT_PASSWORD, "newPassword": "N3wPassword!"},
        )
        self.assertEqual(response.status_code, 200, response.text)

        self.assertError(self.login(self.new_client(), "alice@x.com"), 401, "INVALID_CREDENTIALS")
        response = self.login(self.new_client(), "alice@x.com", "N3wPassword!")
        self.assertEqual(response.status_code, 200, response.text)

    def test_change_password_missing_fields(self) -> None:
        response = self.client.post(f"{PROFILE}/change-password", json={"newPassword": "N3wPassword!"})
        self.assertError(response, 400, "MISSING_PASSWORDS")

    def test_upload_avatar(self) -> None:
        response = self.client.post(f"{PROFILE}/upload-avatar", json={"profilePicture": ""})
        self.assertError(response, 400, "MISSING_PROFILE_PICTURE")

        picture = "data:image/png;base64,iVBORw0KGgo="
        response = self.client.post(f"{PROFILE}/upload-avatar", json={"profilePicture": picture})
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["profilePicture"], picture)

    def test_requires_session(self) -> None:
        self.assertError(self.new_client().get(PROFILE), 401, "MISSING_TOKEN")


if __name__ == "__main__":
    unittest.main()
