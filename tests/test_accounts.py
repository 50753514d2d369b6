"""Tests for studentms.services.accounts: registration, login, ban/unban/delete, listing."""

import unittest
from datetime import UTC, datetime
from unittest.mock import patch

from studentms.core.errors import (
    AuthenticationError,
    AuthorizationError,
    DuplicateEntryError,
    NotFoundError,
    ValidationFailedError,
)
from studentms.models import Role, User
from studentms.services.accounts import (
    DEFAULT_BAN_REASON,
    authenticate,
    ban_user,
    delete_user,
    get_user,
    list_users,
    register_user,
    unban_user,
)
from tests.support import DEFAULT_PASSWORD, DatabaseTestCase

NOW = datetime(2026, 6, 1, 10, 0, tzinfo=UTC)


class TestRegisterUser(DatabaseTestCase):
    def test_self_service_forces_faculty(self) -> None:
        user = register_user(
            self.db, "alice", "alice@x.com", DEFAULT_PASSWORD, "Admin", self_service=True
        )
        self.assertEqual(user.role, Role.FACULTY.value)

    def test_admin_created_keeps_role(self) -> None:
        user = register_user(
            self.db, "boss", "boss@x.com", DEFAULT_PASSWORD, "Admin", self_service=False
        )
        self.assertEqual(user.role, Role.ADMIN.value)

    def test_default_role_is_faculty(self) -> None:
        user = register_user(self.db, "carol", "carol@x.com", DEFAULT_PASSWORD, None, self_service=False)
        self.assertEqual(user.role, Role.FACULTY.value)

    def test_password_is_hashed_and_id_generated(self) -> None:
        user = self.make_user("alice")
        self.assertNotEqual(user.password_hash, DEFAULT_PASSWORD)
        self.assertTrue(user.password_hash.startswith("$2"))
        self.assertEqual(len(user.id), 36)
        self.assertEqual(user.password_history, [])

    def test_email_is_stored_lower_case(self) -> None:
        user = self.make_user("alice", "Alice@X.com")
        self.assertEqual(user.email, "alice@x.com")

    def test_duplicate_email_is_case_insensitive(self) -> None:
        self.make_user("alice", "alice@x.com")
        with self.assertRaises(DuplicateEntryError) as ctx:
            self.make_user("alice2", "ALICE@x.com")
        self.assertEqual(ctx.exception.code, "DUPLICATE_EMAIL")

    def test_duplicate_username(self) -> None:
        self.make_user("alice", "alice@x.com")
        with self.assertRaises(DuplicateEntryError) as ctx:
            self.make_user("alice", "other@x.com")
        self.assertEqual(ctx.exception.code, "DUPLICATE_USERNAME")

    def test_missing_fields(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            register_user(self.db, "alice", "", DEFAULT_PASSWORD, self_service=True)
        self.assertEqual(ctx.exception.code, "MISSING_REQUIRED_FIELDS")

    def test_invalid_fields_are_reported_per_field(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            register_user(self.db, "a!", "not-an-email", "short", self_service=True)
        self.assertEqual(ctx.exception.code, "VALIDATION_ERROR")
        fields = {e["field"] for e in ctx.exception.details}
        self.assertEqual(fields, {"username", "email", "password"})

    def test_password_over_bcrypt_limit_is_rejected(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            register_user(
                self.db, "alice", "alice@x.com", "a" * 72 + "FirstSuffix", self_service=True
            )
        self.assertEqual(ctx.exception.details, [
            {"field": "password", "message": "Password must be at most 72 bytes long"},
        ])

    def test_unknown_role_rejected_for_admin_create(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            register_user(self.db, "dave", "dave@x.com", DEFAULT_PASSWORD, "Root", self_service=False)
        self.assertEqual(ctx.exception.details[0]["field"], "role")


class TestAuthenticate(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.user = self.make_user("alice", "alice@x.com")

    def test_login_by_email_sets_last_login(self) -> None:
        user = authenticate(self.db, "ALICE@x.com", None, DEFAULT_PASSWORD, now=NOW)
        self.assertEqual(user.id, self.user.id)
        self.assertIsNotNone(user.last_login)

    def test_login_by_username(self) -> None:
        user = authenticate(self.db, None, "alice", DEFAULT_PASSWORD, now=NOW)
        self.assertEqual(user.id, self.user.id)

    def test_missing_identifier(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            authenticate(self.db, None, None, DEFAULT_PASSWORD)
        self.assertEqual(ctx.exception.code, "MISSING_CREDENTIALS")

    def test_missing_password(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            authenticate(self.db, "alice@x.com", None, "")
        self.assertEqual(ctx.exception.code, "MISSING_PASSWORD")

    def test_wrong_password(self) -> None:
        with self.assertRaises(AuthenticationError) as ctx:
            authenticate(self.db, "alice@x.com", None, "wrong-password", now=NOW)
        self.assertEqual(ctx.exception.code, "INVALID_CREDENTIALS")

    def test_unknown_identity_still_checks_a_hash(self) -> None:
        with patch(
            "studentms.services.accounts.verify_password", return_value=False
        ) as mock_verify:
            with self.assertRaises(AuthenticationError):
                authenticate(self.db, "nobody@x.com", None, DEFAULT_PASSWORD, now=NOW)
        mock_verify.assert_called_once()
        self.assertEqual(mock_verify.call_args.args[0], DEFAULT_PASSWORD)

    def test_banned_user_cannot_login(self) -> None:
        admin = self.make_user("boss", role=Role.ADMIN)
        ban_user(self.db, admin.id, self.user.id, now=NOW)
        with self.assertRaises(AuthorizationError) as ctx:
            authenticate(self.db, "alice@x.com", None, DEFAULT_PASSWORD, now=NOW)
        self.assertEqual(ctx.exception.code, "ACCOUNT_BANNED")


class TestBanUnbanDelete(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.make_user("boss", role=Role.ADMIN)
        self.target = self.make_user("alice")

    def test_cannot_ban_self(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            ban_user(self.db, self.admin.id, self.admin.id)
        self.assertEqual(ctx.exception.code, "CANNOT_BAN_SELF")

    def test_cannot_delete_self(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            delete_user(self.db, self.admin.id, self.admin.id)
        self.assertEqual(ctx.exception.code, "CANNOT_DELETE_SELF")

    def test_ban_records_actor_and_default_reason(self) -> None:
        user = ban_user(self.db, self.admin.id, self.target.id, now=NOW)
        self.assertTrue(user.is_banned)
        self.assertEqual(user.banned_by, self.admin.id)
        self.assertEqual(user.ban_reason, DEFAULT_BAN_REASON)
        self.assertIsNotNone(user.banned_at)

    def test_ban_twice(self) -> None:
        ban_user(self.db, self.admin.id, self.target.id, reason="spam")
        with self.assertRaises(ValidationFailedError) as ctx:
            ban_user(self.db, self.admin.id, self.target.id)
        self.assertEqual(ctx.exception.code, "USER_ALREADY_BANNED")

    def test_ban_unknown_user(self) -> None:
        with self.assertRaises(NotFoundError) as ctx:
            ban_user(self.db, self.admin.id, "does-not-exist")
        self.assertEqual(ctx.exception.code, "USER_NOT_FOUND")

    def test_unban_clears_ban_record(self) -> None:
        ban_user(self.db, self.admin.id, self.target.id, reason="spam")
        user = unban_user(self.db, self.target.id)
        self.assertFalse(user.is_banned)
        self.assertIsNone(user.banned_at)
        self.assertIsNone(user.banned_by)
        self.assertIsNone(user.ban_reason)

    def test_unban_not_banned(self) -> None:
        with self.assertRaises(ValidationFailedError) as ctx:
            unban_user(self.db, self.target.id)
        self.assertEqual(ctx.exception.code, "USER_NOT_BANNED")

    def test_delete_is_immediate(self) -> None:
        deleted = delete_user(self.db, self.admin.id, self.target.id)
        self.assertEqual(deleted["username"], "alice")
        self.assertIsNone(self.db.get(User, deleted["id"]))
        with self.assertRaises(NotFoundError):
            get_user(self.db, deleted["id"])

    def test_delete_unknown_user(self) -> None:
        with self.assertRaises(NotFoundError):
            delete_user(self.db, self.admin.id, "does-not-exist")


class TestListUsers(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.make_user("boss", role=Role.ADMIN)
        for name in ("alice", "bob", "carol"):
            self.make_user(name)

    def test_filter_by_role(self) -> None:
        page = list_users(self.db, role="Admin")
        self.assertEqual([u.username for u in page.users], ["boss"])
        self.assertEqual(page.total, 1)

    def test_search_is_case_insensitive(self) -> None:
        page = list_users(self.db, search="ALI")
        self.assertEqual([u.username for u in page.users], ["alice"])

    def test_search_wildcards_are_literal(self) -> None:
        self.make_user("under_score")
        page = list_users(self.db, search="_")
        self.assertEqual([u.username for u in page.users], ["under_score"])
        self.assertEqual(list_users(self.db, search="%").total, 0)

    def test_pagination(self) -> None:
        page = list_users(self.db, page=2, limit=3)
        self.assertEqual(page.total, 4)
        self.assertEqual(page.pages, 2)
        self.assertEqual(len(page.users), 1)


if __name__ == "__main__":
    unittest.main()
