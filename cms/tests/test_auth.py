import unittest
from unittest.mock import MagicMock

from jose import jwt

from cms.auth import (
    ALGORITHM,
    AdminUser,
    InMemoryTokenVerifier,
    SessionManager,
    token_from_request,
)
from cms.documents import DocumentStore
from cms.errors import AuthenticationError, StorageError
from cms.site import AdminEmailStore
from cms.storage import InMemoryStorageClient

SECRET = "unit-test-secret"


class SessionManagerTests(unittest.TestCase):
    def setUp(self):
        self.admin_emails = AdminEmailStore(
            DocumentStore(InMemoryStorageClient()), fallback_emails=["admin@iitgn.ac.in"]
        )
        self.verifier = InMemoryTokenVerifier()
        self.verifier.register("good", "uid-1", "Admin@IITGN.ac.in", name="Admin")
        self.verifier.register("outsider", "uid-2", "someone@gmail.com")
        self.verifier.register("no-email", "uid-3", None)
        self.sessions = SessionManager(self.verifier, self.admin_emails, SECRET)

    def test_authenticate_admin(self):
        user = self.sessions.authenticate("good")
        self.assertEqual(user.email, "admin@iitgn.ac.in")
        self.assertEqual(user.uid, "uid-1")
        self.assertEqual(user.to_dict()["isAdmin"], True)

    def test_authenticate_rejections(self):
        cases = {
            "": "No ID token provided",
            "unknown": "Invalid ID token",
            "no-email": "No email found in token",
            "outsider": "Unauthorized: Admin access required",
        }
        for token, message in cases.items():
            with self.subTest(token=token):
                with self.assertRaises(AuthenticationError) as ctx:
                    self.sessions.authenticate(token)
                self.assertEqual(ctx.exception.message, message)

    def test_session_token_round_trip(self):
        token = self.sessions.create_session_token(
            AdminUser(uid="uid-1", email="admin@iitgn.ac.in", name="Admin")
        )
        claims = jwt.decode(token, SECRET, algorithms=[ALGORITHM])
        self.assertEqual(claims["sub"], "uid-1")
        self.assertTrue(claims["isAdmin"])
        user = self.sessions.admin_from_token(token)
        self.assertEqual(user.name, "Admin")

    def test_expired_session(self):
        sessions = SessionManager(self.verifier, self.admin_emails, SECRET, ttl_minutes=-5)
        token = sessions.create_session_token(AdminUser(uid="u", email="admin@iitgn.ac.in"))
        with self.assertRaises(AuthenticationError) as ctx:
            sessions.decode_session_token(token)
        self.assertEqual(ctx.exception.message, "Session expired")

    def test_token_signed_with_other_secret(self):
        other = SessionManager(self.verifier, self.admin_emails, "other-secret")
        token = other.create_session_token(AdminUser(uid="u", email="admin@iitgn.ac.in"))
        with self.assertRaises(AuthenticationError):
            self.sessions.admin_from_token(token)

    def test_removed_admin_loses_session(self):
        token = self.sessions.create_session_token(
            AdminUser(uid="u", email="admin@iitgn.ac.in")
        )
        self.admin_emails.replace(["new@iitgn.ac.in"], "test")
        with self.assertRaises(AuthenticationError):
            self.sessions.admin_from_token(token)

    def test_missing_token(self):
        with self.assertRaises(AuthenticationError):
            self.sessions.admin_from_token(None)

    def test_fallback_list_when_store_fails(self):
        store = MagicMock()
        store.emails.side_effect = StorageError("down")
        sessions = SessionManager(
            self.verifier, store, SECRET, fallback_emails=["Admin@iitgn.ac.in"]
        )
        self.assertEqual(sessions.authenticate("good").email, "admin@iitgn.ac.in")


class TokenFromRequestTests(unittest.TestCase):
    def test_bearer_header_wins(self):
        self.assertEqual(token_from_request("Bearer abc", "cookie"), "abc")

    def test_cookie_fallback(self):
        self.assertEqual(token_from_request(None, "cookie"), "cookie")
        self.assertEqual(token_from_request("Basic xyz", "cookie"), "cookie")
        self.assertIsNone(token_from_request("Bearer  ", None))


if __name__ == "__main__":
    unittest.main()
