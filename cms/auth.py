"""
Admin sign-in: a Firebase ID token is exchanged for a signed session token
once its email is found on the admin allow-list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Protocol

from firebase_admin import auth as firebase_auth
from jose import ExpiredSignatureError, JWTError, jwt

from cms.errors import AuthenticationError, CmsError
from cms.firebase import get_firebase_app
from cms.site import AdminEmailStore, normalize_email

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
SESSION_COOKIE = "cms_session"


@dataclass
class AdminUser:
    uid: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
            "isAdmin": True,
        }


class TokenVerifier(Protocol):
    """Checks an identity-provider ID token and returns its claims."""

    def verify(self, id_token: str) -> dict:
        ...


class FirebaseTokenVerifier:
    def __init__(self, service_account_key: str, storage_bucket: Optional[str] = None):
        self._app = get_firebase_app(service_account_key, storage_bucket)

    def verify(self, id_token: str) -> dict:
        try:
            return firebase_auth.verify_id_token(id_token, app=self._app)
        except (
            ValueError,
            firebase_auth.InvalidIdTokenError,
            firebase_auth.UserDisabledError,
            firebase_auth.CertificateFetchError,
        ) as exc:
            logger.warning("Firebase ID token rejected: %s", type(exc).__name__)
            raise AuthenticationError("Invalid ID token") from exc


class InMemoryTokenVerifier:
    """Accepts only tokens registered up front. For development and tests."""

    def __init__(self):
        self.tokens: Dict[str, dict] = {}

    def register(
        self,
        token: str,
        uid: str,
        email: Optional[str],
        name: Optional[str] = None,
        picture: Optional[str] = None,
    ) -> None:
        self.tokens[token] = {"uid": uid, "email": email, "name": name, "picture": picture}

    def verify(self, id_token: str) -> dict:
        claims = self.tokens.get(id_token)
        if claims is None:
            raise AuthenticationError("Invalid ID token")
        return dict(claims)


def token_from_request(authorization: Optional[str], cookie: Optional[str]) -> Optional[str]:
    if authorization:
        scheme, _, value = authorization.partition(" ")
        if scheme.lower() == "bearer" and value.strip():
            return value.strip()
    return cookie or None


class SessionManager:
    def __init__(
        self,
        verifier: TokenVerifier,
        admin_emails: AdminEmailStore,
        secret: str,
        ttl_minutes: int = 720,
        fallback_emails: Iterable[str] = (),
    ):
        self.verifier = verifier
        self.admin_emails = admin_emails
        self.secret = secret
        self.ttl = timedelta(minutes=ttl_minutes)
        self.fallback_emails = [normalize_email(e) for e in fallback_emails]

    def allowed_emails(self) -> List[str]:
        try:
            return self.admin_emails.emails()
        except CmsError as exc:
            logger.warning("Admin email list unavailable, using fallback list: %s", exc)
            return list(self.fallback_emails)

    def authenticate(self, id_token: str) -> AdminUser:
        if not id_token:
            raise AuthenticationError("No ID token provided")
        claims = self.verifier.verify(id_token)
        email = normalize_email(claims.get("email") or "")
        if not email:
            raise AuthenticationError("No email found in token")
        if email not in self.allowed_emails():
            logger.warning("Sign-in refused for non-admin account")
            raise AuthenticationError("Unauthorized: Admin access required")
        return AdminUser(
            uid=claims.get("uid") or claims.get("sub") or email,
            email=email,
            name=claims.get("name"),
            picture=claims.get("picture"),
        )

    def create_session_token(self, user: AdminUser) -> str:
        expire = datetime.now(timezone.utc) + self.ttl
        payload = {
            "sub": user.uid,
            "email": user.email,
            "name": user.name,
            "picture": user.picture,
            "isAdmin": True,
            "exp": expire,
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def decode_session_token(self, token: str) -> AdminUser:
        try:
            payload = jwt.decode(token, self.secret, algorithms=[ALGORITHM])
        except ExpiredSignatureError as exc:
            raise AuthenticationError("Session expired") from exc
        except JWTError as exc:
            raise AuthenticationError("Unauthorized") from exc
        if not payload.get("isAdmin") or not payload.get("email"):
            raise AuthenticationError("Unauthorized")
        return AdminUser(
            uid=payload.get("sub", ""),
            email=payload["email"],
            name=payload.get("name"),
            picture=payload.get("picture"),
        )

    def admin_from_token(self, token: Optional[str]) -> AdminUser:
        """Resolve a session token to a user who is still on the allow-list."""
        if not token:
            raise AuthenticationError("Unauthorized")
        user = self.decode_session_token(token)
        if normalize_email(user.email) not in self.allowed_emails():
            raise AuthenticationError("Unauthorized")
        return user
