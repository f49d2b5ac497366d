"""
Session-token lifecycle: register, login, refresh and logout.

A session moves Anonymous -> Authenticated (access + refresh pair issued)
-> Refreshed (new access token, same refresh token) -> LoggedOut (refresh row deleted).
Every register/login persists its own refresh token, so one user can hold several
valid sessions at once (one per device). Refresh tokens are never rotated.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from api.config import AuthSettings
from models.stores import RefreshTokenStore
from models.user import User
from services.user_service import UserService, normalize_email
from utils.exceptions import (
    InvalidCredentials,
    InvalidOrExpiredToken,
    UserNotFound,
    ValidationError,
)
from utils.security import PasswordHasher, TokenIssuer, utcnow

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user: User
    access_token: str
    refresh_token: str


class AuthService:
    def __init__(
        self,
        user_service: UserService,
        refresh_store: RefreshTokenStore,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        settings: AuthSettings,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.user_service = user_service
        self.users = user_service.users
        self.refresh_tokens = refresh_store
        self.hasher = hasher
        self.issuer = issuer
        self.settings = settings
        self.clock = clock or utcnow

    def register(self, username, email, password, **profile) -> AuthResult:
        user = self.user_service.create(username, email, password, **profile)
        logger.info("Registered user %s", user.id)
        return self._start_session(user)

    def login(self, email, password) -> AuthResult:
        if not email or not password:
            raise ValidationError("email and password are required")

        user = self.users.find_by_email(normalize_email(email))
        if not user:
            self.hasher.burn(password)
            logger.warning("Login failed: unknown account")
            raise InvalidCredentials()
        if not self.hasher.verify(password, user.password_hash):
            logger.warning("Login failed for user %s: bad password", user.id)
            raise InvalidCredentials()

        logger.info("User %s logged in", user.id)
        return self._start_session(user)

    def refresh(self, refresh_token) -> str:
        """Exchange a live refresh token for a new access token; the refresh token stays as is."""
        if not refresh_token:
            raise ValidationError("refresh token is required")

        claims = self.issuer.verify_refresh_token(refresh_token)

        user = self.users.find_by_id(claims.user_id)
        if not user:
            raise UserNotFound()

        # The stored row is the revocation gate, independent of the JWT's own exp
        stored = self.refresh_tokens.find_by_token_and_user(refresh_token, user.id)
        if not stored or stored.is_expired(self.clock()):
            logger.warning("Refresh rejected for user %s: token revoked or expired", user.id)
            raise InvalidOrExpiredToken()

        return self.issuer.issue_access_token(user.id, user.username, now=self.clock())

    def logout(self, refresh_token=None) -> str:
        if refresh_token:
            removed = self.refresh_tokens.delete_by_token(refresh_token)
            logger.info("Logout removed %d refresh token(s)", removed)
        return "logged out"

    def sweep_expired(self) -> int:
        return self.refresh_tokens.delete_expired(self.clock())

    def _start_session(self, user: User) -> AuthResult:
        now = self.clock()
        access_token = self.issuer.issue_access_token(user.id, user.username, now=now)
        refresh_token = self.issuer.issue_refresh_token(user.id, now=now)
        self.refresh_tokens.create(user.id, refresh_token, now + self.settings.refresh_ttl)
        logger.info("User %s has %d active session(s)", user.id, self.refresh_tokens.count_for_user(user.id))
        return AuthResult(user=user, access_token=access_token, refresh_token=refresh_token)
