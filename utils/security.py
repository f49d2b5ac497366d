"""
security helpers:
- Argon2 password hashing via argon2-cffi
- Access / refresh JWT creation and verification via PyJWT, each class signed with its own secret
- JTI generation so two tokens issued in the same second never collide
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt
from argon2 import PasswordHasher as Argon2Hasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from api.config import AuthSettings
from utils.exceptions import ExpiredToken, InvalidToken

ACCESS = "access"
REFRESH = "refresh"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID).
    """
    return str(uuid.uuid4())


class PasswordHasher:
    """One-way salted password hashing backed by argon2id."""

    def __init__(self, hasher: Optional[Argon2Hasher] = None):
        self._ph = hasher or Argon2Hasher()
        self._dummy_hash: Optional[str] = None

    def hash(self, password: str) -> str:
        """Hash a plaintext password using Argon2
        """
        if not isinstance(password, str) or not password:
            raise ValueError("password must be a non-empty string")
        return self._ph.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """ Verify a plaintext password using argon2; False on mismatch or a malformed hash
        """
        if not isinstance(password, str) or not password_hash:
            return False
        try:
            return self._ph.verify(password_hash, password)
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False

    def burn(self, password: str) -> None:
        """Run a verify against a throwaway hash so unknown accounts cost as much as known ones."""
        if self._dummy_hash is None:
            self._dummy_hash = self._ph.hash(generate_jti())
        self.verify(password or "", self._dummy_hash)


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    username: Optional[str]
    issued_at: datetime
    expires_at: datetime
    token_type: str
    jti: str

    @classmethod
    def from_payload(cls, payload: Dict[str, Any], expected_type: str) -> "TokenClaims":
        if payload.get("type") != expected_type:
            raise InvalidToken()
        user_id = payload.get("userId")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidToken()
        username = payload.get("username")
        if expected_type == ACCESS and not isinstance(username, str):
            raise InvalidToken()
        return cls(
            user_id=user_id,
            username=username,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            token_type=expected_type,
            jti=str(payload.get("jti", "")),
        )


class TokenIssuer:
    """
    Creates and checks the two token classes.
    Access tokens carry {userId, username}; refresh tokens only {userId}.
    A token signed with one secret never validates against the other.
    """

    def __init__(self, settings: AuthSettings):
        self.settings = settings

    def _encode(self, claims: Dict[str, Any], secret: str, ttl, now: Optional[datetime]) -> str:
        now = now or utcnow()
        payload = dict(claims)
        payload["jti"] = generate_jti()
        payload["iat"] = int(now.timestamp())
        payload["exp"] = int((now + ttl).timestamp())
        return jwt.encode(payload, secret, algorithm=self.settings.algorithm)

    def _decode(self, token: str, secret: str) -> Dict[str, Any]:
        return jwt.decode(
            token,
            secret,
            algorithms=[self.settings.algorithm],
            options={"require": ["exp", "iat"]},
        )

    def issue_access_token(self, user_id: str, username: str, now: Optional[datetime] = None) -> str:
        claims = {"userId": str(user_id), "username": username, "type": ACCESS}
        return self._encode(claims, self.settings.access_secret, self.settings.access_ttl, now)

    def issue_refresh_token(self, user_id: str, now: Optional[datetime] = None) -> str:
        claims = {"userId": str(user_id), "type": REFRESH}
        return self._encode(claims, self.settings.refresh_secret, self.settings.refresh_ttl, now)

    def verify_access_token(self, token: str) -> TokenClaims:
        """
        Decode and validate an access token.
        Raises ExpiredToken when only the expiry is wrong, InvalidToken for anything else.
        """
        if not token:
            raise InvalidToken()
        try:
            payload = self._decode(token, self.settings.access_secret)
        except jwt.ExpiredSignatureError:
            raise ExpiredToken()
        except jwt.InvalidTokenError:
            raise InvalidToken()
        return TokenClaims.from_payload(payload, ACCESS)

    def verify_refresh_token(self, token: str) -> TokenClaims:
        """
        Signature and expiry check only; the persisted refresh-token row is checked by AuthService.
        """
        if not token:
            raise InvalidToken("invalid refresh token")
        try:
            payload = self._decode(token, self.settings.refresh_secret)
        except jwt.InvalidTokenError:
            raise InvalidToken("invalid refresh token")
        try:
            return TokenClaims.from_payload(payload, REFRESH)
        except InvalidToken:
            raise InvalidToken("invalid refresh token")
