"""
User profile rules shared by registration and the /users endpoints.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional

from models.stores import UserStore
from models.user import User
from utils.exceptions import ConflictError, NotFound, ValidationError
from utils.security import PasswordHasher

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
USERNAME_MIN, USERNAME_MAX = 3, 30
BIO_MAX = 500
PROFILE_FIELDS = ("first_name", "last_name", "bio", "profile_image")


def normalize_email(email):
    return email.strip().lower() if isinstance(email, str) else email


def validate_email(email: str) -> None:
    if not EMAIL_RE.match(email):
        raise ValidationError("invalid email format")


def validate_username(username: str) -> None:
    if not USERNAME_MIN <= len(username) <= USERNAME_MAX:
        raise ValidationError(f"username must be between {USERNAME_MIN} and {USERNAME_MAX} characters")


def validate_new_user(username, email, password) -> None:
    """Checks run before any store access when a user is created."""
    if not username or not email or not password:
        raise ValidationError("username, email, and password are required")
    validate_email(email)
    validate_username(username)


def clean_profile(profile: dict) -> dict:
    data = {k: v for k, v in profile.items() if k in PROFILE_FIELDS}
    bio = data.get("bio")
    if bio is not None and len(bio) > BIO_MAX:
        raise ValidationError(f"bio must be at most {BIO_MAX} characters")
    return data


class UserService:
    def __init__(self, user_store: UserStore, hasher: PasswordHasher):
        self.users = user_store
        self.hasher = hasher

    def create(self, username, email, password, **profile) -> User:
        email = normalize_email(email)
        validate_new_user(username, email, password)
        profile = clean_profile(profile)
        if self.users.find_by_email_or_username(email, username):
            raise ConflictError()
        user = self.users.create(
            username=username,
            email=email,
            password_hash=self.hasher.hash(password),
            **profile,
        )
        logger.info("Created user %s", user.id)
        return user

    def list(self) -> List[User]:
        return self.users.list()

    def get(self, user_id: str) -> User:
        user = self.users.find_by_id(user_id)
        if not user:
            raise NotFound("user not found")
        return user

    def update(self, user_id: str, username: Optional[str] = None, email: Optional[str] = None, **profile) -> User:
        """Change profile fields; uniqueness is re-checked only for a changed username or email."""
        user = self.get(user_id)
        changes = clean_profile(profile)

        if username and username != user.username:
            validate_username(username)
            if self.users.find_by_username(username):
                raise ConflictError("username already exists")
            changes["username"] = username

        email = normalize_email(email)
        if email and email != user.email:
            validate_email(email)
            if self.users.find_by_email(email):
                raise ConflictError("email already exists")
            changes["email"] = email

        return self.users.update(user, **changes)

    def delete(self, user_id: str) -> None:
        user = self.get(user_id)
        self.users.delete(user)
        logger.info("Deleted user %s", user_id)
