"""
Repositories over DBStorage used by the services.

UserStore is the credential store, RefreshTokenStore keeps issued refresh tokens.
Uniqueness (username, email, refresh token string) is enforced by unique indexes,
so a racing duplicate insert surfaces here as IntegrityError and leaves as ConflictError.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from models.refresh_token import RefreshToken
from models.user import User
from utils.exceptions import ConflictError

logger = logging.getLogger(__name__)


class _Store:
    def __init__(self, storage):
        self.storage = storage

    @property
    def session(self):
        return self.storage.get_session()

    def _commit(self, conflict_message: str | None = None):
        try:
            self.storage.save()
        except IntegrityError as exc:
            logger.info("Unique constraint rejected write: %s", exc.orig)
            raise ConflictError(conflict_message) from exc


class UserStore(_Store):

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self.storage.get(User, user_id)

    def find_by_email(self, email: str) -> Optional[User]:
        return self.session.query(User).filter(User.email == email).first()

    def find_by_username(self, username: str) -> Optional[User]:
        return self.session.query(User).filter(User.username == username).first()

    def find_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        return (
            self.session.query(User)
            .filter(or_(User.email == email, User.username == username))
            .first()
        )

    def list(self) -> List[User]:
        return self.session.query(User).order_by(User.created_at.asc()).all()

    def create(self, **fields) -> User:
        user = User(**fields)
        self.storage.new(user)
        self._commit()
        return user

    def update(self, user: User, **fields) -> User:
        for key, value in fields.items():
            setattr(user, key, value)
        self.storage.new(user)
        self._commit()
        return user

    def delete(self, user: User) -> None:
        self.storage.delete(user)
        self.storage.save()


class RefreshTokenStore(_Store):

    def create(self, user_id: str, token: str, expires_at: datetime) -> RefreshToken:
        row = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
        self.storage.new(row)
        self._commit("refresh token already issued")
        return row

    def find_by_token_and_user(self, token: str, user_id: str) -> Optional[RefreshToken]:
        return (
            self.session.query(RefreshToken)
            .filter(RefreshToken.token == token, RefreshToken.user_id == user_id)
            .first()
        )

    def delete_by_token(self, token: str) -> int:
        deleted = (
            self.session.query(RefreshToken)
            .filter(RefreshToken.token == token)
            .delete(synchronize_session=False)
        )
        self.storage.save()
        return deleted

    def delete_expired(self, now: datetime) -> int:
        deleted = (
            self.session.query(RefreshToken)
            .filter(RefreshToken.expires_at <= now)
            .delete(synchronize_session=False)
        )
        self.storage.save()
        return deleted

    def count_for_user(self, user_id: str) -> int:
        return self.session.query(RefreshToken).filter(RefreshToken.user_id == user_id).count()
