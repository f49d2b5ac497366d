"""
Service wiring: everything auth needs is built once per app from an AuthSettings
and stored on app.extensions, so request handlers never read secrets from globals.
"""
from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from api.config import AuthSettings
from models.stores import RefreshTokenStore, UserStore
from services.auth_service import AuthService
from services.user_service import UserService
from utils.security import PasswordHasher, TokenIssuer

EXTENSION_KEY = "social_app"


@dataclass
class Services:
    settings: AuthSettings
    hasher: PasswordHasher
    issuer: TokenIssuer
    user_store: UserStore
    refresh_store: RefreshTokenStore
    auth: AuthService
    users: UserService


def build_services(settings: AuthSettings, storage) -> Services:
    hasher = PasswordHasher()
    issuer = TokenIssuer(settings)
    user_store = UserStore(storage)
    refresh_store = RefreshTokenStore(storage)
    users = UserService(user_store, hasher)
    return Services(
        settings=settings,
        hasher=hasher,
        issuer=issuer,
        user_store=user_store,
        refresh_store=refresh_store,
        auth=AuthService(users, refresh_store, hasher, issuer, settings),
        users=users,
    )


def current_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
