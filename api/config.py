"""
Environment-aware configuration.
Secrets, token lifetimes and the database URL come from the environment (.env is read if present).
AuthSettings is the frozen view of the auth-related keys handed to the token issuer and auth service.
"""
import os
import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping

from dotenv import load_dotenv

load_dotenv()  # Read .env if present

INSECURE_ACCESS_SECRET = "dev-access-secret-change-me"
INSECURE_REFRESH_SECRET = "dev-refresh-secret-change-me"

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value) -> timedelta:
    """Turn '15m', '7d', '3600' (seconds) or a timedelta into a timedelta."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value).lower())
    if not match:
        raise ValueError(f"Invalid duration: {value!r} (expected e.g. '15m', '7d', '3600')")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: int(amount)})


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")  # Set a strong key in production
    DEBUG = False
    TESTING = False
    # CORS: in dev we usually allow '*', in prod supply a comma-separated list in env
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///social-app.db")
    SQL_ECHO = False
    # Token signing: access and refresh tokens use separate keys
    ACCESS_SECRET = os.getenv("ACCESS_SECRET", INSECURE_ACCESS_SECRET)
    REFRESH_SECRET = os.getenv("REFRESH_SECRET", INSECURE_REFRESH_SECRET)
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_TTL = os.getenv("ACCESS_TOKEN_TTL", "15m")
    REFRESH_TOKEN_TTL = os.getenv("REFRESH_TOKEN_TTL", "7d")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    # In dev, propagate exceptions so our error handler has full context
    PROPAGATE_EXCEPTIONS = True


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    ACCESS_SECRET = "test-access-secret"
    REFRESH_SECRET = "test-refresh-secret"
    LOG_LEVEL = "WARNING"


class ProductionConfig(BaseConfig):
    APP_ENV = "prod"
    DEBUG = False


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/test/prod).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


@dataclass(frozen=True)
class AuthSettings:
    access_secret: str
    refresh_secret: str
    algorithm: str = "HS256"
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=7)

    @classmethod
    def from_mapping(cls, config: Mapping) -> "AuthSettings":
        return cls(
            access_secret=config["ACCESS_SECRET"],
            refresh_secret=config["REFRESH_SECRET"],
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            access_ttl=parse_duration(config.get("ACCESS_TOKEN_TTL", "15m")),
            refresh_ttl=parse_duration(config.get("REFRESH_TOKEN_TTL", "7d")),
        )

    def check_production_ready(self) -> None:
        if self.access_secret == INSECURE_ACCESS_SECRET or self.refresh_secret == INSECURE_REFRESH_SECRET:
            raise RuntimeError("ACCESS_SECRET and REFRESH_SECRET must be set in production")
        if self.access_secret == self.refresh_secret:
            raise RuntimeError("ACCESS_SECRET and REFRESH_SECRET must differ")
