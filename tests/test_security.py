from datetime import timedelta

import jwt
import pytest

from api.config import AuthSettings, parse_duration
from utils.exceptions import ExpiredToken, InvalidToken
from utils.security import PasswordHasher, TokenIssuer, utcnow

SETTINGS = AuthSettings(access_secret="access-key", refresh_secret="refresh-key")


@pytest.fixture
def issuer():
    return TokenIssuer(SETTINGS)


@pytest.fixture(scope="module")
def hasher():
    return PasswordHasher()


def test_hash_is_salted_and_verifies(hasher):
    first = hasher.hash("secret12")
    second = hasher.hash("secret12")
    assert first != second
    assert first.startswith("$argon2")
    assert hasher.verify("secret12", first)
    assert hasher.verify("secret12", second)


def test_verify_returns_false_instead_of_raising(hasher):
    digest = hasher.hash("secret12")
    assert hasher.verify("wrong", digest) is False
    assert hasher.verify("secret12", "not-a-hash") is False
    assert hasher.verify("secret12", "") is False


def test_hash_rejects_empty_password(hasher):
    with pytest.raises(ValueError):
        hasher.hash("")


def test_access_token_claims(issuer):
    token = issuer.issue_access_token("user-1", "alice")
    claims = issuer.verify_access_token(token)
    assert claims.user_id == "user-1"
    assert claims.username == "alice"
    assert claims.token_type == "access"
    assert claims.expires_at - claims.issued_at == timedelta(minutes=15)


def test_refresh_token_claims(issuer):
    claims = issuer.verify_refresh_token(issuer.issue_refresh_token("user-1"))
    assert claims.user_id == "user-1"
    assert claims.username is None
    assert claims.expires_at - claims.issued_at == timedelta(days=7)


def test_tokens_issued_back_to_back_differ(issuer):
    assert issuer.issue_refresh_token("user-1") != issuer.issue_refresh_token("user-1")
    assert issuer.issue_access_token("user-1", "alice") != issuer.issue_access_token("user-1", "alice")


def test_token_classes_do_not_cross(issuer):
    access = issuer.issue_access_token("user-1", "alice")
    refresh = issuer.issue_refresh_token("user-1")
    with pytest.raises(InvalidToken):
        issuer.verify_access_token(refresh)
    with pytest.raises(InvalidToken):
        issuer.verify_refresh_token(access)


def test_access_token_signed_with_refresh_secret_and_access_type_is_rejected(issuer):
    now = int(utcnow().timestamp())
    forged = jwt.encode(
        {"userId": "user-1", "username": "alice", "type": "access", "iat": now, "exp": now + 60},
        SETTINGS.refresh_secret,
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken) as exc:
        issuer.verify_access_token(forged)
    assert type(exc.value) is InvalidToken


def test_expired_access_token_is_distinct_from_invalid(issuer):
    token = issuer.issue_access_token("user-1", "alice", now=utcnow() - timedelta(hours=1))
    with pytest.raises(ExpiredToken):
        issuer.verify_access_token(token)

    now = int(utcnow().timestamp())
    tampered = jwt.encode(
        {"userId": "user-1", "username": "alice", "type": "access", "iat": now, "exp": now + 60},
        "some-other-key",
        algorithm="HS256",
    )
    with pytest.raises(InvalidToken) as exc:
        issuer.verify_access_token(tampered)
    assert type(exc.value) is InvalidToken


def test_expired_refresh_token_is_plain_invalid(issuer):
    token = issuer.issue_refresh_token("user-1", now=utcnow() - timedelta(days=8))
    with pytest.raises(InvalidToken) as exc:
        issuer.verify_refresh_token(token)
    assert type(exc.value) is InvalidToken


def test_payload_without_user_id_is_invalid(issuer):
    now = int(utcnow().timestamp())
    token = jwt.encode({"type": "access", "username": "x", "iat": now, "exp": now + 60}, "access-key", algorithm="HS256")
    with pytest.raises(InvalidToken):
        issuer.verify_access_token(token)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("15m", timedelta(minutes=15)),
        ("7d", timedelta(days=7)),
        ("2h", timedelta(hours=2)),
        ("30s", timedelta(seconds=30)),
        ("3600", timedelta(seconds=3600)),
        (90, timedelta(seconds=90)),
    ],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


def test_parse_duration_rejects_garbage():
    with pytest.raises(ValueError):
        parse_duration("fortnight")


def test_settings_from_mapping():
    settings = AuthSettings.from_mapping(
        {"ACCESS_SECRET": "a", "REFRESH_SECRET": "r", "ACCESS_TOKEN_TTL": "5m", "REFRESH_TOKEN_TTL": "1d"}
    )
    assert settings.access_ttl == timedelta(minutes=5)
    assert settings.refresh_ttl == timedelta(days=1)
    assert settings.algorithm == "HS256"


def test_production_check_requires_distinct_real_secrets():
    AuthSettings(access_secret="a", refresh_secret="r").check_production_ready()
    with pytest.raises(RuntimeError):
        AuthSettings(access_secret="same", refresh_secret="same").check_production_ready()
    with pytest.raises(RuntimeError):
        AuthSettings(
            access_secret="dev-access-secret-change-me", refresh_secret="r"
        ).check_production_ready()
