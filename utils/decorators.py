from __future__ import annotations
import logging
from functools import wraps
from flask import request, g
from services import current_services
from utils.exceptions import ExpiredToken, InvalidToken, Unauthorized

logger = logging.getLogger(__name__)


def bearer_token() -> str | None:
    auth = request.headers.get("Authorization", "")
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def jwt_required():
    """
    Require a valid access token. The decoded claims land in g.current_user
    (user_id, username); the user row is not re-read, so a deleted user's
    token keeps working until it expires.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            token = bearer_token()
            if not token:
                raise Unauthorized("No token provided")
            try:
                claims = current_services().issuer.verify_access_token(token)
            except ExpiredToken:
                logger.warning("Rejected expired access token on %s", request.path)
                raise
            except InvalidToken:
                logger.warning("Rejected invalid access token on %s", request.path)
                raise
            g.current_user = claims
            return fn(*args, **kwargs)

        return wrapper

    return decorator
