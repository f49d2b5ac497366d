"""
Authentication blueprint:
- POST /auth/register
- POST /auth/login
- POST /auth/refresh
- POST /auth/logout

The implementation:
- Uses argon2 for password hashing (via utils.security)
- Issues short-lived access tokens and longer-lived refresh tokens (JWTs, separate secrets)
- Stores refresh tokens in DB (RefreshToken model) so logout can revoke them
"""
from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.user import RefreshTokenSchema, UserCreateSchema, UserLoginSchema, UserOutSchema
from services import current_services
from utils.decorators import jwt_required

bp = Blueprint("auth", __name__, url_prefix="/auth")

user_create_schema = UserCreateSchema()
user_login_schema = UserLoginSchema()
user_out_schema = UserOutSchema()
refresh_token_schema = RefreshTokenSchema()


def _refresh_token_from_body(payload):
    return refresh_token_schema.load(payload).get("refresh_token")


def _session_response(message: str, result, status: int):
    return jsonify(
        {
            "message": message,
            "user": user_out_schema.dump(result.user),
            "accessToken": result.access_token,
            "refreshToken": result.refresh_token,
        }
    ), status


@bp.post("/register")
def register():
    """
    Register a new user and open a session.
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        schema:
          type: object
          required: [username, email, password]
          properties:
            username: { type: string, minLength: 3, maxLength: 30 }
            email: { type: string }
            password: { type: string }
            firstName: { type: string }
            lastName: { type: string }
    responses:
      201:
        description: Created (returns user and token pair)
      400:
        description: Missing field or invalid email
      409:
        description: username or email already exists
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)
    result = current_services().auth.register(
        data.pop("username", None),
        data.pop("email", None),
        data.pop("password", None),
        **data,
    )
    return _session_response("user registered", result, 201)


@bp.post("/login")
def login():
    """
    Login: return user, accessToken and refreshToken
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             email: { type: string }
             password: { type: string }
    responses:
      200:
        description: OK (returns tokens)
      400:
        description: email and password are required
      401:
        description: invalid email or password
    """
    payload = request.get_json(silent=True) or {}
    data = user_login_schema.load(payload)
    result = current_services().auth.login(data.get("email"), data.get("password"))
    return _session_response("login successful", result, 200)


@bp.post("/refresh")
def refresh():
    """
    Exchange a refresh token for a new access token (the refresh token is not rotated)
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: OK (returns accessToken)
      400:
        description: refresh token is required
      401:
        description: Invalid, expired or revoked refresh token
    """
    payload = request.get_json(silent=True) or {}
    access_token = current_services().auth.refresh(_refresh_token_from_body(payload))
    return jsonify({"message": "token refreshed", "accessToken": access_token}), 200


@bp.post("/logout")
@jwt_required()
def logout():
    """
    Logout: revokes the given refresh token
    ---
    tags:
      - Auth
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      -  in: body
         name: body
         schema:
           type: object
           properties:
             refreshToken: { type: string }
    responses:
      200:
        description: logged out
      400:
        description: Body is not an object or refreshToken is not a string
      401:
        description: Unauthorized
    """
    payload = request.get_json(silent=True) or {}
    message = current_services().auth.logout(_refresh_token_from_body(payload))
    return jsonify({"message": message}), 200
