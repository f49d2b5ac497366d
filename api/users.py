from __future__ import annotations

from flask import Blueprint, request, jsonify

from models.schemas.user import UserCreateSchema, UserOutSchema, UserUpdateSchema
from services import current_services
from utils.decorators import jwt_required

bp = Blueprint("users", __name__)

user_create_schema = UserCreateSchema()
user_update_schema = UserUpdateSchema()
user_out_schema = UserOutSchema()
user_list_out_schema = UserOutSchema(many=True)


@bp.post("/users")
def create_user():
    """
    Create a user without opening a session
    ---
    tags:
      - Users
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
            bio: { type: string, maxLength: 500 }
            profileImage: { type: string }
    responses:
      201: { description: Created }
      400: { description: Missing or invalid fields }
      409: { description: username or email already exists }
    """
    payload = request.get_json(silent=True) or {}
    data = user_create_schema.load(payload)
    user = current_services().users.create(
        data.pop("username", None),
        data.pop("email", None),
        data.pop("password", None),
        **data,
    )
    return jsonify(user_out_schema.dump(user)), 201


@bp.get("/users")
def list_users():
    """
    List all users (passwords are never returned)
    ---
    tags:
      - Users
    responses:
      200: { description: OK }
    """
    return jsonify(user_list_out_schema.dump(current_services().users.list())), 200


@bp.get("/users/<user_id>")
def get_user(user_id: str):
    """
    Get a user by id
    ---
    tags:
      - Users
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: user not found }
    """
    return jsonify(user_out_schema.dump(current_services().users.get(user_id))), 200


@bp.put("/users/<user_id>")
@jwt_required()
def update_user(user_id: str):
    """
    Update a user profile
    ---
    tags:
      - Users
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            username: { type: string, minLength: 3, maxLength: 30 }
            email: { type: string }
            firstName: { type: string }
            lastName: { type: string }
            bio: { type: string, maxLength: 500 }
            profileImage: { type: string }
    responses:
      200: { description: Updated }
      400: { description: Invalid email format }
      401: { description: Unauthorized }
      404: { description: user not found }
      409: { description: username or email already exists }
    """
    payload = request.get_json(silent=True) or {}
    data = user_update_schema.load(payload)
    user = current_services().users.update(user_id, **data)
    return jsonify(user_out_schema.dump(user)), 200


@bp.delete("/users/<user_id>")
@jwt_required()
def delete_user(user_id: str):
    """
    Delete a user (posts and comments are left in place)
    ---
    tags:
      - Users
    security:
      - Bearer: []
    parameters:
      - in: path
        name: user_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      401: { description: Unauthorized }
      404: { description: user not found }
    """
    current_services().users.delete(user_id)
    return jsonify({"message": "user deleted successfully", "userId": user_id}), 200
