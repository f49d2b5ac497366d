from __future__ import annotations

from flask import Blueprint, request, jsonify

from models import storage
from models.post import Post
from models.user import User
from models.schemas.post import PostWriteSchema, PostOutSchema
from utils.exceptions import NotFound, ValidationError

bp = Blueprint("posts", __name__)

post_write_schema = PostWriteSchema()
post_out_schema = PostOutSchema()
posts_out_schema = PostOutSchema(many=True)


def _get_post_or_404(post_id: str) -> Post:
    post = storage.get(Post, post_id)
    if not post:
        raise NotFound("post not found")
    return post


def _require_user(user_id: str) -> None:
    if not storage.get(User, user_id):
        raise ValidationError("invalid userId")


@bp.post("/posts")
def create_post():
    """
    Create a post
    ---
    tags:
      - Posts
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [message, userId]
          properties:
            message: { type: string }
            userId: { type: string }
    responses:
      201: { description: Created }
      400: { description: message and userId are required / invalid userId }
    """
    payload = request.get_json(silent=True) or {}
    data = post_write_schema.load(payload)
    _require_user(data["user_id"])

    post = Post(message=data["message"], user_id=data["user_id"])
    storage.new(post)
    storage.save()
    return jsonify(post_out_schema.dump(post)), 201


@bp.get("/posts")
def list_posts():
    """
    List posts, optionally filtered by author
    ---
    tags:
      - Posts
    parameters:
      - in: query
        name: userId
        type: string
    responses:
      200: { description: OK }
    """
    query = storage.get_session().query(Post)
    user_id = request.args.get("userId")
    if user_id:
        query = query.filter(Post.user_id == user_id)
    rows = query.order_by(Post.created_at.asc()).all()
    return jsonify(posts_out_schema.dump(rows)), 200


@bp.get("/posts/<post_id>")
def get_post(post_id: str):
    """
    Get a single post by id
    ---
    tags:
      - Posts
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: post not found }
    """
    return jsonify(post_out_schema.dump(_get_post_or_404(post_id))), 200


@bp.put("/posts/<post_id>")
def update_post(post_id: str):
    """
    Replace a post's message and author
    ---
    tags:
      - Posts
    consumes:
      - application/json
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [message, userId]
    responses:
      200: { description: Updated }
      400: { description: Validation error }
      404: { description: post not found }
    """
    post = _get_post_or_404(post_id)
    payload = request.get_json(silent=True) or {}
    data = post_write_schema.load(payload)
    _require_user(data["user_id"])

    post.message = data["message"]
    post.user_id = data["user_id"]
    storage.new(post)
    storage.save()
    return jsonify(post_out_schema.dump(post)), 200


@bp.delete("/posts/<post_id>")
def delete_post(post_id: str):
    """
    Delete a post
    ---
    tags:
      - Posts
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      404: { description: post not found }
    """
    post = _get_post_or_404(post_id)
    storage.delete(post)
    storage.save()
    return jsonify({"message": "post deleted successfully", "postId": post_id}), 200
