from __future__ import annotations

from flask import Blueprint, request, jsonify

from models import storage
from models.comment import Comment
from models.post import Post
from models.schemas.comment import CommentCreateSchema, CommentUpdateSchema, CommentOutSchema
from utils.exceptions import NotFound, ValidationError

bp = Blueprint("comments", __name__)

comment_create_schema = CommentCreateSchema()
comment_update_schema = CommentUpdateSchema()
comment_out_schema = CommentOutSchema()
comments_out_schema = CommentOutSchema(many=True)


def _get_comment_or_404(comment_id: str) -> Comment:
    comment = storage.get(Comment, comment_id)
    if not comment:
        raise NotFound("Comment not found")
    return comment


@bp.get("/comments")
def list_comments():
    """
    List all comments
    ---
    tags:
      - Comments
    responses:
      200: { description: OK }
    """
    rows = storage.get_session().query(Comment).order_by(Comment.created_at.asc()).all()
    return jsonify(comments_out_schema.dump(rows)), 200


@bp.get("/comments/post/<post_id>")
def list_comments_for_post(post_id: str):
    """
    List the comments of one post
    ---
    tags:
      - Comments
    parameters:
      - in: path
        name: post_id
        type: string
        required: true
    responses:
      200: { description: OK }
    """
    rows = (
        storage.get_session()
        .query(Comment)
        .filter(Comment.post_id == post_id)
        .order_by(Comment.created_at.asc())
        .all()
    )
    return jsonify(comments_out_schema.dump(rows)), 200


@bp.get("/comments/<comment_id>")
def get_comment(comment_id: str):
    """
    Get a comment by id
    ---
    tags:
      - Comments
    parameters:
      - in: path
        name: comment_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Comment not found }
    """
    return jsonify(comment_out_schema.dump(_get_comment_or_404(comment_id))), 200


@bp.post("/comments")
def create_comment():
    """
    Comment on a post
    ---
    tags:
      - Comments
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [postId, sender, content]
          properties:
            postId: { type: string }
            sender: { type: string }
            content: { type: string }
    responses:
      201: { description: Created }
      400: { description: Validation error }
    """
    payload = request.get_json(silent=True) or {}
    data = comment_create_schema.load(payload)
    if not storage.get(Post, data["post_id"]):
        raise ValidationError("invalid postId")

    comment = Comment(**data)
    storage.new(comment)
    storage.save()
    return jsonify(comment_out_schema.dump(comment)), 201


@bp.put("/comments/<comment_id>")
def update_comment(comment_id: str):
    """
    Update a comment (partial)
    ---
    tags:
      - Comments
    consumes:
      - application/json
    parameters:
      - in: path
        name: comment_id
        type: string
        required: true
      - in: body
        name: body
        schema:
          type: object
          properties:
            sender: { type: string }
            content: { type: string }
    responses:
      200: { description: Updated }
      400: { description: Validation error }
      404: { description: Comment not found }
    """
    comment = _get_comment_or_404(comment_id)
    payload = request.get_json(silent=True) or {}
    data = comment_update_schema.load(payload)
    for field, value in data.items():
        setattr(comment, field, value)
    storage.new(comment)
    storage.save()
    return jsonify(comment_out_schema.dump(comment)), 200


@bp.delete("/comments/<comment_id>")
def delete_comment(comment_id: str):
    """
    Delete a comment
    ---
    tags:
      - Comments
    parameters:
      - in: path
        name: comment_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      404: { description: Comment not found }
    """
    comment = _get_comment_or_404(comment_id)
    storage.delete(comment)
    storage.save()
    return jsonify({"message": "Comment deleted"}), 200
