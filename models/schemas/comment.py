from marshmallow import EXCLUDE, Schema, fields, validate


class CommentCreateSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    post_id = fields.String(required=True, data_key="postId", validate=validate.Length(min=1))
    sender = fields.String(required=True, validate=validate.Length(min=1, max=255))
    content = fields.String(required=True, validate=validate.Length(min=1))


class CommentUpdateSchema(Schema):
    # All optional, but validated if present
    class Meta:
        unknown = EXCLUDE

    sender = fields.String(validate=validate.Length(min=1, max=255))
    content = fields.String(validate=validate.Length(min=1))


class CommentOutSchema(Schema):
    id = fields.String()
    post_id = fields.String(data_key="postId")
    sender = fields.String()
    content = fields.String()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
