from marshmallow import EXCLUDE, Schema, fields, validate


class PostWriteSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    message = fields.String(required=True, validate=validate.Length(min=1))
    user_id = fields.String(required=True, data_key="userId", validate=validate.Length(min=1))


class PostOutSchema(Schema):
    id = fields.String()
    message = fields.String()
    user_id = fields.String(data_key="userId")
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
