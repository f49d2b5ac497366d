from marshmallow import EXCLUDE, Schema, fields, pre_load, validate


def _norm_email(v):
    return v.strip().lower() if isinstance(v, str) else v


class UserProfileSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    first_name = fields.String(data_key="firstName", allow_none=True)
    last_name = fields.String(data_key="lastName", allow_none=True)
    bio = fields.String(allow_none=True, validate=validate.Length(max=500))
    profile_image = fields.String(data_key="profileImage", allow_none=True)

    @pre_load
    def accept_snake_case(self, data, **kwargs):
        # Both firstName and first_name are accepted on input
        if isinstance(data, dict):
            data = dict(data)
            for snake, camel in (("first_name", "firstName"), ("last_name", "lastName"), ("profile_image", "profileImage")):
                if snake in data and camel not in data:
                    data[camel] = data.pop(snake)
        return data


class UserCreateSchema(UserProfileSchema):
    # Presence and format are checked by the user service so the error messages stay uniform
    username = fields.String(allow_none=True)
    email = fields.String(allow_none=True)
    password = fields.String(allow_none=True, load_only=True)

    @pre_load
    def normalize(self, data, **kwargs):
        if isinstance(data, dict) and "email" in data:
            data = dict(data)
            data["email"] = _norm_email(data["email"])
        return data


class UserUpdateSchema(UserProfileSchema):
    username = fields.String(allow_none=True, validate=validate.Length(min=3, max=30))
    email = fields.String(allow_none=True)


class UserLoginSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    email = fields.String(allow_none=True)
    password = fields.String(allow_none=True)


class UserOutSchema(Schema):
    id = fields.String()
    username = fields.String()
    email = fields.String()
    first_name = fields.String(data_key="firstName", allow_none=True)
    last_name = fields.String(data_key="lastName", allow_none=True)
    bio = fields.String(allow_none=True)
    profile_image = fields.String(data_key="profileImage", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")


class RefreshTokenSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    refresh_token = fields.String(data_key="refreshToken", allow_none=True)

    @pre_load
    def accept_snake_case(self, data, **kwargs):
        if isinstance(data, dict) and "refresh_token" in data and "refreshToken" not in data:
            data = dict(data)
            data["refreshToken"] = data.pop("refresh_token")
        return data
