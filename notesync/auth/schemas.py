from marshmallow import Schema, fields, validate, pre_load

class RegisterSchema(Schema):
    email = fields.Email(required=True, validate=validate.Length(max=255))
    username = fields.String(required=True, validate=validate.Length(min=3, max=100))
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=6, max=128))

    @pre_load
    def strip_username(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("username"), str):
            data = dict(data, username=data["username"].strip())
        return data

class LoginSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True, validate=validate.Length(min=1))

class UserOut(Schema):
    id = fields.UUID(required=True)
    email = fields.Email(required=True)
    username = fields.String(required=True)
    created_at = fields.DateTime(required=True)
    last_login = fields.DateTime(allow_none=True)

class AuthOut(Schema):
    user = fields.Nested(UserOut, required=True)
    token = fields.String(required=True)
