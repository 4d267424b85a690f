from marshmallow import Schema, fields, validate, pre_load
from notesync.auth.schemas import UserOut

class ProfileStats(Schema):
    total_notes = fields.Integer(required=True)
    pinned_notes = fields.Integer(required=True)

class ProfileOut(Schema):
    user = fields.Nested(UserOut, required=True)
    stats = fields.Nested(ProfileStats)

class ProfileIn(Schema):
    username = fields.String(required=True, validate=validate.Length(min=3, max=100))

    @pre_load
    def strip_username(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get("username"), str):
            data = dict(data, username=data["username"].strip())
        return data
