from marshmallow import Schema, fields, validate, pre_load, EXCLUDE
from notesync.notes.models import CATEGORIES, PERMISSIONS

SORT_FIELDS = ("date", "title")


def _strip(data, *names):
    if not isinstance(data, dict):
        return data
    data = dict(data)
    for name in names:
        if isinstance(data.get(name), str):
            data[name] = data[name].strip()
    return data


class NoteIn(Schema):
    class Meta:
        # le client envoie aussi des champs propres à l'appareil (tags, sync_state...)
        unknown = EXCLUDE

    id = fields.UUID(load_default=None)
    title = fields.String(required=True, validate=validate.Length(min=1, max=255))
    content = fields.String(required=True, validate=validate.Length(min=1))
    category = fields.String(load_default="general", validate=validate.OneOf(CATEGORIES))
    is_pinned = fields.Boolean(load_default=False)
    color = fields.String(allow_none=True, validate=validate.Length(max=50))
    image_url = fields.String(allow_none=True)
    reminder_date = fields.DateTime(allow_none=True)

    @pre_load
    def strip_text(self, data, **kwargs):
        return _strip(data, "title", "content")


class NoteListQuery(Schema):
    class Meta:
        unknown = EXCLUDE

    search = fields.String(load_default=None)
    category = fields.String(load_default=None, validate=validate.OneOf(CATEGORIES + ("all",)))
    sort_by = fields.String(data_key="sortBy", load_default="date", validate=validate.OneOf(SORT_FIELDS))
    order = fields.String(load_default="desc", validate=validate.OneOf(("asc", "desc")))


class AttachmentIn(Schema):
    file_name = fields.String(required=True, validate=validate.Length(min=1, max=255))
    file_url = fields.String(required=True, validate=validate.Length(min=1))
    file_type = fields.String(required=True, validate=validate.Length(min=1, max=50))
    file_size = fields.Integer(required=True, validate=validate.Range(min=0))


class AttachmentOut(Schema):
    id = fields.UUID(required=True)
    note_id = fields.UUID(required=True)
    file_name = fields.String(required=True)
    file_url = fields.String(required=True)
    file_type = fields.String(required=True)
    file_size = fields.Integer(required=True)
    uploaded_at = fields.DateTime(required=True)


class NoteOut(Schema):
    id = fields.UUID(required=True)
    owner_id = fields.UUID(required=True)
    title = fields.String(required=True)
    content = fields.String(required=True)
    category = fields.String(required=True)
    is_pinned = fields.Boolean(required=True)
    color = fields.String(allow_none=True)
    image_url = fields.String(allow_none=True)
    reminder_date = fields.DateTime(allow_none=True)
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime(required=True)
    deleted_at = fields.DateTime(allow_none=True)


class NoteDetailOut(NoteOut):
    attachments = fields.List(fields.Nested(AttachmentOut))


class ShareIn(Schema):
    email = fields.Email(required=True)
    permission = fields.String(load_default="view", validate=validate.OneOf(PERMISSIONS))

    @pre_load
    def strip_email(self, data, **kwargs):
        return _strip(data, "email")


class ShareOut(Schema):
    id = fields.UUID(required=True)
    note_id = fields.UUID(required=True)
    email = fields.Email(attribute="shared_with.email")
    permission = fields.String(required=True)
    shared_at = fields.DateTime(required=True)
