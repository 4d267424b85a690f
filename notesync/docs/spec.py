# notesync/docs/spec.py
from apispec import APISpec
from apispec.ext.marshmallow import MarshmallowPlugin
from marshmallow import Schema, fields

from notesync.auth.schemas import RegisterSchema, LoginSchema, AuthOut, UserOut
from notesync.notes.schemas import NoteIn, NoteOut, NoteDetailOut, AttachmentIn, AttachmentOut, ShareIn, ShareOut
from notesync.users.schemas import ProfileIn, ProfileOut

class MessageSchema(Schema):
    status = fields.String()
    message = fields.String()

class ErrorBody(Schema):
    code = fields.String()
    message = fields.String()
    details = fields.Dict()

class ErrorEnvelope(Schema):
    error = fields.Nested(ErrorBody)

def _ref(name: str):
    return {"$ref": f"#/components/schemas/{name}"}

def _json(name: str, description="OK"):
    return {"description": description, "content": {"application/json": {"schema": _ref(name)}}}

def _list_of(name: str):
    return {
        "description": "OK",
        "content": {"application/json": {"schema": {
            "type": "object",
            "properties": {
                "status": {"type": "string"},
                "count": {"type": "integer"},
                "data": {"type": "array", "items": _ref(name)},
            },
        }}},
    }

_BEARER = [{"bearerAuth": []}]
_ID_PARAM = {"in": "path", "name": "id", "required": True, "schema": {"type": "string", "format": "uuid"}}
_NOT_FOUND = _json("Error", "Not found (absent, trashed or not owned)")


def build_spec(prefix: str = "/api"):
    spec = APISpec(
        title="NoteSync API",
        version="1.0.0",
        openapi_version="3.0.3",
        info={"description": "Notes sync service, OpenAPI document"},
        plugins=[MarshmallowPlugin()],
    )

    # Sécurité JWT Bearer
    spec.components.security_scheme(
        "bearerAuth",
        {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
    )

    # Composants
    # schémas imbriqués d'abord, sinon le plugin les enregistre sous le même nom
    spec.components.schema("UserOut", schema=UserOut)
    spec.components.schema("AttachmentOut", schema=AttachmentOut)
    spec.components.schema("Register", schema=RegisterSchema)
    spec.components.schema("Login", schema=LoginSchema)
    spec.components.schema("AuthOut", schema=AuthOut)
    spec.components.schema("NoteIn", schema=NoteIn)
    spec.components.schema("NoteOut", schema=NoteOut)
    spec.components.schema("NoteDetail", schema=NoteDetailOut)
    spec.components.schema("AttachmentIn", schema=AttachmentIn)
    spec.components.schema("ShareIn", schema=ShareIn)
    spec.components.schema("ShareOut", schema=ShareOut)
    spec.components.schema("ProfileIn", schema=ProfileIn)
    spec.components.schema("ProfileOut", schema=ProfileOut)
    spec.components.schema("Message", schema=MessageSchema)
    spec.components.schema("Error", schema=ErrorEnvelope)

    # ---- AUTH ----
    spec.path(
        path=f"{prefix}/auth/register",
        operations={"post": {
            "summary": "Register",
            "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("Register")}}},
            "responses": {"201": _json("AuthOut", "Created"), "400": _json("Error", "Validation error / email taken")},
        }},
    )
    spec.path(
        path=f"{prefix}/auth/login",
        operations={"post": {
            "summary": "Login",
            "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("Login")}}},
            "responses": {
                "200": _json("AuthOut"),
                "401": _json("Error", "Invalid credentials"),
                "403": _json("Error", "Inactive account"),
            },
        }},
    )
    spec.path(
        path=f"{prefix}/auth/logout",
        operations={"post": {
            "summary": "Revoke the current token",
            "security": _BEARER,
            "responses": {"200": _json("Message")},
        }},
    )

    # ---- NOTES ----
    spec.path(
        path=f"{prefix}/notes",
        operations={
            "get": {
                "summary": "List my active notes (pinned first)",
                "security": _BEARER,
                "parameters": [
                    {"in": "query", "name": "search", "schema": {"type": "string"}},
                    {"in": "query", "name": "category", "schema": {"type": "string"}},
                    {"in": "query", "name": "sortBy", "schema": {"type": "string", "enum": ["date", "title"]}},
                    {"in": "query", "name": "order", "schema": {"type": "string", "enum": ["asc", "desc"]}},
                ],
                "responses": {"200": _list_of("NoteOut")},
            },
            "post": {
                "summary": "Create note (replay-safe when an id is supplied)",
                "security": _BEARER,
                "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("NoteIn")}}},
                "responses": {
                    "201": _json("NoteOut", "Created"),
                    "200": _json("NoteOut", "Already created with this id"),
                    "400": _json("Error", "Validation error"),
                    "409": _json("Error", "Id owned by another user"),
                },
            },
        },
    )
    spec.path(
        path=f"{prefix}/notes/trash/all",
        operations={"get": {
            "summary": "List my trashed notes (newest deleted first)",
            "security": _BEARER,
            "responses": {"200": _list_of("NoteOut")},
        }},
    )
    spec.path(
        path=f"{prefix}/notes/{{id}}",
        operations={
            "get": {
                "summary": "Get note with attachments",
                "security": _BEARER,
                "parameters": [_ID_PARAM],
                "responses": {"200": _json("NoteDetail"), "404": _NOT_FOUND},
            },
            "put": {
                "summary": "Update note (supplied fields only)",
                "security": _BEARER,
                "parameters": [_ID_PARAM],
                "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("NoteIn")}}},
                "responses": {"200": _json("NoteOut"), "404": _NOT_FOUND},
            },
            "delete": {
                "summary": "Move note to trash",
                "security": _BEARER,
                "parameters": [_ID_PARAM],
                "responses": {"200": _json("Message"), "404": _NOT_FOUND},
            },
        },
    )
    spec.path(
        path=f"{prefix}/notes/{{id}}/pin",
        operations={"patch": {
            "summary": "Toggle pinned flag",
            "security": _BEARER,
            "parameters": [_ID_PARAM],
            "responses": {"200": _json("NoteOut"), "404": _NOT_FOUND},
        }},
    )
    spec.path(
        path=f"{prefix}/notes/{{id}}/restore",
        operations={"patch": {
            "summary": "Restore note from trash",
            "security": _BEARER,
            "parameters": [_ID_PARAM],
            "responses": {"200": _json("NoteOut"), "404": _NOT_FOUND},
        }},
    )
    spec.path(
        path=f"{prefix}/notes/{{id}}/attachments",
        operations={"post": {
            "summary": "Attach file metadata",
            "security": _BEARER,
            "parameters": [_ID_PARAM],
            "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("AttachmentIn")}}},
            "responses": {"201": _json("AttachmentOut", "Created"), "404": _NOT_FOUND},
        }},
    )
    spec.path(
        path=f"{prefix}/notes/{{id}}/share",
        operations={"post": {
            "summary": "Share note with another user (intent only)",
            "security": _BEARER,
            "parameters": [_ID_PARAM],
            "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("ShareIn")}}},
            "responses": {"201": _json("ShareOut", "Created"), "200": _json("ShareOut"), "404": _NOT_FOUND},
        }},
    )

    # ---- PROFILE ----
    spec.path(
        path=f"{prefix}/user/profile",
        operations={
            "get": {
                "summary": "Get my profile and note stats",
                "security": _BEARER,
                "responses": {"200": _json("ProfileOut"), "404": _json("Error", "Not found")},
            },
            "put": {
                "summary": "Update my username",
                "security": _BEARER,
                "requestBody": {"required": True, "content": {"application/json": {"schema": _ref("ProfileIn")}}},
                "responses": {"200": _json("ProfileOut"), "400": _json("Error", "Validation error")},
            },
        },
    )

    return spec.to_dict()
