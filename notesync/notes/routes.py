from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from notesync.notes import service
from notesync.notes.schemas import (
    NoteIn, NoteOut, NoteDetailOut, NoteListQuery,
    AttachmentIn, AttachmentOut, ShareIn, ShareOut,
)
from notesync.common.authz import current_user_id
from notesync.common.utils import success

bp = Blueprint("notes", __name__)

note_in = NoteIn()
note_in_partial = NoteIn(partial=True)
note_out = NoteOut()
note_out_many = NoteOut(many=True)
note_detail_out = NoteDetailOut()
list_query = NoteListQuery()
attachment_in = AttachmentIn()
attachment_out = AttachmentOut()
share_in = ShareIn()
share_out = ShareOut()


@bp.get("/", strict_slashes=False)
@jwt_required()
def list_notes():
    params = list_query.load(request.args.to_dict())
    notes = service.list_notes(current_user_id(), **params)
    return success(note_out_many.dump(notes), count=len(notes))

@bp.get("/trash/all")
@jwt_required()
def list_trash():
    notes = service.list_trash(current_user_id())
    return success(note_out_many.dump(notes), count=len(notes))

@bp.get("/<uuid:note_id>")
@jwt_required()
def get_note(note_id):
    note = service.get_active_note(note_id, current_user_id())
    return jsonify(note_detail_out.dump(note)), 200

@bp.post("/", strict_slashes=False)
@jwt_required()
def create_note():
    payload = request.get_json(silent=True) or {}
    data = note_in.load(payload)
    note, created = service.create_note(current_user_id(), data)
    return jsonify(note_out.dump(note)), (201 if created else 200)

@bp.put("/<uuid:note_id>")
@jwt_required()
def update_note(note_id):
    payload = request.get_json(silent=True) or {}
    # Validations partielles (autorise subset des champs)
    data = note_in_partial.load(payload)
    note = service.update_note(note_id, current_user_id(), data)
    return jsonify(note_out.dump(note)), 200

@bp.patch("/<uuid:note_id>/pin")
@jwt_required()
def toggle_pin(note_id):
    note = service.toggle_pin(note_id, current_user_id())
    return jsonify(note_out.dump(note)), 200

@bp.delete("/<uuid:note_id>")
@jwt_required()
def delete_note(note_id):
    service.soft_delete(note_id, current_user_id())
    return success(message="Note moved to trash.")

@bp.patch("/<uuid:note_id>/restore")
@jwt_required()
def restore_note(note_id):
    note = service.restore(note_id, current_user_id())
    return jsonify(note_out.dump(note)), 200

@bp.post("/<uuid:note_id>/attachments")
@jwt_required()
def add_attachment(note_id):
    payload = request.get_json(silent=True) or {}
    data = attachment_in.load(payload)
    attachment = service.add_attachment(note_id, current_user_id(), data)
    return jsonify(attachment_out.dump(attachment)), 201

@bp.post("/<uuid:note_id>/share")
@jwt_required()
def share_note(note_id):
    payload = request.get_json(silent=True) or {}
    data = share_in.load(payload)
    grant, created = service.share_note(note_id, current_user_id(), data["email"], data["permission"])
    return jsonify(share_out.dump(grant)), (201 if created else 200)
