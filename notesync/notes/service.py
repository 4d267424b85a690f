import logging
import uuid
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from notesync.extensions import db
from notesync.notes.models import Note, Attachment, SharedNote
from notesync.users.models import User
from notesync.auth.service import normalize_email
from notesync.common.errors import ApiError, not_found
from notesync.common.utils import utcnow

logger = logging.getLogger("notesync.notes")

# Champs modifiables via PUT /notes/:id
UPDATABLE_FIELDS = ("title", "content", "category", "is_pinned", "color", "image_url", "reminder_date")


def _owned(owner_id: uuid.UUID):
    return Note.query.filter(Note.owner_id == owner_id)

def _active(owner_id: uuid.UUID):
    return _owned(owner_id).filter(Note.deleted_at.is_(None))

def get_active_note(note_id: uuid.UUID, owner_id: uuid.UUID) -> Note:
    note = _active(owner_id).filter(Note.id == note_id).first()
    if note is None:
        raise not_found("Note")
    return note

def list_notes(owner_id, search=None, category=None, sort_by="date", order="desc") -> list[Note]:
    q = _active(owner_id)
    if search:
        q = q.filter(or_(
            Note.title.icontains(search, autoescape=True),
            Note.content.icontains(search, autoescape=True),
        ))
    if category and category != "all":
        q = q.filter(Note.category == category)

    sort_col = Note.title if sort_by == "title" else Note.updated_at
    sort_col = sort_col.asc() if order == "asc" else sort_col.desc()
    # épinglées toujours en tête, quel que soit l'ordre demandé
    return q.order_by(Note.is_pinned.desc(), sort_col, Note.id).all()

def list_trash(owner_id) -> list[Note]:
    return (_owned(owner_id)
            .filter(Note.deleted_at.is_not(None))
            .order_by(Note.deleted_at.desc())
            .all())

def create_note(owner_id, data: dict) -> tuple[Note, bool]:
    """Crée une note; un id fourni par l'appareil rend l'appel rejouable.

    Retourne (note, created). created=False quand l'id existait déjà pour ce propriétaire.
    """
    data = dict(data)
    note_id = data.pop("id", None)
    if note_id is not None:
        existing = db.session.get(Note, note_id)
        if existing is not None:
            if existing.owner_id != owner_id:
                raise ApiError("Note id already in use.", 409, "conflict", details={"id": str(note_id)})
            if existing.is_trashed:
                raise ApiError("Note is in the trash; restore it instead.", 409, "conflict",
                               details={"id": str(note_id)})
            return existing, False

    note = Note(owner_id=owner_id, **{k: v for k, v in data.items() if k in UPDATABLE_FIELDS})
    if note_id is not None:
        note.id = note_id
    db.session.add(note)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ApiError("Note id already in use.", 409, "conflict", details={"id": str(note_id)})

    logger.info("note_created", extra={"note_id": str(note.id), "owner_id": str(owner_id)})
    return note, True

def update_note(note_id, owner_id, changes: dict) -> Note:
    note = get_active_note(note_id, owner_id)
    for field in UPDATABLE_FIELDS:
        if field in changes:
            setattr(note, field, changes[field])
    note.updated_at = utcnow()
    db.session.commit()
    return note

def toggle_pin(note_id, owner_id) -> Note:
    note = get_active_note(note_id, owner_id)
    note.is_pinned = not note.is_pinned
    note.updated_at = utcnow()
    db.session.commit()
    return note

def soft_delete(note_id, owner_id) -> Note:
    # une note déjà dans la corbeille n'est plus adressable: 404
    note = get_active_note(note_id, owner_id)
    note.deleted_at = utcnow()
    db.session.commit()
    logger.info("note_trashed", extra={"note_id": str(note.id), "owner_id": str(owner_id)})
    return note

def restore(note_id, owner_id) -> Note:
    note = _owned(owner_id).filter(Note.id == note_id).first()
    if note is None:
        raise not_found("Note")
    note.deleted_at = None
    db.session.commit()
    logger.info("note_restored", extra={"note_id": str(note.id), "owner_id": str(owner_id)})
    return note

def add_attachment(note_id, owner_id, data: dict) -> Attachment:
    note = get_active_note(note_id, owner_id)
    attachment = Attachment(note_id=note.id, **data)
    db.session.add(attachment)
    db.session.commit()
    return attachment

def share_note(note_id, owner_id, email: str, permission: str = "view") -> tuple[SharedNote, bool]:
    note = get_active_note(note_id, owner_id)
    grantee = User.query.filter_by(email=normalize_email(email)).first()
    if grantee is None or not grantee.is_active:
        raise not_found("User")
    if grantee.id == owner_id:
        raise ApiError("Cannot share a note with yourself.", 400, "validation_error",
                       details={"email": ["Cannot share a note with yourself."]})

    grant = SharedNote.query.filter_by(note_id=note.id, shared_with_user_id=grantee.id).first()
    created = grant is None
    if created:
        grant = SharedNote(note_id=note.id, shared_with_user_id=grantee.id, permission=permission)
        db.session.add(grant)
    else:
        grant.permission = permission
    db.session.commit()

    logger.info("note_shared", extra={"note_id": str(note.id), "permission": permission})
    return grant, created

def stats_for(owner_id) -> dict:
    active = _active(owner_id)
    return {
        "total_notes": active.count(),
        "pinned_notes": active.filter(Note.is_pinned.is_(True)).count(),
    }
