import uuid
from sqlalchemy import ForeignKey, Uuid
from notesync.extensions import db
from notesync.common.utils import utcnow

CATEGORIES = ("general", "work", "personal", "ideas", "study")
PERMISSIONS = ("view", "edit")


class Note(db.Model):
    __tablename__ = "notes"

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(50), nullable=False, default="general")
    is_pinned = db.Column(db.Boolean, nullable=False, default=False)
    color = db.Column(db.String(50), nullable=True)
    image_url = db.Column(db.Text, nullable=True)
    reminder_date = db.Column(db.DateTime(timezone=True), nullable=True)

    owner_id = db.Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    owner = db.relationship("User", back_populates="notes")

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    # non NULL = dans la corbeille
    deleted_at = db.Column(db.DateTime(timezone=True), nullable=True, index=True)

    attachments = db.relationship(
        "Attachment", back_populates="note", lazy="selectin",
        cascade="all, delete-orphan", order_by="Attachment.uploaded_at",
    )
    shares = db.relationship("SharedNote", back_populates="note", lazy="selectin", cascade="all, delete-orphan")

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None


class Attachment(db.Model):
    __tablename__ = "attachments"

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    note_id = db.Column(Uuid(as_uuid=True), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    file_name = db.Column(db.String(255), nullable=False)
    file_url = db.Column(db.Text, nullable=False)
    file_type = db.Column(db.String(50), nullable=False)
    file_size = db.Column(db.Integer, nullable=False)
    uploaded_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)

    note = db.relationship("Note", back_populates="attachments")


class SharedNote(db.Model):
    """Intention de partage: aucune lecture n'est accordée au destinataire."""
    __tablename__ = "shared_notes"
    __table_args__ = (db.UniqueConstraint("note_id", "shared_with_user_id", name="uq_shared_note_grantee"),)

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    note_id = db.Column(Uuid(as_uuid=True), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    shared_with_user_id = db.Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    permission = db.Column(db.String(20), nullable=False, default="view")
    shared_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)

    note = db.relationship("Note", back_populates="shares")
    shared_with = db.relationship("User", lazy="joined")
