import uuid
from sqlalchemy import Uuid
from passlib.hash import pbkdf2_sha256
from notesync.extensions import db
from notesync.common.utils import utcnow

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    username = db.Column(db.String(100), nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
    last_login = db.Column(db.DateTime(timezone=True), nullable=True)

    # relation vers Note
    notes = db.relationship("Note", back_populates="owner", lazy="selectin", cascade="all, delete-orphan")

    # helpers mot de passe
    def set_password(self, raw_password: str) -> None:
        self.password_hash = pbkdf2_sha256.hash(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return pbkdf2_sha256.verify(raw_password, self.password_hash)
