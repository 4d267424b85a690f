from sqlalchemy.exc import IntegrityError
from notesync.extensions import db
from notesync.users.models import User
from notesync.common.errors import ApiError
from notesync.common.utils import utcnow

def normalize_email(email: str) -> str:
    return (email or "").strip().lower()

def _email_taken():
    return ApiError("Email already registered.", 400, "email_taken",
                    details={"email": ["Email already registered."]})

def create_user(email: str, username: str, password: str) -> User:
    email_n = normalize_email(email)
    if User.query.filter_by(email=email_n).first() is not None:
        raise _email_taken()

    user = User(email=email_n, username=username)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise _email_taken()
    return user

def authenticate_user(email: str, password: str) -> User:
    email_n = normalize_email(email)
    user: User | None = User.query.filter_by(email=email_n).first()
    if not user or not user.check_password(password):
        raise ApiError("Invalid credentials.", 401, "invalid_credentials")
    if not user.is_active:
        raise ApiError("Account is inactive.", 403, "user_inactive")

    user.last_login = utcnow()
    db.session.commit()
    return user
