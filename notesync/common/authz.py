import uuid
from flask_jwt_extended import get_jwt_identity
from notesync.extensions import db
from notesync.users.models import User
from notesync.common.errors import ApiError

def current_user_id() -> uuid.UUID:
    """sub du JWT -> UUID (à appeler sous @jwt_required)."""
    try:
        return uuid.UUID(get_jwt_identity())
    except (TypeError, ValueError):
        raise ApiError("Invalid token subject.", 422, "token_invalid_sub")

def current_user() -> User:
    """Charge l'utilisateur du token et vérifie qu'il est actif.
       Lève ApiError en cas de problème.
    """
    user = db.session.get(User, current_user_id())
    if not user:
        raise ApiError("User not found.", 404, "not_found")
    if not user.is_active:
        raise ApiError("Account is inactive.", 403, "user_inactive")
    return user
