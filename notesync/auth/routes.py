from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt

from notesync.extensions import limiter
from notesync.users.models import User
from notesync.auth.models import TokenBlocklist
from notesync.auth.schemas import RegisterSchema, LoginSchema, AuthOut
from notesync.auth.service import create_user, authenticate_user

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
auth_out = AuthOut()


def _issue_session(user: User) -> dict:
    """Le client mobile ne garde qu'un bearer token opaque + un instantané du profil."""
    token = create_access_token(identity=str(user.id), fresh=True)
    return auth_out.dump({"user": user, "token": token})


@bp.post("/register")
@limiter.limit(lambda: current_app.config.get("RATELIMIT_AUTH_REGISTER", "10/hour"))
def register():
    payload = request.get_json(silent=True) or {}
    data = register_schema.load(payload)

    user = create_user(data["email"], data["username"], data["password"])
    return jsonify(_issue_session(user)), 201


@bp.post("/login")
@limiter.limit(lambda: current_app.config.get("RATELIMIT_AUTH_LOGIN", "5/minute"))
def login():
    payload = request.get_json(silent=True) or {}
    data = login_schema.load(payload)

    user = authenticate_user(data["email"], data["password"])
    return jsonify(_issue_session(user)), 200


@bp.post("/logout")
@jwt_required()
def logout():
    j = get_jwt()
    # idempotent
    TokenBlocklist.revoke(j["jti"], j["type"])
    return jsonify({"status": "success", "message": "Token revoked."}), 200
