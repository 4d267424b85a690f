from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required
from notesync.extensions import db
from notesync.users.schemas import ProfileIn, ProfileOut
from notesync.notes.service import stats_for
from notesync.common.authz import current_user

bp = Blueprint("users", __name__)
profile_in = ProfileIn()
profile_out = ProfileOut()

@bp.get("/profile")
@jwt_required()
def get_profile():
    user = current_user()
    data = {"user": user, "stats": stats_for(user.id)}
    return jsonify(profile_out.dump(data)), 200

@bp.put("/profile")
@jwt_required()
def update_profile():
    user = current_user()
    payload = request.get_json(silent=True) or {}
    data = profile_in.load(payload)

    user.username = data["username"]
    db.session.commit()
    return jsonify(profile_out.dump({"user": user})), 200
