from datetime import datetime, timezone
from flask import jsonify

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def success(data=None, message="ok", status=200, **extra):
    body = {"status": "success", "message": message, "data": data}
    body.update(extra)
    return jsonify(body), status
