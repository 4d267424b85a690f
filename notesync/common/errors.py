import logging
from flask import jsonify, g
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger("notesync.error")

class ApiError(Exception):
    def __init__(self, message, status_code=400, code="bad_request", details=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details or {}

def not_found(what="Resource"):
    # Absent, trashed ou appartenant à un autre utilisateur: même réponse
    return ApiError(f"{what} not found.", 404, "not_found")

def json_error(message, status, code, details=None):
    return jsonify({
        "error": {"code": code, "message": message, "details": details or {}}
    }), status

def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(e: ApiError):
        return json_error(e.message, e.status_code, e.code, e.details)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e: ValidationError):
        return json_error("Invalid request body.", 400, "validation_error", e.messages)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        # Ex: 404, 405, 413…
        return json_error(e.description or "HTTP error", e.code or 500, "http_error")

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        # traceback côté logs uniquement, jamais dans la réponse
        logger.exception("unhandled_exception", extra={"request_id": getattr(g, "request_id", "-")})
        return json_error("Internal server error.", 500, "internal_error")
