# rentbook/errors.py
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

from .extensions import db

log = logging.getLogger(__name__)


class RentbookError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500
    code = "server_error"

    def __init__(self, message: str, errors: dict | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def to_dict(self) -> dict:
        body = {"error": self.code, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationError(RentbookError):
    status_code = 400
    code = "validation_error"


class NotFound(RentbookError):
    status_code = 404
    code = "not_found"


class Conflict(RentbookError):
    status_code = 409
    code = "conflict"


class PreconditionFailed(RentbookError):
    status_code = 412
    code = "precondition_failed"


class ExternalServiceError(RentbookError):
    status_code = 502
    code = "external_service_error"


def register_error_handlers(app):
    @app.errorhandler(RentbookError)
    def _rentbook_error(e):
        if e.status_code >= 500:
            log.warning("%s: %s", e.code, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(400)
    def bad_request(e):
        msg = getattr(e, "description", "Bad Request")
        return jsonify(error="bad_request", message=msg), 400

    @app.errorhandler(404)
    def not_found(e):
        return jsonify(error="not_found", message="Resource not found"), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify(error="method_not_allowed"), 405

    @app.errorhandler(413)
    def too_large(e):
        return jsonify(error="payload_too_large", message="Uploaded file exceeds the size limit"), 413

    @app.errorhandler(Exception)
    def server_error(e):
        if isinstance(e, HTTPException):
            return jsonify(error=e.name.lower().replace(" ", "_"), message=e.description), e.code
        db.session.rollback()
        app.logger.exception("Unhandled exception: %s", e)
        return jsonify(error="server_error", message="Something went wrong"), 500
