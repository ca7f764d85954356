# greenstride/errors.py
from flask import current_app, jsonify
from sqlalchemy.exc import OperationalError
from werkzeug.exceptions import HTTPException

from . import db


class ApiError(Exception):
    """Error with an HTTP status, raised by services and mapped to JSON."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class NotFound(ApiError):
    status_code = 404


class Conflict(ApiError):
    status_code = 409


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        db.session.rollback()
        return jsonify({"message": err.message}), err.status_code

    @app.errorhandler(OperationalError)
    def handle_db_unavailable(err):
        db.session.rollback()
        current_app.logger.exception(f"Database unavailable: {err.orig}")
        return jsonify({"message": "Database unavailable"}), 503

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        if isinstance(err, HTTPException):
            return jsonify({"message": err.description}), err.code
        db.session.rollback()
        current_app.logger.exception(f"Unhandled error: {err}")
        return jsonify({"message": "Internal server error"}), 500
