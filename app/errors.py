"""Request-level error types and their JSON handlers.

Per-recipient and per-field failures are caught where they happen and
collected into ``errors`` lists; only the exceptions below travel up to
the HTTP layer.
"""
from flask import jsonify
from werkzeug.exceptions import HTTPException


class AppError(Exception):
    status_code = 500

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class ValidationError(AppError):
    status_code = 400

    def __init__(self, message=None, fields=None):
        super().__init__(message)
        self.fields = fields or {}


class AuthorizationError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class PersistenceError(AppError):
    status_code = 500


class ExternalServiceError(AppError):
    status_code = 502


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err):
        if err.status_code >= 500:
            app.logger.error('%s: %s', err.__class__.__name__, err.message)
        body = {"error": err.message}
        if isinstance(err, ValidationError) and err.fields:
            body["fields"] = err.fields
        return jsonify(body), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"error": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        app.logger.exception('Unhandled error: %s', err)
        return jsonify({"error": "Internal server error"}), 500
