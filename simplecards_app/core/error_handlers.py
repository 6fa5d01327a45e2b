"""
Error Handlers for SimpleCards

Every API error leaves the app as
``{"success": false, "message": ..., "code": ..., "details": {...}}``
with ``details`` only present when there is something to report.
"""

from typing import Any, Dict, Optional

from flask import current_app, jsonify, request
from pydantic import ValidationError as PydanticValidationError
from werkzeug.exceptions import HTTPException


class SimpleCardsError(Exception):
    """Base exception class for SimpleCards."""

    code = 'UNKNOWN_ERROR'
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> dict:
        body = {'success': False, 'message': self.message, 'code': self.code}
        if self.details:
            body['details'] = self.details
        return body


class NotFoundError(SimpleCardsError):
    code = 'NOT_FOUND'
    status_code = 404

    def __init__(self, message: str = 'Resource not found', resource: Optional[str] = None):
        super().__init__(message, details={'resource': resource} if resource else None)


class ValidationError(SimpleCardsError):
    code = 'VALIDATION_ERROR'
    status_code = 400

    def __init__(self, message: str = 'Validation failed', errors: Any = None):
        super().__init__(message, details={'errors': errors} if errors else None)


class ConflictError(SimpleCardsError):
    code = 'CONFLICT'
    status_code = 409


class AuthenticationError(SimpleCardsError):
    code = 'UNAUTHENTICATED'
    status_code = 401


class ServiceUnavailableError(SimpleCardsError):
    """A background facility is shut down."""

    code = 'SERVICE_UNAVAILABLE'
    status_code = 503


class ImportQueueClosedError(ServiceUnavailableError):
    code = 'IMPORT_QUEUE_CLOSED'

    def __init__(self, message: str = 'Import queue is closed'):
        super().__init__(message)


def error_response(message: str, code: str = 'ERROR', status_code: int = 400, details: Dict = None) -> tuple:
    body = {'success': False, 'message': message, 'code': code}
    if details:
        body['details'] = details
    return jsonify(body), status_code


def success_response(data: Any = None, message: str = None) -> dict:
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    return body


def register_error_handlers(app):
    """Register error handlers with Flask app."""

    @app.errorhandler(SimpleCardsError)
    def handle_simplecards_error(error):
        current_app.logger.warning("%s %s: %s", request.path, error.code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(PydanticValidationError)
    def handle_schema_error(error):
        errors = [
            {'field': '.'.join(str(part) for part in err['loc']) or 'body', 'message': err['msg']}
            for err in error.errors()
        ]
        return error_response('Validation failed', 'VALIDATION_ERROR', 400, {'errors': errors})

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        # Werkzeug's HTML pages for everything outside /api/
        if not request.path.startswith('/api/'):
            return error
        code = {
            404: 'NOT_FOUND',
            405: 'METHOD_NOT_ALLOWED',
            413: 'PAYLOAD_TOO_LARGE',
        }.get(error.code, 'HTTP_ERROR')
        return error_response(error.description, code, error.code)

    @app.errorhandler(500)
    def handle_internal_error(error):
        current_app.logger.exception('Internal server error')
        if request.path.startswith('/api/'):
            return error_response('Internal server error', 'SERVER_ERROR', 500)
        return error
