"""API error taxonomy and the handlers that turn errors into JSON responses."""

import logging

import pydantic
from flask import jsonify, current_app
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from app.extensions import db

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    error_code = 'INTERNAL_ERROR'

    def __init__(self, message, details=None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self):
        data = {'error': self.message, 'error_code': self.error_code}
        if self.details:
            data['details'] = self.details
        return data


class ValidationError(APIError):
    status_code = 400
    error_code = 'VALIDATION_ERROR'


class AuthError(APIError):
    status_code = 401
    error_code = 'AUTH_ERROR'


class ForbiddenError(APIError):
    status_code = 403
    error_code = 'FORBIDDEN'


class NotFoundError(APIError):
    status_code = 404
    error_code = 'NOT_FOUND'


class ConflictError(APIError):
    status_code = 409
    error_code = 'CONFLICT'


class UpstreamError(APIError):
    status_code = 502
    error_code = 'UPSTREAM_ERROR'


class InternalError(APIError):
    status_code = 500
    error_code = 'INTERNAL_ERROR'


def from_pydantic(exc: pydantic.ValidationError) -> ValidationError:
    """Collapse a pydantic error into a single ValidationError."""
    details = []
    for err in exc.errors():
        field = '.'.join(str(part) for part in err.get('loc', ()))
        details.append({'field': field, 'message': err.get('msg', 'Invalid value')})
    if details:
        first = details[0]
        message = f"{first['field']}: {first['message']}" if first['field'] else first['message']
    else:
        message = 'Invalid request'
    return ValidationError(message, details=details)


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(e):
        if e.status_code >= 500:
            logger.error('%s: %s', e.error_code, e.message)
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(pydantic.ValidationError)
    def handle_schema_error(e):
        err = from_pydantic(e)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(e):
        # Unique index lost a race, or a restricted delete hit a reference
        db.session.rollback()
        logger.info('Integrity error: %s', e.orig)
        err = ConflictError('Request conflicts with existing data')
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({
            'error': e.description,
            'error_code': e.name.upper().replace(' ', '_'),
        }), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        db.session.rollback()
        logger.exception('Unhandled error')
        body = {'error': 'Internal server error', 'error_code': InternalError.error_code}
        if current_app.config.get('EXPOSE_ERROR_DETAILS'):
            body['detail'] = str(e)
        return jsonify(body), 500
