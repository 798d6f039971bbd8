"""Single error boundary mapping exceptions to JSON error responses."""

import logging
import traceback

from flask import current_app, jsonify, request
from werkzeug.exceptions import HTTPException, NotFound

from fundpulse.exceptions import FundPulseError

logger = logging.getLogger(__name__)


def _error_response(message, status_code, exc=None):
    error = {'message': message}
    if exc is not None and current_app.config.get('SHOW_ERROR_DETAIL'):
        error['stack'] = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return jsonify({'error': error}), status_code


def handle_fundpulse_error(e: FundPulseError):
    if e.status_code >= 500:
        logger.error(f"{request.method} {request.path} failed: {e.message}")
    return _error_response(e.message, e.status_code, e)


def handle_not_found(e: NotFound):
    return _error_response(f"Route {request.method} {request.path} not found", 404)


def handle_http_error(e: HTTPException):
    return _error_response(e.description or e.name, e.code or 500)


def handle_unexpected_error(e: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.path}")
    return _error_response(str(e) or 'Internal Server Error', 500, e)


def register_error_handlers(app):
    app.register_error_handler(FundPulseError, handle_fundpulse_error)
    app.register_error_handler(NotFound, handle_not_found)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)
