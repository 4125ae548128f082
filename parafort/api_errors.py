"""
Route-level error translation.

Domain exceptions become JSON responses with their status code; anything
else is logged and answered with a 500 carrying the route's static message.
"""
import logging
from functools import wraps

from flask import jsonify

from parafort.domain.exceptions import DomainError
from parafort.error_codes import ErrorCode

logger = logging.getLogger("parafort")


def error_response(message: str, status: int, code: str = None, **extra):
    body = {'message': message}
    if code:
        body['code'] = code
    body.update(extra)
    return jsonify(body), status


def api_errors(failure_message: str):
    """
    Usage:
        @bp.route('/metrics')
        @login_required
        @api_errors("Failed to fetch compliance metrics")
        def metrics(): ...
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except DomainError as e:
                extra = {}
                if getattr(e, 'field', None):
                    extra['field'] = e.field
                if getattr(e, 'errors', None):
                    extra['errors'] = e.errors
                return error_response(e.message, e.status_code, e.code, **extra)
            except Exception as e:
                error = ErrorCode.get_error(e)
                logger.exception(f"❌ {failure_message}: {e}", extra={'props': {'error_code': error['code']}})
                return error_response(failure_message, 500, error['code'])
        return decorated_function
    return decorator
