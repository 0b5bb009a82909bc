# exceptions.py
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import exceptions
from rest_framework.exceptions import Throttled, ValidationError as DRFValidationError
from rest_framework import status
from django.core.exceptions import PermissionDenied as DjangoPermissionDenied, ValidationError
from django.http import Http404
from django.db import IntegrityError
import logging
from django.conf import settings

from orders.notices import classify_order_error

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    400: 'Validation error',
    401: 'Authentication required',
    403: 'Permission denied',
    404: 'Resource not found',
    405: 'Method not allowed',
    500: 'Internal server error',
}


def _as_api_exception(exc):
    # Django's own 404/403 reach the handler unconverted
    if isinstance(exc, Http404):
        return exceptions.NotFound(*exc.args)
    if isinstance(exc, DjangoPermissionDenied):
        return exceptions.PermissionDenied(*exc.args)
    return exc


def _error_code(exc):
    if isinstance(exc, Throttled):
        return 'rate_limit'
    if isinstance(exc, DRFValidationError):
        return 'invalid'
    get_codes = getattr(exc, 'get_codes', None)
    codes = get_codes() if get_codes else None
    if isinstance(codes, str):
        return codes
    return getattr(exc, 'default_code', 'error')


def _error_message(exc, response):
    if isinstance(exc, Throttled):
        return f"Order rate limit exceeded. {exc.detail}"
    detail = getattr(exc, 'detail', None)
    # Domain errors carry a readable sentence; keep it so clients can show it.
    if getattr(exc, 'domain_error', False) and detail is not None:
        return str(detail)
    return STATUS_MESSAGES.get(response.status_code, 'An error occurred')


def _attach_notice(data, context):
    view = context.get('view')
    if getattr(view, 'order_submission', False) and data['code'] != 'invalid':
        data['notice'] = classify_order_error(data['code'], data['message']).text
    return data


def custom_exception_handler(exc, context):
    """
    Custom exception handler for the POS system
    """
    # Call REST framework's default exception handler first
    exc = _as_api_exception(exc)
    response = exception_handler(exc, context)

    if response is not None:
        code = _error_code(exc)
        message = _error_message(exc, response)
        if response.status_code >= 409 or getattr(exc, 'domain_error', False):
            logger.warning("Request rejected (%s): %s", code, message)
        response.data = _attach_notice({
            'error': True,
            'code': code,
            'message': message,
            'details': response.data,
            'status_code': response.status_code
        }, context)

    # Handle Django ValidationError
    elif isinstance(exc, ValidationError):
        logger.error(f"Validation Error: {exc}")
        response = Response(_attach_notice({
            'error': True,
            'code': 'invalid',
            'message': 'Validation error',
            'details': {'non_field_errors': exc.messages},
            'status_code': 400
        }, context), status=status.HTTP_400_BAD_REQUEST)

    # Handle Django IntegrityError
    elif isinstance(exc, IntegrityError):
        logger.error(f"Integrity Error: {exc}")
        response = Response(_attach_notice({
            'error': True,
            'code': 'integrity_error',
            'message': 'Database integrity error',
            'details': {'error': 'This operation violates database constraints'},
            'status_code': 400
        }, context), status=status.HTTP_400_BAD_REQUEST)

    # Handle unexpected errors
    else:
        logger.exception(f"Unexpected Error: {exc}")
        response = Response(_attach_notice({
            'error': True,
            'code': 'error',
            'message': 'An unexpected error occurred',
            'details': {'error': str(exc)} if settings.DEBUG else {},
            'status_code': 500
        }, context), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return response
