# exceptions.py
from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import IntegrityError, OperationalError
from django.utils import timezone
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler
import logging

logger = logging.getLogger(__name__)


ERROR_TITLES = {
    400: 'Validation error',
    401: 'Authentication required',
    403: 'Permission denied',
    404: 'Resource not found',
    405: 'Method not allowed',
    408: 'Request timeout',
    415: 'Unsupported media type',
    500: 'Internal server error',
}


class PottaAPIException(exceptions.APIException):
    """
    API error carrying a short title for the envelope's ``error`` field and a
    human readable ``details`` message.
    """
    error_title = 'Request failed'

    def __init__(self, error=None, details=None, code=None):
        if error:
            self.error_title = error
        super().__init__(detail=details if details is not None else self.error_title, code=code)


class BadRequest(PottaAPIException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_title = 'Invalid request'
    default_code = 'bad_request'


class InvalidOperation(PottaAPIException):
    status_code = status.HTTP_400_BAD_REQUEST
    error_title = 'Invalid operation'
    default_code = 'invalid_operation'


class ResourceNotFound(PottaAPIException):
    status_code = status.HTTP_404_NOT_FOUND
    error_title = 'Resource not found'
    default_code = 'not_found'


class Unauthorized(PottaAPIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    error_title = 'Authentication failed'
    default_code = 'unauthorized'


def error_body(error, details):
    return {
        'error': error,
        'details': details,
        'timestamp': timezone.now().isoformat(),
    }


def _show_details():
    return settings.DEBUG or settings.POTTA_DATABASE.get('DETAILED_ERRORS', False)


def _message(exc):
    if exc.args:
        return str(exc.args[0])
    return str(exc)


def custom_exception_handler(exc, context):
    """
    Custom exception handler for the POS API.

    Every failure leaves the API as ``{error, details, timestamp}``.
    """
    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        details = response.data
        if isinstance(details, dict) and set(details) == {'detail'}:
            details = details['detail']

        error = getattr(exc, 'error_title', None) or ERROR_TITLES.get(response.status_code, 'Request failed')
        if response.status_code >= 500:
            logger.error(f"API Error: {exc}", exc_info=exc)
        else:
            logger.warning(f"{error}: {details}")

        response.data = error_body(error, details)
        return response

    # Handle Django ValidationError
    if isinstance(exc, ValidationError):
        logger.warning(f"Validation Error: {exc}")
        return Response(error_body('Validation error', exc.messages), status=status.HTTP_400_BAD_REQUEST)

    # Handle Django IntegrityError
    if isinstance(exc, IntegrityError):
        logger.error(f"Integrity Error: {exc}")
        return Response(
            error_body('Database integrity error', 'This operation violates database constraints'),
            status=status.HTTP_400_BAD_REQUEST,
        )

    if isinstance(exc, (ObjectDoesNotExist, KeyError)):
        logger.warning(f"Not Found: {exc}")
        return Response(error_body('Resource not found', _message(exc)), status=status.HTTP_404_NOT_FOUND)

    if isinstance(exc, PermissionError):
        logger.warning(f"Unauthorized: {exc}")
        return Response(error_body('Unauthorized', _message(exc)), status=status.HTTP_401_UNAUTHORIZED)

    if isinstance(exc, TimeoutError) or (isinstance(exc, OperationalError) and 'locked' in str(exc).lower()):
        logger.error(f"Timeout: {exc}")
        return Response(
            error_body('Request timeout', 'The database did not respond in time'),
            status=status.HTTP_408_REQUEST_TIMEOUT,
        )

    if isinstance(exc, ValueError):
        logger.warning(f"Invalid argument: {exc}")
        return Response(error_body('Invalid request', _message(exc)), status=status.HTTP_400_BAD_REQUEST)

    # Handle unexpected errors
    logger.error(f"Unexpected Error: {exc}", exc_info=exc)
    return Response(
        error_body(
            'Internal server error',
            str(exc) if _show_details() else 'An unexpected error occurred',
        ),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
