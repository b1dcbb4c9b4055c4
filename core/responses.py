from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response

from .exceptions import error_body


def api_response(data=None, message='', status_code=status.HTTP_200_OK):
    """Wrap a payload in the standard success envelope"""
    return Response({
        'success': True,
        'message': message,
        'data': data,
        'timestamp': timezone.now().isoformat(),
    }, status=status_code)


def error_response(error, details='', status_code=status.HTTP_400_BAD_REQUEST):
    return Response(error_body(error, details), status=status_code)
