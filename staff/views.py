import json
import logging

from django.utils import timezone
from drf_spectacular.utils import extend_schema, OpenApiExample
from rest_framework import generics
from rest_framework.decorators import api_view

from core.exceptions import ResourceNotFound, Unauthorized
from core.mixins import EnvelopeMixin
from core.responses import api_response
from .models import Staff
from .serializers import StaffSerializer, StaffCodeSerializer, DailyCodeSerializer
from .tokens import issue_session_token

logger = logging.getLogger(__name__)


def check_daily_code(daily_code, now=None):
    """
    Resolve a daily code to its staff member.

    Returns ``(staff, None)`` on success or ``(staff_or_none, reason)``.
    """
    staff = Staff.objects.filter(daily_code=daily_code).first()
    if staff is None:
        return None, "Invalid daily code"
    if not staff.is_active:
        return staff, "Staff account is inactive"
    if staff.is_code_expired(now):
        return staff, "Daily code has expired. Please request a new code."
    return staff, None


# =============== STAFF ===============

class StaffListView(EnvelopeMixin, generics.ListAPIView):
    """List active staff (daily codes are never exposed here)"""
    queryset = Staff.objects.filter(is_active=True)
    serializer_class = StaffSerializer
    list_message = 'Staff retrieved successfully'


class StaffCodeListView(EnvelopeMixin, generics.ListAPIView):
    """Daily codes with their expiry, for the desktop display"""
    queryset = Staff.objects.filter(is_active=True)
    serializer_class = StaffCodeSerializer
    list_message = 'Staff codes retrieved successfully'


@extend_schema(
    summary="Staff login with daily code",
    description="""
    Exchange the 4-digit daily code shown on the desktop app for a session token.
    The token expires together with the code (24h after it was generated).
    """,
    request=DailyCodeSerializer,
    responses={
        200: {'description': 'Staff record, code expiry and session token'},
        400: {'description': 'Malformed code'},
        401: {'description': 'Unknown, inactive or expired code'},
    },
    examples=[
        OpenApiExample('Daily code', value={"daily_code": "4821"}),
    ]
)
@api_view(['POST'])
def staff_login(request):
    serializer = DailyCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    staff, reason = check_daily_code(serializer.validated_data['daily_code'])
    if reason:
        logger.warning(f"Staff login rejected: {reason}")
        raise Unauthorized('Authentication failed', reason)

    logger.info(f"Staff {staff.id} logged in")
    return api_response({
        'staff': StaffSerializer(staff).data,
        'code_expires_at': staff.code_expires_at,
        'session_token': issue_session_token(staff),
    }, f"Welcome, {staff.full_name}!")


@extend_schema(
    summary="Validate a daily code",
    description="Checks a code without issuing a session token.",
    request=DailyCodeSerializer,
)
@api_view(['POST'])
def validate_code(request):
    serializer = DailyCodeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    staff, reason = check_daily_code(serializer.validated_data['daily_code'])
    data = {
        'valid': reason is None,
        'staff_id': staff.id if staff else None,
        'is_expired': bool(staff) and staff.is_code_expired(),
        'expires_at': staff.code_expires_at if staff else None,
        'message': reason or "Code is valid",
    }
    return api_response(data, data['message'])


@extend_schema(
    summary="QR login payload for a staff member",
    description="JSON payload the desktop app renders as a QR code for the mobile login screen.",
)
@api_view(['GET'])
def staff_qr_data(request, staff_id):
    staff = Staff.objects.filter(id=staff_id, is_active=True).first()
    if staff is None:
        raise ResourceNotFound('Staff not found', f"No active staff member with ID: {staff_id}")

    generated_at = staff.code_generated_date or timezone.now()
    qr_data = {
        'type': 'staff_login',
        'api_url': f"{request.scheme}://{request.get_host()}",
        'staff_id': staff.id,
        'daily_code': staff.daily_code,
        'staff_name': staff.full_name,
        'generated_at': generated_at.isoformat(),
        'expires_at': staff.code_expires_at.isoformat() if staff.code_expires_at else None,
    }
    return api_response({
        'qr_data': qr_data,
        'qr_string': json.dumps(qr_data, separators=(',', ':')),
    }, 'QR code data generated')
