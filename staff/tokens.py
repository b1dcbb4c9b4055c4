from datetime import timedelta

from django.utils import timezone
from rest_framework_simplejwt.tokens import AccessToken

from .models import CODE_EXPIRY_HOURS


def issue_session_token(staff):
    """
    Signed session token for a staff member logged in with a daily code.

    The token expires together with the code, not 24h after login.
    """
    token = AccessToken()
    token['staff_id'] = staff.id
    token['name'] = staff.full_name
    generated = staff.code_generated_date
    if timezone.is_naive(generated):
        generated = timezone.make_aware(generated)
    token.set_exp(from_time=generated, lifetime=timedelta(hours=CODE_EXPIRY_HOURS))
    return str(token)
