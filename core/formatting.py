from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

TWO_PLACES = Decimal('0.01')


def to_decimal(value):
    if value is None or value == '':
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value):
    # half-up, as printed on the desktop receipts; not banker's rounding
    return to_decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_currency(value):
    """XAF has no minor unit on receipts: 'XAF 2,118'"""
    whole = to_decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    return f"XAF {whole:,f}"


def format_rate(value):
    """19.2500 -> '19.25', 18.00 -> '18'"""
    normalized = to_decimal(value).normalize()
    return f"{normalized:f}"


def time_ago(moment, now=None):
    if moment is None:
        return ''
    now = now or timezone.now()
    seconds = (now - moment).total_seconds()

    if seconds < 60:
        return 'Just now'
    if seconds < 3600:
        return f"{int(seconds // 60)} min ago"
    if seconds < 86400:
        return f"{int(seconds // 3600)}h ago"
    return f"{int(seconds // 86400)}d ago"
