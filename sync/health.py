"""
Counts, uptime and network details reported to the mobile apps and the
desktop's connection screen.
"""
import logging
import socket
import sys

from django.db import DatabaseError
from django.utils import timezone

from customers.models import Customer
from inventory.models import BundleItem, Category, Product, ProductVariation
from orders.models import WaitingTransaction
from staff.models import Staff
from tables.models import Table

logger = logging.getLogger(__name__)

STARTED_AT = timezone.now()


def sync_counts():
    return {
        'product_count': Product.objects.filter(status=True).count(),
        'bundle_count': BundleItem.objects.filter(status=True).count(),
        'variation_count': ProductVariation.objects.filter(status=True).count(),
        'category_count': Category.objects.filter(is_active=True).count(),
        'table_count': Table.objects.filter(is_active=True).count(),
        'staff_count': Staff.objects.filter(is_active=True).count(),
        'customer_count': Customer.objects.filter(is_active=True).count(),
        'waiting_transaction_count': WaitingTransaction.objects.count(),
        'last_sync': timezone.now(),
    }


def database_health():
    """Returns ``(healthy, payload)``; a failing query is reported, not raised"""
    try:
        counts = sync_counts()
    except DatabaseError as exc:
        logger.error(f"Database health check failed: {exc}")
        return False, {
            'connected': False,
            'status': 'unhealthy',
            'message': 'Database connection failed',
            'error': str(exc),
        }

    return True, {
        'connected': True,
        'status': 'healthy',
        'message': 'Database connection successful',
        'statistics': {
            'products': counts['product_count'],
            'bundles': counts['bundle_count'],
            'variations': counts['variation_count'],
            'categories': counts['category_count'],
            'tables': counts['table_count'],
            'staff': counts['staff_count'],
            'customers': counts['customer_count'],
            'waiting_transactions': counts['waiting_transaction_count'],
            'total_items': counts['product_count'] + counts['bundle_count'] + counts['variation_count'],
        },
        'last_sync': counts['last_sync'],
    }


def format_uptime(delta):
    seconds = int(delta.total_seconds())
    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"


def format_bytes(size):
    units = ['B', 'KB', 'MB', 'GB', 'TB']
    value = float(size)
    order = 0
    while value >= 1024 and order < len(units) - 1:
        value /= 1024
        order += 1
    return f"{value:.2f}".rstrip('0').rstrip('.') + f" {units[order]}"


def process_memory():
    if sys.platform == 'win32':
        # getrusage has no Windows counterpart
        return {'available': False}

    import resource

    usage = resource.getrusage(resource.RUSAGE_SELF)
    # ru_maxrss is in kilobytes on Linux and bytes on macOS
    peak = usage.ru_maxrss if sys.platform == 'darwin' else usage.ru_maxrss * 1024
    return {
        'available': True,
        'peak_resident': format_bytes(peak),
        'peak_resident_bytes': peak,
        'user_cpu_seconds': round(usage.ru_utime, 2),
        'system_cpu_seconds': round(usage.ru_stime, 2),
    }


def primary_ip_address():
    """LAN address the OS would route external traffic through"""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as udp:
            # UDP connect sends nothing; it only selects the outgoing interface
            udp.connect(('8.8.8.8', 65530))
            return udp.getsockname()[0]
    except OSError as exc:
        logger.warning(f"Could not determine the primary IP address: {exc}")

    try:
        for address in socket.gethostbyname_ex(socket.gethostname())[2]:
            if not address.startswith('127.'):
                return address
    except OSError as exc:
        logger.warning(f"Host name lookup failed: {exc}")
    return '127.0.0.1'
