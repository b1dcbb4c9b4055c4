import json
import os
import platform
import socket

from django.conf import settings
from django.utils import timezone
from drf_yasg.utils import swagger_auto_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.responses import api_response
from customers.models import Customer
from customers.serializers import CustomerSerializer
from inventory.models import BundleItem, Category, Product, ProductVariation
from inventory.serializers import BundleItemSerializer, ProductVariationSerializer
from staff.models import Staff
from staff.serializers import StaffSerializer
from tables.models import Table
from tables.serializers import TableSerializer
from .health import (
    STARTED_AT, database_health, format_uptime, primary_ip_address, process_memory, sync_counts,
)
from .serializers import MenuItemSerializer, MenuCategorySerializer


def _menu_items():
    return MenuItemSerializer(Product.objects.filter(status=True).order_by('name'), many=True).data


def _menu_categories():
    return MenuCategorySerializer(Category.objects.filter(is_active=True).order_by('category_name'), many=True).data


def _menu_bundles():
    return BundleItemSerializer(BundleItem.objects.filter(status=True).order_by('name'), many=True).data


def _menu_variations():
    variations = ProductVariation.objects.filter(status=True).select_related('parent_product').order_by('name')
    return ProductVariationSerializer(variations, many=True).data


# =============== SYNC ===============

@swagger_auto_schema(method='get', operation_description="Row counts the mobile apps use to decide whether to resync")
@api_view(['GET'])
def sync_info(request):
    return api_response(sync_counts(), 'Sync information retrieved successfully')


@swagger_auto_schema(method='get', operation_description="Health check for mobile apps, with headline counts")
@api_view(['GET'])
def sync_health(request):
    counts = sync_counts()
    return api_response({
        'status': 'healthy',
        'database_connected': True,
        'total_products': counts['product_count'],
        'total_staff': counts['staff_count'],
        'total_tables': counts['table_count'],
        'pending_orders': counts['waiting_transaction_count'],
        'last_sync': counts['last_sync'],
    }, 'API is healthy and database is accessible')


# =============== MENU ===============

@swagger_auto_schema(method='get', operation_description="Active products in the compact menu shape")
@api_view(['GET'])
def menu_items(request):
    data = _menu_items()
    return api_response(data, f"Retrieved {len(data)} menu items")


@swagger_auto_schema(method='get', operation_description="Active categories")
@api_view(['GET'])
def menu_categories(request):
    data = _menu_categories()
    return api_response(data, f"Retrieved {len(data)} categories")


@swagger_auto_schema(method='get', operation_description="Active bundles and recipes")
@api_view(['GET'])
def menu_bundles(request):
    data = _menu_bundles()
    return api_response(data, f"Retrieved {len(data)} bundle items")


@swagger_auto_schema(method='get', operation_description="Active product variations")
@api_view(['GET'])
def menu_variations(request):
    data = _menu_variations()
    return api_response(data, f"Retrieved {len(data)} product variations")


@swagger_auto_schema(method='get', operation_description="Everything a mobile device needs for a full resync")
@api_view(['GET'])
def menu_sync(request):
    data = {
        'menu_items': _menu_items(),
        'bundle_items': _menu_bundles(),
        'product_variations': _menu_variations(),
        'categories': _menu_categories(),
        'tables': TableSerializer(Table.objects.filter(is_active=True).order_by('table_number'), many=True).data,
        'staff': StaffSerializer(Staff.objects.filter(is_active=True), many=True).data,
        'customers': CustomerSerializer(Customer.objects.filter(is_active=True), many=True).data,
        'sync_info': sync_counts(),
    }
    return api_response(data, 'Menu sync data retrieved successfully')


# =============== HEALTH ===============

@swagger_auto_schema(method='get', operation_description="Liveness check")
@api_view(['GET'])
def health(request):
    return Response({
        'status': 'healthy',
        'timestamp': timezone.now(),
        'message': 'PottaAPI is running successfully',
    })


@swagger_auto_schema(method='get', operation_description="Uptime, process, database and memory details")
@api_view(['GET'])
def health_detailed(request):
    uptime = timezone.now() - STARTED_AT
    _, database = database_health()
    return Response({
        'status': 'healthy',
        'timestamp': timezone.now(),
        'uptime_seconds': int(uptime.total_seconds()),
        'uptime_formatted': format_uptime(uptime),
        'api': {
            'name': 'PottaAPI',
            'version': settings.POTTA_API['VERSION'],
            'environment': 'Development' if settings.DEBUG else 'Production',
            'process_id': os.getpid(),
            'machine_name': socket.gethostname(),
            'os_version': platform.platform(),
            'python_version': platform.python_version(),
            'working_directory': os.getcwd(),
        },
        'database': database,
        'system': {
            'memory_usage': process_memory(),
            'cpu_count': os.cpu_count(),
        },
    })


@swagger_auto_schema(method='get', operation_description="Database connectivity and row counts; 503 when unreachable")
@api_view(['GET'])
def health_database(request):
    healthy, database = database_health()
    return Response(database, status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE)


# =============== NETWORK ===============

@swagger_auto_schema(method='get', operation_description="Connection details for the QR code the mobile app scans")
@api_view(['GET'])
def network_qr_string(request):
    ip_address = primary_ip_address()
    port = int(request.get_port() or settings.POTTA_API['PORT'])
    base_url = f"http://{ip_address}:{port}"
    version = settings.POTTA_API['VERSION']

    qr_data = {
        'type': 'pottapos_api',
        'ip': ip_address,
        'port': port,
        'url': base_url,
        'api_version': version,
        'server_name': socket.gethostname(),
        'timestamp': timezone.now().isoformat(),
    }
    return api_response({
        'ip': ip_address,
        'port': port,
        'url': base_url,
        'display_url': base_url,
        'server_name': qr_data['server_name'],
        'api_version': version,
        'qr_data': qr_data,
        'qr_string': json.dumps(qr_data, separators=(',', ':')),
    }, 'QR code data generated')
