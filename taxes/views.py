import logging

from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics
from rest_framework.decorators import api_view

from core.exceptions import BadRequest
from core.mixins import EnvelopeMixin
from core.responses import api_response
from orders import cart
from .calculator import calculate_order_totals, tax_breakdown
from .models import Tax
from .serializers import TaxSerializer, TaxCalculationSerializer

logger = logging.getLogger(__name__)


def _validated_items(request):
    data = request.data
    if isinstance(data, list):
        items = data
    elif isinstance(data, dict):
        items = data.get('items')
    else:
        items = None
    if not items:
        raise BadRequest('Items list cannot be empty', "Provide at least one cart item")

    serializer = TaxCalculationSerializer(data=data)
    serializer.is_valid(raise_exception=True)
    items = [cart.normalize_item(item) for item in serializer.validated_data['items']]
    return items, serializer.validated_data['discount']


def _taxes_for(items):
    tax_ids = {item['tax_id'] for item in items if item.get('tax_id')}
    return Tax.objects.in_bulk(list(tax_ids))


class TaxListView(EnvelopeMixin, generics.ListAPIView):
    """List active taxes"""
    queryset = Tax.objects.filter(is_active=True)
    serializer_class = TaxSerializer
    list_message = 'Taxes retrieved successfully'


class TaxDetailView(EnvelopeMixin, generics.RetrieveAPIView):
    queryset = Tax.objects.all()
    serializer_class = TaxSerializer
    lookup_field = 'tax_id'
    not_found_error = 'Tax not found'
    retrieve_message = 'Tax retrieved successfully'


@swagger_auto_schema(
    method='post',
    operation_description="""
    Calculate subtotal, tax and grand total for cart items.

    Example: price 5000, quantity 2, modifier +500, tax 19.25%
    -> subtotal 11,000, tax 2,117.50, total 13,117.50
    """,
    request_body=TaxCalculationSerializer,
)
@api_view(['POST'])
def calculate_tax(request):
    items, discount = _validated_items(request)
    result = calculate_order_totals(items, _taxes_for(items), discount)
    logger.info(f"Tax calculated - SubTotal: {result['sub_total']}, Tax: {result['total_tax']}, Total: {result['grand_total']}")
    return api_response(result, 'Tax calculated successfully')


@swagger_auto_schema(
    method='post',
    operation_description="Tax breakdown per tax for receipts and checkout screens",
    request_body=TaxCalculationSerializer,
)
@api_view(['POST'])
def tax_breakdown_view(request):
    items, _ = _validated_items(request)
    breakdown = tax_breakdown(items, _taxes_for(items))
    return api_response(breakdown, f"Tax breakdown calculated for {len(items)} items")
