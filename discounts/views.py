import logging

from django.db.models import F
from django.utils import timezone
from drf_yasg.utils import swagger_auto_schema
from rest_framework.decorators import api_view

from core.exceptions import InvalidOperation, ResourceNotFound
from core.responses import api_response
from .models import Discount
from .serializers import DiscountSerializer

logger = logging.getLogger(__name__)


@swagger_auto_schema(
    method='get',
    operation_description="Active discounts that are currently valid (dates and usage limit)",
)
@api_view(['GET'])
def active_discounts(request):
    now = timezone.now()
    discounts = [discount for discount in Discount.objects.filter(is_active=True) if discount.is_currently_valid(now)]
    return api_response(DiscountSerializer(discounts, many=True).data, f"Retrieved {len(discounts)} active discounts")


@swagger_auto_schema(
    method='get',
    operation_description="Validate and retrieve a discount by coupon code (case-insensitive)",
    responses={200: DiscountSerializer, 400: 'Discount is not currently valid', 404: 'Discount not found'}
)
@api_view(['GET'])
def discount_by_coupon(request, coupon_code):
    discount = Discount.objects.filter(coupon_code__iexact=coupon_code, is_active=True).first()
    if discount is None:
        raise ResourceNotFound('Discount not found', f"No discount found for coupon code: {coupon_code}")
    if not discount.is_currently_valid():
        raise InvalidOperation('Discount is not currently valid', f"Coupon code {coupon_code} cannot be applied now")
    return api_response(DiscountSerializer(discount).data, 'Discount retrieved successfully')


@swagger_auto_schema(
    method='post',
    operation_description="Increment usage count when a discount is applied to a transaction",
)
@api_view(['POST'])
def increment_usage(request, discount_id):
    updated = Discount.objects.filter(discount_id=discount_id).update(
        usage_count=F('usage_count') + 1,
        modified_date=timezone.now(),
    )
    if not updated:
        raise ResourceNotFound('Discount not found', f"No discount found with ID: {discount_id}")

    logger.info(f"Incremented usage count for discount: {discount_id}")
    return api_response(True, 'Usage count incremented')
