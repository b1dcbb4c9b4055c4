from collections import Counter
from decimal import Decimal

from django.db.models import Max, Q, Sum
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics
from rest_framework.decorators import api_view

from core.mixins import EnvelopeMixin
from core.pagination import paginate
from core.responses import api_response
from .models import Customer
from .serializers import CustomerSerializer, CustomerSearchSerializer


class CustomerListView(EnvelopeMixin, generics.ListAPIView):
    """List active customers by name"""
    queryset = Customer.objects.filter(is_active=True).order_by('first_name', 'last_name')
    serializer_class = CustomerSerializer
    filterset_fields = ['type', 'city', 'country']
    list_message = 'Customers retrieved successfully'


class CustomerDetailView(EnvelopeMixin, generics.RetrieveAPIView):
    queryset = Customer.objects.filter(is_active=True)
    serializer_class = CustomerSerializer
    lookup_field = 'customer_id'
    not_found_error = 'Customer not found'
    retrieve_message = 'Customer retrieved successfully'


@swagger_auto_schema(
    method='get',
    operation_description="Search customers by name, email, phone or contact person",
    manual_parameters=[
        openapi.Parameter('search_term', openapi.IN_QUERY, type=openapi.TYPE_STRING),
        openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        openapi.Parameter('page_size', openapi.IN_QUERY, description="1 to 100", type=openapi.TYPE_INTEGER),
        openapi.Parameter('include_inactive', openapi.IN_QUERY, type=openapi.TYPE_BOOLEAN),
    ]
)
@api_view(['GET'])
def search_customers(request):
    params = CustomerSearchSerializer(data=request.GET)
    params.is_valid(raise_exception=True)
    term = params.validated_data['search_term'].strip()
    page = params.validated_data['page']
    page_size = params.validated_data['page_size']

    customers = Customer.objects.all()
    if not params.validated_data['include_inactive']:
        customers = customers.filter(is_active=True)
    if term:
        customers = customers.filter(
            Q(first_name__icontains=term) |
            Q(last_name__icontains=term) |
            Q(email__icontains=term) |
            Q(phone__icontains=term) |
            Q(contact_person__icontains=term)
        )
    customers = customers.order_by('first_name', 'last_name')

    total = customers.count()
    start = (page - 1) * page_size
    result = paginate(customers[start:start + page_size], page, page_size, total_count=total)
    result['items'] = CustomerSerializer(result['items'], many=True).data
    result['search_term'] = term
    return api_response(result, f"Found {total} customers")


def _most_common(values):
    counts = Counter(value for value in values if value)
    if not counts:
        return ''
    # ties go to the alphabetically first value
    return sorted(counts.items(), key=lambda entry: (-entry[1], entry[0]))[0][0]


@swagger_auto_schema(
    method='get',
    operation_description="Customer counts, balances and most common locations",
)
@api_view(['GET'])
def customer_statistics(request):
    customers = Customer.objects.all()
    active = customers.filter(is_active=True)
    opening_balance = customers.aggregate(total=Sum('opening_balance'))['total'] or Decimal('0')

    data = {
        'total_customers': customers.count(),
        'active_customers': active.count(),
        'inactive_customers': customers.filter(is_active=False).count(),
        'individual_customers': customers.filter(type__iexact='individual').count(),
        'business_customers': customers.filter(type__iexact='business').count(),
        'customers_with_email': customers.exclude(email__isnull=True).exclude(email='').count(),
        'customers_with_phone': customers.exclude(phone__isnull=True).exclude(phone='').count(),
        'total_opening_balance': opening_balance,
        'total_current_balance': opening_balance,
        'last_customer_created': customers.aggregate(last=Max('created_date'))['last'],
        'most_common_country': _most_common(active.values_list('country', flat=True)),
        'most_common_city': _most_common(active.values_list('city', flat=True)),
    }
    return api_response(data, 'Customer statistics retrieved successfully')
