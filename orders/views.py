import logging
from collections import defaultdict
from decimal import Decimal

from django.utils import timezone
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics, status
from rest_framework.decorators import api_view

from core.exceptions import ResourceNotFound
from core.formatting import format_currency
from core.mixins import EnvelopeMixin
from core.responses import api_response
from staff.models import Staff
from tables.models import Table
from .models import WaitingTransaction, readable_orders
from .serializers import OrderCreateSerializer, WaitingTransactionSerializer, TransactionStatusSerializer

logger = logging.getLogger(__name__)


def get_waiting_transaction(transaction_id):
    order = WaitingTransaction.objects.filter(transaction_id=transaction_id).first()
    if order is None:
        raise ResourceNotFound('Transaction not found', f"No waiting transaction found with ID: {transaction_id}")
    return order


# =============== ORDER CREATION ===============

@swagger_auto_schema(
    method='post',
    operation_description="Create a waiting transaction (open order) from a mobile cart",
    request_body=OrderCreateSerializer,
    responses={
        201: openapi.Response('Transaction id of the new order'),
        400: 'Validation error',
    }
)
@api_view(['POST'])
def create_order(request):
    serializer = OrderCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    order = serializer.save()

    logger.info(f"Order created: {order.transaction_id} ({order.total_items} items, {order.formatted_total})")
    return api_response(
        order.transaction_id,
        f"Order created successfully with ID: {order.transaction_id}",
        status_code=status.HTTP_201_CREATED,
    )


# =============== WAITING TRANSACTIONS ===============

class WaitingTransactionListView(EnvelopeMixin, generics.ListAPIView):
    """List waiting transactions, newest first"""
    queryset = WaitingTransaction.objects.order_by('-created_date')
    serializer_class = WaitingTransactionSerializer
    filterset_fields = ['staff_id', 'status', 'table_id', 'customer_id']
    list_message = 'Waiting transactions retrieved successfully'

    def filter_queryset(self, queryset):
        return readable_orders(super().filter_queryset(queryset))

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('staff_id', openapi.IN_QUERY, description="Only this staff member's orders", type=openapi.TYPE_INTEGER),
            openapi.Parameter('status', openapi.IN_QUERY, description="Filter by status", type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class PendingTransactionListView(WaitingTransactionListView):
    queryset = WaitingTransaction.objects.pending().order_by('-created_date')
    list_message = 'Pending orders retrieved successfully'


class WaitingTransactionDetailView(EnvelopeMixin, generics.RetrieveDestroyAPIView):
    """
    get: Get one waiting transaction with its cart
    delete: Delete a waiting transaction
    """
    queryset = WaitingTransaction.objects.all()
    serializer_class = WaitingTransactionSerializer
    lookup_field = 'transaction_id'
    not_found_error = 'Transaction not found'
    retrieve_message = 'Transaction retrieved successfully'

    def destroy(self, request, *args, **kwargs):
        order = self.get_object()
        order.delete()
        logger.info(f"Waiting transaction {order.transaction_id} deleted")
        return api_response(True, 'Transaction deleted successfully')


@swagger_auto_schema(
    method='put',
    operation_description="Update the status of a waiting transaction",
    request_body=TransactionStatusSerializer,
    responses={200: WaitingTransactionSerializer, 404: 'Transaction not found'}
)
@api_view(['PUT'])
def update_transaction_status(request, transaction_id):
    serializer = TransactionStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    order = get_waiting_transaction(transaction_id)
    order.status = serializer.validated_data['status']
    order.touch()
    order.save(update_fields=['status', 'modified_date'])

    logger.info(f"Transaction {order.transaction_id} status set to {order.status}")
    return api_response(WaitingTransactionSerializer(order).data, f"Transaction status updated to {order.status}")


class TableTransactionListView(WaitingTransactionListView):
    list_message = 'Table orders retrieved successfully'

    def get_queryset(self):
        return WaitingTransaction.objects.filter(table_id=self.kwargs['table_id']).order_by('-created_date')


class CustomerTransactionListView(WaitingTransactionListView):
    list_message = 'Customer orders retrieved successfully'

    def get_queryset(self):
        return WaitingTransaction.objects.filter(customer_id=self.kwargs['customer_id']).order_by('-created_date')


# =============== SUMMARIES ===============

@swagger_auto_schema(
    method='get',
    operation_description="Counts and values of waiting transactions",
)
@api_view(['GET'])
def order_statistics(request):
    orders = readable_orders(WaitingTransaction.objects.all())
    today = timezone.now().date()
    todays = [order for order in orders if order.created_date and order.created_date.date() == today]
    pending = [order for order in orders if order.is_pending]
    dates = [order.created_date for order in orders if order.created_date]

    total_value = sum((order.total_amount for order in orders), Decimal('0'))
    value_today = sum((order.total_amount for order in todays), Decimal('0'))
    data = {
        'total_orders': len(orders),
        'pending_orders': len(pending),
        'completed_orders': sum(1 for order in orders if order.status == "Completed"),
        'oldest_pending_order': min((o.created_date for o in pending if o.created_date), default=None),
        'newest_order': max(dates, default=None),
        'orders_today': len(todays),
        'total_order_value': total_value,
        'formatted_total_value': format_currency(total_value),
        'order_value_today': value_today,
        'formatted_value_today': format_currency(value_today),
    }
    return api_response(data, 'Order statistics retrieved successfully')


@swagger_auto_schema(
    method='get',
    operation_description="Order counts and values per staff member",
)
@api_view(['GET'])
def staff_order_summary(request):
    grouped = defaultdict(list)
    for order in readable_orders(WaitingTransaction.objects.filter(staff_id__isnull=False)):
        grouped[order.staff_id].append(order)
    staff_names = {staff.id: staff.full_name for staff in Staff.objects.filter(id__in=grouped)}

    summary = []
    for staff_id, orders in grouped.items():
        value = sum((order.total_amount for order in orders), Decimal('0'))
        summary.append({
            'staff_id': staff_id,
            'staff_name': staff_names.get(staff_id, f"Staff {staff_id}"),
            'total_orders': len(orders),
            'pending_orders': sum(1 for order in orders if order.is_pending),
            'completed_orders': sum(1 for order in orders if order.status == "Completed"),
            'total_order_value': value,
            'formatted_total_value': format_currency(value),
            'last_order_date': max((o.created_date for o in orders if o.created_date), default=None),
        })
    summary.sort(key=lambda entry: entry['staff_name'])
    return api_response(summary, f"Retrieved summary for {len(summary)} staff members")


@swagger_auto_schema(
    method='get',
    operation_description="Pending order counts and values per table",
)
@api_view(['GET'])
def table_order_summary(request):
    grouped = defaultdict(list)
    pending = WaitingTransaction.objects.pending().filter(table_id__isnull=False).exclude(table_id='')
    for order in readable_orders(pending):
        grouped[order.table_id].append(order)
    tables = Table.objects.in_bulk(list(grouped))

    summary = []
    for table_id, orders in grouped.items():
        table = tables.get(table_id)
        value = sum((order.total_amount for order in orders), Decimal('0'))
        times = [order.created_date for order in orders if order.created_date]
        summary.append({
            'table_id': table_id,
            'table_name': table.display_name if table else orders[0].table_display,
            'table_number': table.table_number if table else orders[0].table_number,
            'active_orders': len(orders),
            'total_order_value': value,
            'formatted_total_value': format_currency(value),
            'first_order_time': min(times, default=None),
            'last_order_time': max(times, default=None),
            'status': table.status if table else "Available",
        })
    summary.sort(key=lambda entry: entry['table_number'] or 0)
    return api_response(summary, f"Retrieved summary for {len(summary)} tables")
