import logging

from django.db.models import Count
from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework import generics
from rest_framework.decorators import api_view

from core.exceptions import ResourceNotFound
from core.mixins import EnvelopeMixin
from core.responses import api_response
from .models import Table, Seat
from .serializers import (
    TableSerializer, SeatSerializer, TableStatusUpdateSerializer, SeatStatusUpdateSerializer,
)

logger = logging.getLogger(__name__)


def get_table_or_404(table_id):
    table = Table.objects.filter(table_id=table_id).first()
    if table is None:
        raise ResourceNotFound('Table not found', f"No table found with ID: {table_id}")
    return table


class TableListView(EnvelopeMixin, generics.ListAPIView):
    """List active tables ordered by number"""
    queryset = Table.objects.filter(is_active=True).order_by('table_number')
    serializer_class = TableSerializer
    filterset_fields = ['status']
    list_message = 'Tables retrieved successfully'

    @swagger_auto_schema(
        manual_parameters=[
            openapi.Parameter('status', openapi.IN_QUERY, description="Filter by table status", type=openapi.TYPE_STRING),
        ]
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class AvailableTableListView(EnvelopeMixin, generics.ListAPIView):
    queryset = Table.objects.filter(is_active=True, status="Available").order_by('table_number')
    serializer_class = TableSerializer
    list_message = 'Available tables retrieved successfully'


class TableDetailView(EnvelopeMixin, generics.RetrieveAPIView):
    queryset = Table.objects.all()
    serializer_class = TableSerializer
    lookup_field = 'table_id'
    not_found_error = 'Table not found'
    retrieve_message = 'Table retrieved successfully'


@swagger_auto_schema(
    method='get',
    operation_description="Count of active tables per status",
)
@api_view(['GET'])
def table_summary(request):
    counts = dict(
        Table.objects.filter(is_active=True)
        .values('status')
        .annotate(total=Count('table_id'))
        .values_list('status', 'total')
    )
    data = {
        'total_tables': sum(counts.values()),
        'available_tables': counts.get('Available', 0),
        'occupied_tables': counts.get('Occupied', 0),
        'reserved_tables': counts.get('Reserved', 0),
        'unpaid_tables': counts.get('Unpaid', 0),
        'not_available_tables': counts.get('Not Available', 0),
    }
    return api_response(data, 'Table summary retrieved successfully')


@swagger_auto_schema(
    method='get',
    operation_description="Active seats of a table ordered by seat number",
)
@api_view(['GET'])
def table_seats(request, table_id):
    table = get_table_or_404(table_id)
    seats = Seat.objects.filter(table_id=table.table_id, is_active=True).order_by('seat_number')
    return api_response(SeatSerializer(seats, many=True).data, f"Retrieved {len(seats)} seats for {table.display_name}")


@swagger_auto_schema(
    methods=['put', 'patch'],
    operation_description="Update table status and occupancy",
    request_body=TableStatusUpdateSerializer,
    responses={200: TableSerializer, 404: 'Table not found'}
)
@api_view(['PUT', 'PATCH'])
def update_table_status(request, table_id):
    serializer = TableStatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    table = get_table_or_404(table_id)
    data = serializer.validated_data
    table.set_status(
        data['status'],
        customer_id=data.get('customer_id') or None,
        transaction_id=data.get('transaction_id') or None,
    )
    logger.info(f"Table {table.table_id} status set to {table.status}")
    return api_response(TableSerializer(table).data, f"Table status updated to {table.status}")


@swagger_auto_schema(
    methods=['put', 'patch'],
    operation_description="Update seat status",
    request_body=SeatStatusUpdateSerializer,
    responses={200: SeatSerializer, 404: 'Seat not found'}
)
@api_view(['PUT', 'PATCH'])
def update_seat_status(request, seat_id):
    serializer = SeatStatusUpdateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    seat = Seat.objects.filter(seat_id=seat_id).first()
    if seat is None:
        raise ResourceNotFound('Seat not found', f"No seat found with ID: {seat_id}")
    seat.set_status(serializer.validated_data['status'], customer_id=serializer.validated_data.get('customer_id') or None)
    logger.info(f"Seat {seat.seat_id} status set to {seat.status}")
    return api_response(SeatSerializer(seat).data, f"Seat status updated to {seat.status}")
