import logging

from drf_yasg import openapi
from drf_yasg.utils import swagger_auto_schema
from rest_framework.decorators import api_view

from core.responses import api_response
from . import services
from .models import PrintBillRequest, PayEntireBillRequest
from .serializers import (
    AddNotesSerializer, TransferServerSerializer, ShiftHandoverSerializer, MoveOrderSerializer,
    PrintBillSerializer, TablePrintBillSerializer, CompleteRequestSerializer, RefireSerializer,
    CombineOrdersSerializer, RemoveTaxesSerializer, PrintBillRequestSerializer,
    PayEntireBillRequestSerializer,
)

logger = logging.getLogger(__name__)


def _validated(serializer_class, request):
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def _respond(result):
    message = result.pop('message')
    return api_response(result, message)


# =============== NOTES, SERVERS & TABLES ===============

@swagger_auto_schema(
    method='post',
    operation_description="Append a note to an open order",
    request_body=AddNotesSerializer,
    responses={200: 'Note added', 404: 'Transaction not found'}
)
@api_view(['POST'])
def add_notes(request):
    data = _validated(AddNotesSerializer, request)
    return _respond(services.add_notes(data['transaction_id'], data['note_text'], data.get('added_by_staff_id')))


@swagger_auto_schema(
    method='post',
    operation_description="Hand one order to another server",
    request_body=TransferServerSerializer,
    responses={200: 'Order transferred', 400: 'Staff member inactive', 404: 'Transaction or staff not found'}
)
@api_view(['POST'])
def transfer_server(request):
    data = _validated(TransferServerSerializer, request)
    return _respond(services.transfer_server(data['transaction_id'], data['new_staff_id'], data.get('reason')))


@swagger_auto_schema(
    method='post',
    operation_description="Move every open order of one server to another at the end of a shift",
    request_body=ShiftHandoverSerializer,
)
@api_view(['POST'])
def shift_handover(request):
    data = _validated(ShiftHandoverSerializer, request)
    return _respond(services.shift_handover(data['current_staff_id'], data['new_staff_id'], data.get('reason')))


@swagger_auto_schema(
    method='post',
    operation_description="Move an order to an available table",
    request_body=MoveOrderSerializer,
    responses={200: 'Order moved', 400: 'Target table occupied', 404: 'Transaction or table not found'}
)
@api_view(['POST'])
def move_order(request):
    data = _validated(MoveOrderSerializer, request)
    return _respond(services.move_order(data['transaction_id'], data['target_table_id'], data.get('reason')))


# =============== PRINT BILL ===============

@swagger_auto_schema(
    method='post',
    operation_description="Ask the desktop to print the bill for an order",
    request_body=PrintBillSerializer,
    responses={200: PrintBillRequestSerializer, 400: 'Payment already pending'}
)
@api_view(['POST'])
def print_bill(request):
    data = _validated(PrintBillSerializer, request)
    bill_request, created = services.create_print_bill_request(
        data['transaction_id'], data['staff_id'], data.get('notes'),
    )
    if created:
        message = "Print bill request created successfully"
    else:
        message = "Existing pending print bill request returned (no duplicate created)"
    return api_response(PrintBillRequestSerializer(bill_request).data, message)


@swagger_auto_schema(
    method='post',
    operation_description="Ask the desktop to print the bills of every open order on a table",
    request_body=TablePrintBillSerializer,
)
@api_view(['POST'])
def print_bill_for_table(request):
    data = _validated(TablePrintBillSerializer, request)
    return _respond(services.create_print_bill_requests_for_table(
        data['table_id'], data['staff_id'], data.get('notes'),
    ))


@swagger_auto_schema(
    method='get',
    operation_description="Pending print bill requests, oldest first",
    responses={200: PrintBillRequestSerializer(many=True)}
)
@api_view(['GET'])
def pending_print_bills(request):
    pending = PrintBillRequest.objects.filter(status="Pending").order_by('requested_at')
    data = PrintBillRequestSerializer(pending, many=True).data
    return api_response(data, f"Retrieved {len(data)} pending print bill requests")


@swagger_auto_schema(
    method='put',
    operation_description="Mark a pending print bill request as completed",
    request_body=CompleteRequestSerializer,
)
@api_view(['PUT'])
def complete_print_bill(request, request_id):
    data = _validated(CompleteRequestSerializer, request)
    services.complete_request(PrintBillRequest, request_id, data.get('completed_by'))
    logger.info(f"Print bill request {request_id} completed")
    return api_response(True, "Print bill request completed successfully")


@swagger_auto_schema(
    method='delete',
    operation_description="Cancel a pending print bill request",
)
@api_view(['DELETE'])
def cancel_print_bill(request, request_id):
    services.cancel_request(PrintBillRequest, request_id)
    logger.info(f"Print bill request {request_id} cancelled")
    return api_response(True, "Print bill request cancelled successfully")


# =============== PAY ENTIRE BILL ===============

@swagger_auto_schema(
    method='post',
    operation_description="Ask the desktop to take payment for an entire order",
    request_body=PrintBillSerializer,
    responses={200: PayEntireBillRequestSerializer}
)
@api_view(['POST'])
def pay_entire_bill(request):
    data = _validated(PrintBillSerializer, request)
    bill_request, created = services.create_pay_entire_bill_request(
        data['transaction_id'], data['staff_id'], data.get('notes'),
    )
    if created:
        message = "Pay entire bill request created successfully"
    else:
        message = "Existing pending pay entire bill request returned (no duplicate created)"
    return api_response(PayEntireBillRequestSerializer(bill_request).data, message)


@swagger_auto_schema(
    method='get',
    operation_description="Pending pay entire bill requests, oldest first",
    responses={200: PayEntireBillRequestSerializer(many=True)}
)
@api_view(['GET'])
def pending_pay_entire_bills(request):
    pending = PayEntireBillRequest.objects.filter(status="Pending").order_by('requested_at')
    data = PayEntireBillRequestSerializer(pending, many=True).data
    return api_response(data, f"Retrieved {len(data)} pending pay entire bill requests")


@swagger_auto_schema(
    method='put',
    operation_description="Mark a pending pay entire bill request as completed",
    request_body=CompleteRequestSerializer,
)
@api_view(['PUT'])
def complete_pay_entire_bill(request, request_id):
    data = _validated(CompleteRequestSerializer, request)
    services.complete_request(PayEntireBillRequest, request_id, data.get('completed_by'))
    logger.info(f"Pay entire bill request {request_id} completed")
    return api_response(True, "Pay entire bill request completed successfully")


@swagger_auto_schema(
    method='delete',
    operation_description="Cancel a pending pay entire bill request",
)
@api_view(['DELETE'])
def cancel_pay_entire_bill(request, request_id):
    services.cancel_request(PayEntireBillRequest, request_id)
    logger.info(f"Pay entire bill request {request_id} cancelled")
    return api_response(True, "Pay entire bill request cancelled successfully")


# =============== KITCHEN, COMBINE & TAXES ===============

@swagger_auto_schema(
    method='post',
    operation_description="Flag an order (or some of its lines) to be reprinted in the kitchen",
    request_body=RefireSerializer,
)
@api_view(['POST'])
def refire_to_kitchen(request):
    data = _validated(RefireSerializer, request)
    return _respond(services.refire_to_kitchen(
        data['transaction_id'], data['staff_id'], data['item_indices'], data['reason'],
    ))


@swagger_auto_schema(
    method='post',
    operation_description="Combine several open orders into a new one, merging identical lines",
    request_body=CombineOrdersSerializer,
    responses={
        200: openapi.Response('Id of the combined order and merge counts'),
        400: 'Fewer than 2 unique orders or inactive staff',
        404: 'Transaction, table or staff not found',
    }
)
@api_view(['POST'])
def combine_orders(request):
    data = _validated(CombineOrdersSerializer, request)
    return _respond(services.combine_orders(
        data['transaction_ids'], data['target_table_id'], data['target_staff_id'], data.get('notes'),
    ))


@swagger_auto_schema(
    method='post',
    operation_description="Zero the taxes of an order and record an audit entry",
    request_body=RemoveTaxesSerializer,
)
@api_view(['POST'])
def remove_taxes_and_fees(request):
    data = _validated(RemoveTaxesSerializer, request)
    return _respond(services.remove_taxes_and_fees(data['transaction_id'], data['staff_id'], data['reason']))
