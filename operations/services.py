"""
Floor operations requested from the mobile app: notes, server transfers,
table moves, bill/payment requests for the desktop, kitchen refires,
combining orders and removing taxes.

Each function validates, writes, and returns the payload for the response.
Missing rows raise ``ResourceNotFound``; broken business rules raise
``InvalidOperation``.
"""
import copy
import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from core.exceptions import InvalidOperation, ResourceNotFound
from core.formatting import round_money
from orders import cart
from orders.models import WaitingTransaction
from staff.models import Staff
from tables.models import Table, Seat
from .models import PrintBillRequest, PayEntireBillRequest, TaxAdjustmentAuditLog, generate_request_id

logger = logging.getLogger(__name__)


# =============== LOOKUPS ===============

def get_transaction(transaction_id):
    order = WaitingTransaction.objects.filter(transaction_id=transaction_id).first()
    if order is None:
        raise ResourceNotFound('Transaction not found', f"Transaction {transaction_id} not found")
    return order


def get_staff(staff_id, label='Staff member', require_active=False):
    staff = Staff.objects.filter(id=staff_id).first()
    if staff is None:
        raise ResourceNotFound('Staff not found', f"{label} {staff_id} not found")
    if require_active and not staff.is_active:
        raise InvalidOperation('Invalid operation', f"{label} {staff.full_name} is not active")
    return staff


def get_table(table_id, label='Table'):
    table = Table.objects.filter(table_id=table_id).first()
    if table is None:
        raise ResourceNotFound('Table not found', f"{label} {table_id} not found")
    return table


def _reassign(order, staff_id, now):
    order.staff_id = staff_id
    items = order.items
    for item in items:
        item['staff_id'] = staff_id
    order.set_items(items)
    order.modified_date = now
    order.save(update_fields=['staff_id', 'cart_items', 'modified_date'])


# =============== NOTES & SERVERS ===============

def add_notes(transaction_id, note_text, added_by_staff_id=None):
    order = get_transaction(transaction_id)
    now = timezone.now()

    prefix = ''
    if added_by_staff_id:
        staff = Staff.objects.filter(id=added_by_staff_id).first()
        if staff is not None:
            prefix = f"[{staff.first_name} {staff.last_name} - {now:%H:%M}] "

    note = f"{prefix}{note_text}"
    order.notes = f"{order.notes}\n{note}" if order.notes else note
    order.modified_date = now
    order.save(update_fields=['notes', 'modified_date'])

    logger.info(f"Note added to {transaction_id}")
    return {
        'transaction_id': transaction_id,
        'note_text': note_text,
        'notes': order.notes,
        'added_at': now,
        'message': "Note added successfully",
    }


def transfer_server(transaction_id, new_staff_id, reason=None):
    order = get_transaction(transaction_id)
    new_staff = get_staff(new_staff_id, require_active=True)
    previous_staff = Staff.objects.filter(id=order.staff_id).first() if order.staff_id else None
    previous_id = order.staff_id

    now = timezone.now()
    with transaction.atomic():
        _reassign(order, new_staff.id, now)

    previous_name = previous_staff.full_name if previous_staff else None
    logger.info(f"Order {transaction_id} transferred to staff {new_staff.id} ({reason or 'no reason'})")
    return {
        'transaction_id': transaction_id,
        'previous_staff_id': previous_id,
        'previous_staff_name': previous_name or "None",
        'new_staff_id': new_staff.id,
        'new_staff_name': new_staff.full_name,
        'transferred_at': now,
        'message': f"Order transferred from {previous_name or 'unassigned'} to {new_staff.full_name}",
    }


def shift_handover(current_staff_id, new_staff_id, reason=None):
    if current_staff_id == new_staff_id:
        raise InvalidOperation('Invalid operation', "Current and new staff must be different")
    current_staff = get_staff(current_staff_id, label='Current staff member')
    new_staff = get_staff(new_staff_id, label='New staff member', require_active=True)

    now = timezone.now()
    transferred = []
    with transaction.atomic():
        for order in WaitingTransaction.objects.filter(staff_id=current_staff.id).order_by('created_date'):
            _reassign(order, new_staff.id, now)
            transferred.append(order.transaction_id)

    if transferred:
        message = (
            f"Successfully transferred {len(transferred)} order(s) from "
            f"{current_staff.first_name} to {new_staff.first_name}"
        )
        logger.info(f"Shift handover {current_staff.id} -> {new_staff.id}: {len(transferred)} orders ({reason or 'no reason'})")
    else:
        message = "No orders to transfer"
    return {
        'current_staff_id': current_staff.id,
        'current_staff_name': current_staff.full_name,
        'new_staff_id': new_staff.id,
        'new_staff_name': new_staff.full_name,
        'orders_transferred': len(transferred),
        'transferred_transaction_ids': transferred,
        'handover_at': now,
        'message': message,
    }


# =============== TABLES ===============

def move_order(transaction_id, target_table_id, reason=None):
    order = get_transaction(transaction_id)
    source_table = Table.objects.filter(table_id=order.table_id).first() if order.table_id else None
    target_table = get_table(target_table_id, label='Target table')

    if target_table.status == "Occupied":
        raise InvalidOperation(
            'Invalid operation',
            f"Target table {target_table.display_name} is already occupied. Please select an available table.",
        )
    if Seat.objects.filter(table_id=target_table.table_id, status="Occupied").exists():
        raise InvalidOperation(
            'Invalid operation',
            f"Target table {target_table.display_name} has occupied seats. Please free all seats before moving order.",
        )

    now = timezone.now()
    with transaction.atomic():
        order.table_id = target_table.table_id
        order.table_number = target_table.table_number
        order.table_name = target_table.table_name
        order.modified_date = now
        order.save(update_fields=['table_id', 'table_number', 'table_name', 'modified_date'])

        if source_table is not None and source_table.table_id != target_table.table_id:
            source_table.set_status("Available")
        target_table.set_status("Occupied", customer_id=order.customer_id, transaction_id=order.transaction_id)

    from_name = source_table.display_name if source_table else "Unknown"
    logger.info(f"Order {transaction_id} moved {from_name} -> {target_table.display_name} ({reason or 'no reason'})")
    return {
        'transaction_id': transaction_id,
        'from_table_id': source_table.table_id if source_table else None,
        'from_table_name': from_name,
        'to_table_id': target_table.table_id,
        'to_table_name': target_table.display_name,
        'moved_at': now,
        'message': f"Order moved from {from_name} to {target_table.display_name}",
    }


# =============== BILL & PAYMENT REQUESTS ===============

def _new_bill_request(model, order, staff, notes, now):
    return model.objects.create(
        request_id=model.new_request_id(),
        transaction_id=order.transaction_id,
        staff_id=staff.id,
        staff_name=staff.full_name,
        table_id=order.table_id,
        table_name=order.table_name,
        requested_at=now,
        status="Pending",
        notes=notes,
    )


def create_print_bill_request(transaction_id, staff_id, notes=None):
    """Returns ``(request, created)``; a pending request for the order is reused"""
    order = get_transaction(transaction_id)
    staff = get_staff(staff_id)

    if PayEntireBillRequest.objects.filter(transaction_id=transaction_id, status="Pending").exists():
        raise InvalidOperation(
            'Invalid operation',
            f"A payment request is already pending for transaction {transaction_id}. "
            "Cannot create a print-bill request at the same time.",
        )

    existing = PrintBillRequest.objects.filter(transaction_id=transaction_id, status="Pending").first()
    if existing is not None:
        return existing, False

    bill_request = _new_bill_request(PrintBillRequest, order, staff, notes, timezone.now())
    logger.info(f"Print bill request {bill_request.request_id} created for {transaction_id}")
    return bill_request, True


def create_print_bill_requests_for_table(table_id, staff_id, notes=None):
    staff = get_staff(staff_id)
    table = get_table(table_id)

    orders = list(WaitingTransaction.objects.filter(table_id=table_id).order_by('created_date'))
    if not orders:
        raise InvalidOperation('Invalid operation', f"No open orders found for table {table.display_name}")

    paying = set(
        PayEntireBillRequest.objects.filter(
            transaction_id__in=[order.transaction_id for order in orders], status="Pending"
        ).values_list('transaction_id', flat=True)
    )

    now = timezone.now()
    request_ids = []
    with transaction.atomic():
        for order in orders:
            if order.transaction_id in paying:
                continue
            existing = PrintBillRequest.objects.filter(transaction_id=order.transaction_id, status="Pending").first()
            if existing is not None:
                request_ids.append(existing.request_id)
                continue
            request_ids.append(_new_bill_request(PrintBillRequest, order, staff, notes, now).request_id)

    if request_ids:
        message = f"Created {len(request_ids)} print bill request(s) for {table.display_name}"
    else:
        message = "No new print requests created (payment requests already pending for all orders)"
    return {
        'request_count': len(request_ids),
        'table_id': table.table_id,
        'table_name': table.display_name,
        'request_ids': request_ids,
        'message': message,
    }


def create_pay_entire_bill_request(transaction_id, staff_id, notes=None):
    """Returns ``(request, created)``; a pending request for the order is reused"""
    order = get_transaction(transaction_id)
    staff = get_staff(staff_id)

    existing = PayEntireBillRequest.objects.filter(transaction_id=transaction_id, status="Pending").first()
    if existing is not None:
        return existing, False

    bill_request = _new_bill_request(PayEntireBillRequest, order, staff, notes, timezone.now())
    logger.info(f"Pay entire bill request {bill_request.request_id} created for {transaction_id}")
    return bill_request, True


def complete_request(model, request_id, completed_by=None):
    updated = model.objects.filter(request_id=request_id, status="Pending").update(
        status="Completed",
        completed_at=timezone.now(),
        completed_by=completed_by,
    )
    if not updated:
        raise ResourceNotFound('Request not found', f"No pending request found with ID: {request_id}")


def cancel_request(model, request_id):
    updated = model.objects.filter(request_id=request_id, status="Pending").update(status="Cancelled")
    if not updated:
        raise ResourceNotFound('Request not found', f"No pending request found with ID: {request_id}")


# =============== KITCHEN ===============

def refire_to_kitchen(transaction_id, staff_id, item_indices, reason):
    order = get_transaction(transaction_id)
    staff = get_staff(staff_id)

    items = order.items
    if not items:
        raise InvalidOperation('Invalid operation', "Transaction has no items")

    if item_indices:
        for index in item_indices:
            if index < 0 or index >= len(items):
                raise InvalidOperation('Invalid operation', f"Invalid item index: {index}")
        refired = [items[index] for index in item_indices]
    else:
        refired = items

    now = timezone.now()
    order.is_refired = True
    order.refire_reason = reason
    order.refired_at = now
    order.refired_by_staff_id = staff.id
    order.refired_by_staff_name = staff.full_name
    order.modified_date = now
    order.save(update_fields=[
        'is_refired', 'refire_reason', 'refired_at', 'refired_by_staff_id',
        'refired_by_staff_name', 'modified_date',
    ])

    logger.info(f"Order {transaction_id} refired by staff {staff.id}: {len(refired)} item(s)")
    return {
        'transaction_id': transaction_id,
        'items_refired': len(refired),
        'refired_items': [item['name'] for item in refired],
        'refired_at': now,
        'message': f"Order marked as refired. {len(refired)} item(s) will be reprinted.",
    }


# =============== COMBINE ORDERS ===============

def merge_key(item):
    return (
        item['product_id'],
        item['name'],
        item['price'],
        item['tax_id'],
        item['taxable'],
        cart.modifier_signature(item),
    )


def merge_cart_items(items):
    """
    Collapse lines for the same product, price, tax settings and modifiers.

    Quantities (and their tax and discount) are summed into the first line;
    lines keep the order in which they first appear.
    """
    merged = {}
    for item in items:
        key = merge_key(item)
        if key in merged:
            line = merged[key]
            line['quantity'] += item['quantity']
            line['tax_amount'] += item['tax_amount']
            line['discount'] += item['discount']
        else:
            merged[key] = copy.deepcopy(item)

    lines = list(merged.values())
    for line in lines:
        line['total'] = cart.line_subtotal(line)
    return lines


def combine_orders(transaction_ids, target_table_id, target_staff_id, notes=None):
    unique_ids = list(dict.fromkeys(transaction_ids))
    if len(unique_ids) < 2:
        raise InvalidOperation('Invalid operation', "At least 2 unique transactions are required to combine orders")

    orders = [get_transaction(transaction_id) for transaction_id in unique_ids]
    target_table = get_table(target_table_id, label='Target table')
    target_staff = get_staff(target_staff_id, label='Target staff', require_active=True)

    all_items = [item for order in orders for item in order.items]
    merged = merge_cart_items(all_items)
    for line in merged:
        line['staff_id'] = target_staff.id

    now = timezone.now()
    with transaction.atomic():
        combined = WaitingTransaction(
            transaction_id=WaitingTransaction.next_transaction_id(moment=now),
            customer_id=orders[0].customer_id,
            table_id=target_table.table_id,
            table_number=target_table.table_number,
            table_name=target_table.table_name,
            staff_id=target_staff.id,
            status="Pending",
            notes=notes,
            created_date=now,
            modified_date=now,
        )
        combined.set_items(merged)
        combined.save(force_insert=True)

        PrintBillRequest.objects.filter(transaction_id__in=unique_ids).delete()
        PayEntireBillRequest.objects.filter(transaction_id__in=unique_ids).delete()
        TaxAdjustmentAuditLog.objects.filter(transaction_id__in=unique_ids).delete()
        WaitingTransaction.objects.filter(transaction_id__in=unique_ids).delete()

        target_table.set_status("Occupied", customer_id=combined.customer_id, transaction_id=combined.transaction_id)

    merged_count = len(all_items) - len(merged)
    total_amount = round_money(sum((cart.line_subtotal(line) + line['tax_amount'] for line in merged), Decimal('0')))
    logger.info(f"Orders combined: {combined.transaction_id} from {', '.join(unique_ids)} (merged {merged_count} items)")
    return {
        'new_transaction_id': combined.transaction_id,
        'combined_from_ids': unique_ids,
        'total_items': len(merged),
        'total_quantity': cart.total_quantity(merged),
        'total_amount': total_amount,
        'merged_items_count': merged_count,
        'timestamp': now,
        'message': f"Successfully combined {len(unique_ids)} orders into 1 (merged {merged_count} duplicate items)",
    }


# =============== TAX ADJUSTMENTS ===============

def remove_taxes_and_fees(transaction_id, staff_id, reason):
    order = get_transaction(transaction_id)
    staff = get_staff(staff_id)

    items = order.items
    if not items:
        raise InvalidOperation('Invalid operation', "Transaction has no items")

    original_tax = round_money(sum((item['tax_amount'] for item in items), Decimal('0')))
    affected = 0
    for item in items:
        if item['tax_amount'] > 0:
            item['tax_amount'] = Decimal('0')
            item['taxable'] = False
            affected += 1

    now = timezone.now()
    with transaction.atomic():
        order.set_items(items)
        order.modified_date = now
        order.save(update_fields=['cart_items', 'modified_date'])

        audit = TaxAdjustmentAuditLog.objects.create(
            audit_id=generate_request_id('AUDIT', now),
            transaction_id=transaction_id,
            staff_id=staff.id,
            staff_name=staff.full_name,
            action="Remove",
            apply_to="Order",
            original_tax_amount=original_tax,
            new_tax_amount=Decimal('0'),
            reason=reason,
            timestamp=now,
        )

    logger.info(f"Taxes removed from {transaction_id} by staff {staff.id}: {original_tax} ({affected} items)")
    return {
        'transaction_id': transaction_id,
        'original_tax_amount': original_tax,
        'tax_removed': original_tax,
        'items_affected': affected,
        'removed_by': staff.full_name,
        'audit_log_id': audit.audit_id,
        'timestamp': now,
        'message': f"Taxes and fees removed successfully. {affected} item(s) affected.",
    }
