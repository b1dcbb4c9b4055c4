from unittest import mock

import pytest
from django.db import DatabaseError

from operations import services
from operations.models import PayEntireBillRequest, PrintBillRequest, TaxAdjustmentAuditLog
from orders.models import WaitingTransaction
from tables.models import Table

FIRST = 'M20260101120000'
SECOND = 'M20260101120500'


@pytest.fixture()
def floor(make_staff, make_table):
    """Two servers and two tables"""
    make_staff()
    make_staff(staff_id=2, first_name='Jean', last_name='Ekane', daily_code='5678')
    make_table()
    make_table(table_id='T2', table_number=2)


@pytest.mark.django_db
class TestNotesAndServers:

    def test_add_note_with_staff_prefix(self, api_client, floor, make_order):
        make_order(notes='No onions')
        response = api_client.post('/api/restaurant-operations/add-notes', {
            'transaction_id': FIRST, 'note_text': 'Allergic to peanuts', 'added_by_staff_id': 1,
        }, format='json')

        assert response.status_code == 200
        assert response.json()['message'] == "Note added successfully"
        notes = WaitingTransaction.objects.get(transaction_id=FIRST).notes
        first, second = notes.split('\n')
        assert first == 'No onions'
        assert second.startswith('[Amina Njoya - ')
        assert second.endswith('] Allergic to peanuts')

    def test_blank_note_is_rejected(self, api_client, floor, make_order):
        make_order()
        response = api_client.post('/api/restaurant-operations/add-notes', {
            'transaction_id': FIRST, 'note_text': '   ',
        }, format='json')
        assert response.status_code == 400

    def test_transfer_server_updates_every_line(self, api_client, floor, make_order, line):
        make_order(items=[line(staff_id=1), line(product_id='P2', staff_id=1)])
        response = api_client.post('/api/restaurant-operations/transfer-server', {
            'transaction_id': FIRST, 'new_staff_id': 2, 'reason': 'Break',
        }, format='json')

        assert response.status_code == 200
        assert response.json()['message'] == "Order transferred from Amina Njoya to Jean Ekane"
        order = WaitingTransaction.objects.get(transaction_id=FIRST)
        assert order.staff_id == 2
        assert {item['staff_id'] for item in order.items} == {2}

    def test_transfer_to_inactive_staff(self, api_client, floor, make_staff, make_order):
        make_staff(staff_id=3, first_name='Paul', daily_code='0000', is_active=False)
        make_order()
        response = api_client.post('/api/restaurant-operations/transfer-server', {
            'transaction_id': FIRST, 'new_staff_id': 3,
        }, format='json')
        assert response.status_code == 400

    def test_shift_handover(self, api_client, floor, make_order):
        make_order()
        make_order(transaction_id=SECOND)
        response = api_client.post('/api/restaurant-operations/shift-handover', {
            'current_staff_id': 1, 'new_staff_id': 2,
        }, format='json')

        data = response.json()['data']
        assert data['orders_transferred'] == 2
        assert sorted(data['transferred_transaction_ids']) == [FIRST, SECOND]
        assert not WaitingTransaction.objects.filter(staff_id=1).exists()

    def test_shift_handover_without_orders(self, api_client, floor):
        response = api_client.post('/api/restaurant-operations/shift-handover', {
            'current_staff_id': 1, 'new_staff_id': 2,
        }, format='json')
        assert response.json()['message'] == "No orders to transfer"

    def test_shift_handover_to_self(self, api_client, floor):
        response = api_client.post('/api/restaurant-operations/shift-handover', {
            'current_staff_id': 1, 'new_staff_id': 1,
        }, format='json')
        assert response.status_code == 400


@pytest.mark.django_db
class TestMoveOrder:

    def test_moves_order_and_table_states(self, api_client, floor, make_order):
        source = Table.objects.get(table_id='T1')
        order = make_order(table=source, customer_id='CU1')
        source.set_status('Occupied', customer_id='CU1', transaction_id=order.transaction_id)

        response = api_client.post('/api/restaurant-operations/move-order', {
            'transaction_id': FIRST, 'target_table_id': 'T2',
        }, format='json')

        assert response.status_code == 200
        assert response.json()['message'] == "Order moved from Table 1 to Table 2"
        source.refresh_from_db()
        target = Table.objects.get(table_id='T2')
        assert source.status == 'Available'
        assert source.current_transaction_id is None
        assert target.status == 'Occupied'
        assert target.current_transaction_id == FIRST
        assert target.current_customer_id == 'CU1'
        assert WaitingTransaction.objects.get(transaction_id=FIRST).table_id == 'T2'

    def test_occupied_target_is_rejected(self, api_client, floor, make_order):
        make_order()
        Table.objects.filter(table_id='T2').update(status='Occupied')
        response = api_client.post('/api/restaurant-operations/move-order', {
            'transaction_id': FIRST, 'target_table_id': 'T2',
        }, format='json')
        assert response.status_code == 400
        assert 'already occupied' in response.json()['details']

    def test_target_with_occupied_seat_is_rejected(self, api_client, floor, make_order, make_seat):
        make_order()
        make_seat(Table.objects.get(table_id='T2'), status='Occupied', customer_id='CU9')
        response = api_client.post('/api/restaurant-operations/move-order', {
            'transaction_id': FIRST, 'target_table_id': 'T2',
        }, format='json')
        assert response.status_code == 400
        assert 'occupied seats' in response.json()['details']

    def test_unknown_target(self, api_client, floor, make_order):
        make_order()
        response = api_client.post('/api/restaurant-operations/move-order', {
            'transaction_id': FIRST, 'target_table_id': 'T9',
        }, format='json')
        assert response.status_code == 404


@pytest.mark.django_db
class TestBillRequests:

    def test_print_bill_is_not_duplicated(self, api_client, floor, make_order):
        make_order(table=Table.objects.get(table_id='T1'))
        payload = {'transaction_id': FIRST, 'staff_id': 1}

        first = api_client.post('/api/restaurant-operations/print-bill', payload, format='json').json()
        second = api_client.post('/api/restaurant-operations/print-bill', payload, format='json').json()

        assert first['data']['request_id'].startswith('PBR-')
        assert first['data']['table_id'] == 'T1'
        assert second['data']['request_id'] == first['data']['request_id']
        assert second['message'] == "Existing pending print bill request returned (no duplicate created)"
        assert PrintBillRequest.objects.count() == 1

    def test_print_bill_blocked_by_pending_payment(self, api_client, floor, make_order):
        make_order()
        payload = {'transaction_id': FIRST, 'staff_id': 1}
        api_client.post('/api/restaurant-operations/pay-entire-bill', payload, format='json')

        response = api_client.post('/api/restaurant-operations/print-bill', payload, format='json')
        assert response.status_code == 400
        assert 'payment request is already pending' in response.json()['details']

    def test_print_bill_for_table_skips_paying_orders(self, api_client, floor, make_order):
        table = Table.objects.get(table_id='T1')
        make_order(table=table)
        make_order(transaction_id=SECOND, table=table)
        api_client.post('/api/restaurant-operations/pay-entire-bill', {
            'transaction_id': SECOND, 'staff_id': 1,
        }, format='json')

        data = api_client.post('/api/restaurant-operations/print-bill/table', {
            'table_id': 'T1', 'staff_id': 1,
        }, format='json').json()['data']

        assert data['request_count'] == 1
        assert PrintBillRequest.objects.get().transaction_id == FIRST

    def test_print_bill_for_empty_table(self, api_client, floor):
        response = api_client.post('/api/restaurant-operations/print-bill/table', {
            'table_id': 'T1', 'staff_id': 1,
        }, format='json')
        assert response.status_code == 400

    def test_complete_and_cancel_only_pending(self, api_client, floor, make_order):
        make_order()
        request_id = api_client.post('/api/restaurant-operations/print-bill', {
            'transaction_id': FIRST, 'staff_id': 1,
        }, format='json').json()['data']['request_id']

        response = api_client.put(
            f'/api/restaurant-operations/print-bill/{request_id}/complete', {'completed_by': 'Cashier'}, format='json',
        )
        assert response.status_code == 200
        assert PrintBillRequest.objects.get().status == 'Completed'

        assert api_client.delete(f'/api/restaurant-operations/print-bill/{request_id}').status_code == 404
        assert api_client.get('/api/restaurant-operations/print-bill/pending').json()['data'] == []

    def test_pay_entire_bill_cancel(self, api_client, floor, make_order):
        make_order()
        request_id = api_client.post('/api/restaurant-operations/pay-entire-bill', {
            'transaction_id': FIRST, 'staff_id': 1,
        }, format='json').json()['data']['request_id']

        assert request_id.startswith('PEBR-')
        assert api_client.delete(f'/api/restaurant-operations/pay-entire-bill/{request_id}').status_code == 200
        assert PayEntireBillRequest.objects.get().status == 'Cancelled'


@pytest.mark.django_db
class TestRefire:

    def test_refire_selected_items(self, api_client, floor, make_order, line):
        make_order(items=[line(), line(product_id='P2', name='Eru')])
        response = api_client.post('/api/restaurant-operations/refire-to-kitchen', {
            'transaction_id': FIRST, 'staff_id': 2, 'item_indices': [1], 'reason': 'Dropped plate',
        }, format='json')

        assert response.status_code == 200
        assert response.json()['message'] == "Order marked as refired. 1 item(s) will be reprinted."
        order = WaitingTransaction.objects.get(transaction_id=FIRST)
        assert order.is_refired is True
        assert order.refire_reason == 'Dropped plate'
        assert order.refired_by_staff_name == 'Jean Ekane'

    def test_invalid_index(self, api_client, floor, make_order):
        make_order()
        response = api_client.post('/api/restaurant-operations/refire-to-kitchen', {
            'transaction_id': FIRST, 'staff_id': 1, 'item_indices': [5], 'reason': 'Cold',
        }, format='json')
        assert response.status_code == 400
        assert response.json()['details'] == "Invalid item index: 5"

    def test_reason_required(self, api_client, floor, make_order):
        make_order()
        response = api_client.post('/api/restaurant-operations/refire-to-kitchen', {
            'transaction_id': FIRST, 'staff_id': 1,
        }, format='json')
        assert response.status_code == 400


@pytest.mark.django_db
class TestCombineOrders:

    def test_combines_and_merges(self, api_client, floor, make_order, line):
        cheese = [{'modifier_id': 'M1', 'modifier_name': 'Extra cheese', 'price_change': '500'}]
        make_order(items=[line(quantity=2, tax_amount='100'), line(product_id='P2', name='Eru')], customer_id='CU1')
        make_order(transaction_id=SECOND, staff_id=2, items=[line(quantity=1, tax_amount='50'), line(applied_modifiers=cheese)])
        api_client.post('/api/restaurant-operations/print-bill', {'transaction_id': FIRST, 'staff_id': 1}, format='json')

        response = api_client.post('/api/restaurant-operations/combine-orders', {
            'transaction_ids': [FIRST, SECOND, FIRST], 'target_table_id': 'T2', 'target_staff_id': 2,
        }, format='json')

        assert response.status_code == 200
        body = response.json()
        data = body['data']
        assert body['message'] == "Successfully combined 2 orders into 1 (merged 1 duplicate items)"
        assert data['total_items'] == 3
        assert data['merged_items_count'] == 1
        # 3 x 2500 + 2500 + 3000 + 150 tax
        assert data['total_amount'] == 13150

        combined = WaitingTransaction.objects.get(transaction_id=data['new_transaction_id'])
        assert combined.customer_id == 'CU1'
        assert combined.table_id == 'T2'
        assert combined.items[0]['quantity'] == 3
        assert {item['staff_id'] for item in combined.items} == {2}
        assert not WaitingTransaction.objects.filter(transaction_id__in=[FIRST, SECOND]).exists()
        assert not PrintBillRequest.objects.exists()
        assert Table.objects.get(table_id='T2').current_transaction_id == combined.transaction_id

    def test_needs_two_unique_orders(self, api_client, floor, make_order):
        make_order()
        response = api_client.post('/api/restaurant-operations/combine-orders', {
            'transaction_ids': [FIRST, FIRST], 'target_table_id': 'T2', 'target_staff_id': 2,
        }, format='json')
        assert response.status_code == 400

    def test_unknown_order_leaves_everything_untouched(self, api_client, floor, make_order):
        make_order()
        response = api_client.post('/api/restaurant-operations/combine-orders', {
            'transaction_ids': [FIRST, 'MISSING'], 'target_table_id': 'T2', 'target_staff_id': 2,
        }, format='json')
        assert response.status_code == 404
        assert WaitingTransaction.objects.filter(transaction_id=FIRST).exists()

    def test_failed_write_rolls_everything_back(self, floor, make_order, line):
        make_order()
        make_order(transaction_id=SECOND, staff_id=2, items=[line(product_id='P2', name='Eru')])
        _, created = services.create_print_bill_request(FIRST, 1)
        assert created

        failing = mock.patch.object(
            TaxAdjustmentAuditLog.objects, 'filter', side_effect=DatabaseError('disk I/O error'),
        )
        with failing, pytest.raises(DatabaseError):
            services.combine_orders([FIRST, SECOND], 'T2', 2)

        assert sorted(WaitingTransaction.objects.values_list('transaction_id', flat=True)) == [FIRST, SECOND]
        assert PrintBillRequest.objects.filter(transaction_id=FIRST).exists()
        assert Table.objects.get(table_id='T2').status == "Available"


@pytest.mark.django_db
class TestRemoveTaxes:

    def test_removes_taxes_and_audits(self, api_client, floor, make_order, line):
        make_order(items=[line(tax_id='TAX1', tax_amount='481.25'), line(product_id='P2', tax_amount='0')])
        response = api_client.post('/api/restaurant-operations/remove-taxes-and-fees', {
            'transaction_id': FIRST, 'staff_id': 1, 'reason': 'Diplomatic exemption',
        }, format='json')

        assert response.status_code == 200
        data = response.json()['data']
        assert data['original_tax_amount'] == 481.25
        assert data['items_affected'] == 1
        assert data['audit_log_id'].startswith('AUDIT-')

        order = WaitingTransaction.objects.get(transaction_id=FIRST)
        assert order.items[0]['tax_amount'] == 0
        assert order.items[0]['taxable'] is False
        audit = TaxAdjustmentAuditLog.objects.get()
        assert audit.action == 'Remove'
        assert audit.new_tax_amount == 0
