import json
from datetime import datetime

import pytest

from orders.models import WaitingTransaction

ORDER = {
    'staff_id': 1,
    'table_id': 'T1',
    'items': [
        {'product_id': 'P1', 'name': 'Ndole', 'quantity': 2, 'price': 2500},
        {
            'product_id': 'P2', 'name': 'Poulet DG', 'quantity': 1, 'price': 5000,
            'applied_modifiers': [{'modifier_id': 'M1', 'modifier_name': 'Extra plantain', 'price_change': 500}],
        },
    ],
}


@pytest.mark.django_db
class TestCreateOrder:

    def test_creates_waiting_transaction(self, api_client, make_table):
        make_table(table_name='Terrace')
        response = api_client.post('/api/orders', ORDER, format='json')

        assert response.status_code == 201
        body = response.json()
        transaction_id = body['data']
        assert transaction_id.startswith('M')
        assert body['message'] == f"Order created successfully with ID: {transaction_id}"

        order = WaitingTransaction.objects.get(transaction_id=transaction_id)
        assert order.status == 'Pending'
        assert order.table_name == 'Terrace'
        assert order.total_items == 3
        assert order.total_amount == 10500

        rows = json.loads(order.cart_items)
        assert rows[0]['ProductId'] == 'P1'
        assert rows[0]['StaffId'] == 1
        assert rows[1]['AppliedModifiers'][0]['ModifierName'] == 'Extra plantain'

    def test_missing_staff(self, api_client):
        payload = dict(ORDER, staff_id=None)
        response = api_client.post('/api/orders', payload, format='json')
        assert response.status_code == 400
        assert 'StaffId is required' in json.dumps(response.json()['details'])

    def test_empty_order(self, api_client):
        response = api_client.post('/api/orders', dict(ORDER, items=[]), format='json')
        assert response.status_code == 400
        assert 'Order must contain at least one item' in json.dumps(response.json()['details'])

    def test_zero_quantity(self, api_client):
        payload = dict(ORDER, items=[{'product_id': 'P1', 'name': 'Ndole', 'quantity': 0, 'price': 2500}])
        response = api_client.post('/api/orders', payload, format='json')
        assert response.status_code == 400
        assert 'Quantity must be greater than 0' in json.dumps(response.json()['details'])

    def test_ids_do_not_collide_within_a_second(self, make_order):
        moment = datetime(2026, 1, 1, 12, 0, 0)
        make_order(transaction_id='M20260101120000')
        assert WaitingTransaction.next_transaction_id(moment=moment) == 'M20260101120000-2'


@pytest.mark.django_db
class TestWaitingTransactions:

    def test_detail_includes_items_and_totals(self, api_client, make_order):
        make_order()
        data = api_client.get('/api/orders/waiting/M20260101120000').json()['data']
        assert data['items'][0]['subtotal'] == 2500
        assert data['total_amount'] == 2500
        assert data['table_display'] == 'Takeaway'

    def test_unknown_transaction_is_404(self, api_client):
        response = api_client.get('/api/orders/waiting/NOPE')
        assert response.status_code == 404
        assert response.json()['error'] == 'Transaction not found'

    def test_update_status_any_case(self, api_client, make_order):
        make_order()
        response = api_client.put('/api/orders/waiting/M20260101120000/status', {'status': 'ready'}, format='json')
        assert response.status_code == 200
        assert WaitingTransaction.objects.get(transaction_id='M20260101120000').status == 'Ready'

    def test_update_status_rejects_unknown(self, api_client, make_order):
        make_order()
        response = api_client.put('/api/orders/waiting/M20260101120000/status', {'status': 'Served'}, format='json')
        assert response.status_code == 400

    def test_delete(self, api_client, make_order):
        make_order()
        response = api_client.delete('/api/orders/waiting/M20260101120000')
        assert response.status_code == 200
        assert not WaitingTransaction.objects.exists()

    def test_filter_by_staff(self, api_client, make_order):
        make_order()
        make_order(transaction_id='M20260101120001', staff_id=2)
        data = api_client.get('/api/orders/waiting', {'staff_id': 2}).json()['data']
        assert [order['transaction_id'] for order in data] == ['M20260101120001']

    def test_table_orders(self, api_client, make_order, make_table):
        table = make_table()
        make_order(table=table)
        make_order(transaction_id='M20260101120001')
        data = api_client.get('/api/orders/table/T1').json()['data']
        assert len(data) == 1

    def test_statistics(self, api_client, make_order):
        make_order()
        make_order(transaction_id='M20260101120001', status='Completed')
        data = api_client.get('/api/orders/statistics').json()['data']
        assert data['total_orders'] == 2
        assert data['pending_orders'] == 1
        assert data['total_order_value'] == 5000


@pytest.mark.django_db
class TestUnreadableCarts:
    """A row the desktop wrote with a broken CartItems column must not take the listings down"""

    @pytest.fixture()
    def broken_order(self, make_order):
        make_order()
        make_order(transaction_id='M20260101120001', table_id='T9')
        WaitingTransaction.objects.filter(transaction_id='M20260101120001').update(cart_items='not json')

    def test_waiting_list_skips_broken_row(self, api_client, broken_order):
        response = api_client.get('/api/orders/waiting')
        assert response.status_code == 200
        assert [order['transaction_id'] for order in response.json()['data']] == ['M20260101120000']

    def test_pending_list_skips_broken_row(self, api_client, broken_order):
        response = api_client.get('/api/orders/pending')
        assert response.status_code == 200
        assert len(response.json()['data']) == 1

    def test_summaries_skip_broken_row(self, api_client, broken_order):
        statistics = api_client.get('/api/orders/statistics')
        assert statistics.status_code == 200
        assert statistics.json()['data']['total_orders'] == 1
        assert statistics.json()['data']['total_order_value'] == 2500

        assert api_client.get('/api/orders/staff-summary').status_code == 200
        tables = api_client.get('/api/orders/table-summary')
        assert tables.status_code == 200
        assert tables.json()['data'] == []

    def test_single_transaction_still_reports_the_error(self, api_client, broken_order):
        response = api_client.get('/api/orders/waiting/M20260101120001')
        assert response.status_code == 400
        assert response.json()['details'] == 'Cart items are not valid JSON'


@pytest.mark.django_db
class TestPendingStatus:

    def test_missing_status_counts_as_pending(self, api_client, make_order):
        make_order()
        make_order(transaction_id='M20260101120001', status=None)
        make_order(transaction_id='M20260101120002', status='Completed')

        pending = api_client.get('/api/orders/pending').json()['data']
        assert {order['transaction_id'] for order in pending} == {'M20260101120000', 'M20260101120001'}
        assert api_client.get('/api/orders/statistics').json()['data']['pending_orders'] == 2
