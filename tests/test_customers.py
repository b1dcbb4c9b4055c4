import pytest


@pytest.mark.django_db
class TestCustomers:

    def test_list_active_only(self, api_client, make_customer):
        make_customer()
        make_customer(customer_id='CU2', first_name='Alice', is_active=False)
        data = api_client.get('/api/customers').json()['data']

        assert [customer['customer_id'] for customer in data] == ['CU1']
        assert data[0]['full_name'] == 'Paul Mbarga'
        assert data[0]['status_display'] == 'Enabled'

    def test_inactive_customer_is_404(self, api_client, make_customer):
        make_customer(is_active=False)
        response = api_client.get('/api/customers/CU1')
        assert response.status_code == 404
        assert response.json()['error'] == 'Customer not found'

    def test_search(self, api_client, make_customer):
        make_customer(email='paul@example.cm')
        make_customer(customer_id='CU2', first_name='Alice', last_name='Fon', phone='677000000')
        make_customer(customer_id='CU3', first_name='Pauline', is_active=False)

        data = api_client.get('/api/customers/search', {'search_term': 'paul'}).json()['data']
        assert [customer['customer_id'] for customer in data['items']] == ['CU1']

        data = api_client.get('/api/customers/search', {'search_term': 'paul', 'include_inactive': 'true'}).json()['data']
        assert data['total_count'] == 2

        data = api_client.get('/api/customers/search', {'search_term': '677'}).json()['data']
        assert data['items'][0]['customer_id'] == 'CU2'

    @pytest.mark.parametrize('params, message', [
        ({'page': 0}, "Page must be greater than 0"),
        ({'page_size': 101}, "PageSize must be between 1 and 100"),
        ({'search_term': 'x' * 101}, "Search term cannot exceed 100 characters"),
    ])
    def test_search_validation(self, api_client, params, message):
        response = api_client.get('/api/customers/search', params)
        assert response.status_code == 400
        assert message in str(response.json()['details'])

    def test_statistics(self, api_client, make_customer):
        make_customer(type='Individual', city='Douala', country='Cameroon', opening_balance=1000)
        make_customer(customer_id='CU2', type='business', city='Douala', email='shop@example.cm')
        make_customer(customer_id='CU3', city='Yaounde', is_active=False)

        data = api_client.get('/api/customers/statistics').json()['data']

        assert data['total_customers'] == 3
        assert data['inactive_customers'] == 1
        assert data['individual_customers'] == 1
        assert data['business_customers'] == 1
        assert data['customers_with_email'] == 1
        assert data['total_opening_balance'] == 1000
        assert data['most_common_city'] == 'Douala'
        assert data['most_common_country'] == 'Cameroon'
