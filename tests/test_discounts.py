from datetime import timedelta

import pytest
from django.utils import timezone

from discounts.models import Discount


@pytest.mark.django_db
class TestDiscounts:

    def test_active_excludes_expired_and_exhausted(self, api_client, make_discount):
        make_discount()
        make_discount(discount_id='D2', coupon_code='OLD', valid_until=timezone.now() - timedelta(days=1))
        make_discount(discount_id='D3', coupon_code='USED', usage_limit=5, usage_count=5)

        data = api_client.get('/api/discounts/active').json()['data']
        assert [discount['discount_id'] for discount in data] == ['D1']

    def test_coupon_lookup_is_case_insensitive(self, api_client, make_discount):
        make_discount()
        response = api_client.get('/api/discounts/coupon/happy')
        assert response.status_code == 200
        assert response.json()['data']['discount_id'] == 'D1'

    def test_unknown_coupon(self, api_client):
        assert api_client.get('/api/discounts/coupon/NOPE').status_code == 404

    def test_expired_coupon(self, api_client, make_discount):
        make_discount(valid_from=timezone.now() + timedelta(days=2))
        response = api_client.get('/api/discounts/coupon/HAPPY')
        assert response.status_code == 400
        assert response.json()['error'] == 'Discount is not currently valid'

    def test_increment_usage(self, api_client, make_discount):
        make_discount(usage_count=2)
        response = api_client.post('/api/discounts/D1/increment-usage')
        assert response.status_code == 200
        assert Discount.objects.get(discount_id='D1').usage_count == 3

    def test_increment_unknown(self, api_client):
        assert api_client.post('/api/discounts/NOPE/increment-usage').status_code == 404

    def test_display_text(self):
        assert Discount(discount_type='Flat', flat_rate=500).display_text == "XAF 500"
