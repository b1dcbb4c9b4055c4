from decimal import Decimal

import pytest

from taxes.calculator import calculate_item_tax, calculate_order_totals, tax_breakdown
from taxes.models import Tax


def vat(**kwargs):
    defaults = {'tax_id': 'TAX1', 'tax_name': 'VAT', 'tax_type': 'Percentage', 'percentage': Decimal('19.25')}
    defaults.update(kwargs)
    return Tax(**defaults)


class TestTaxCompute:

    def test_percentage_on_eleven_thousand(self):
        assert vat().compute(Decimal('11000')) == Decimal('2117.50')

    def test_rounds_half_up(self):
        assert vat().compute(Decimal('13')) == Decimal('2.50')
        assert vat(percentage=Decimal('10')).compute(Decimal('0.05')) == Decimal('0.01')

    def test_flat_rate_is_per_unit(self):
        tax = vat(tax_type='Flat Rate', flat_rate=Decimal('500'))
        assert tax.compute(Decimal('11000'), quantity=3) == Decimal('1500.00')

    @pytest.mark.parametrize('tax_type', ['flat rate', 'FlatRate', 'FLAT'])
    def test_flat_rate_type_is_case_insensitive(self, tax_type):
        assert vat(tax_type=tax_type).is_flat_rate

    def test_percentage_cap(self):
        tax = vat(percentage_cap=Decimal('1000'))
        assert tax.compute(Decimal('11000')) == Decimal('1000.00')

    def test_zero_cap_means_uncapped(self):
        tax = vat(percentage_cap=Decimal('0'))
        assert tax.compute(Decimal('11000')) == Decimal('2117.50')

    def test_nothing_owed_on_zero_amount(self):
        assert vat().compute(Decimal('0')) == Decimal('0.00')

    def test_display_text(self):
        assert vat().display_text == "19.25%"
        assert vat(tax_type='Flat', flat_rate=Decimal('500')).display_text == "XAF 500"


class TestOrderTotals:

    def test_modifiers_count_per_unit(self, line):
        item = line(
            price='5000', quantity=2, tax_id='TAX1',
            applied_modifiers=[{'modifier_id': 'M1', 'modifier_name': 'Extra cheese', 'price_change': '500'}],
        )
        totals = calculate_order_totals([item], {'TAX1': vat()})

        assert totals['sub_total'] == Decimal('11000.00')
        assert totals['total_tax'] == Decimal('2117.50')
        assert totals['grand_total'] == Decimal('13117.50')

    def test_untaxable_and_unknown_taxes_are_skipped(self, line):
        items = [
            line(price='1000', tax_id='TAX1', taxable=False),
            line(price='1000', tax_id='MISSING'),
            line(price='1000'),
        ]
        totals = calculate_order_totals(items, {'TAX1': vat()})
        assert totals['total_tax'] == Decimal('0.00')
        assert totals['grand_total'] == Decimal('3000.00')

    def test_inactive_tax_is_skipped(self, line):
        item = line(price='1000', tax_id='TAX1')
        assert calculate_item_tax(item, {'TAX1': vat(is_active=False)}) == Decimal('0.00')

    def test_order_discount_comes_off_grand_total(self, line):
        totals = calculate_order_totals([line(price='11000', tax_id='TAX1')], {'TAX1': vat()}, discount=Decimal('117.50'))
        assert totals['grand_total'] == Decimal('13000.00')

    def test_breakdown_groups_by_tax_sorted_by_name(self, line):
        taxes = {
            'TAX1': vat(),
            'TAX2': vat(tax_id='TAX2', tax_name='City levy', tax_type='Flat Rate', flat_rate=Decimal('100')),
        }
        items = [
            line(price='1000', quantity=2, tax_id='TAX1'),
            line(product_id='P2', price='500', tax_id='TAX1'),
            line(product_id='P3', price='300', quantity=3, tax_id='TAX2'),
        ]
        breakdown = tax_breakdown(items, taxes)

        assert [entry['tax_name'] for entry in breakdown] == ['City levy', 'VAT']
        levy, vat_entry = breakdown
        assert levy['tax_amount'] == Decimal('300.00')
        assert vat_entry['taxable_amount'] == Decimal('2500.00')
        assert vat_entry['tax_amount'] == Decimal('481.25')
        assert vat_entry['formatted_display'] == "VAT (19.25%): XAF 481"


@pytest.mark.django_db
class TestTaxEndpoints:

    def test_calculate(self, api_client, make_tax):
        make_tax()
        response = api_client.post('/api/taxes/calculate', {
            'items': [{'product_id': 'P1', 'name': 'Poulet DG', 'quantity': 1, 'price': 11000, 'tax_id': 'TAX1'}],
        }, format='json')

        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert body['data']['total_tax'] == 2117.5
        assert body['data']['grand_total'] == 13117.5

    def test_calculate_accepts_bare_list(self, api_client, make_tax):
        make_tax()
        response = api_client.post('/api/taxes/calculate', [
            {'quantity': 2, 'price': 1000, 'tax_id': 'TAX1'},
        ], format='json')
        assert response.status_code == 200
        assert response.json()['data']['sub_total'] == 2000

    def test_calculate_rejects_empty_items(self, api_client):
        response = api_client.post('/api/taxes/calculate', {'items': []}, format='json')
        assert response.status_code == 400
        body = response.json()
        assert body['error'] == 'Items list cannot be empty'
        assert 'timestamp' in body

    def test_unknown_tax_is_404(self, api_client):
        response = api_client.get('/api/taxes/NOPE')
        assert response.status_code == 404
        assert response.json()['error'] == 'Tax not found'

    def test_list_only_active(self, api_client, make_tax):
        make_tax()
        make_tax(tax_id='OLD', tax_name='Old levy', is_active=False)
        response = api_client.get('/api/taxes')
        assert [tax['tax_id'] for tax in response.json()['data']] == ['TAX1']
