from decimal import Decimal

from core.formatting import format_currency, round_money
from orders import cart


def applicable_tax(item, taxes):
    """The active tax an item pays, or None"""
    if not item.get('taxable') or not item.get('tax_id'):
        return None
    tax = taxes.get(item['tax_id'])
    if tax is None or not tax.is_active:
        return None
    return tax


def calculate_item_tax(item, taxes):
    tax = applicable_tax(item, taxes)
    if tax is None:
        return Decimal('0.00')
    return tax.compute(cart.line_subtotal(item), item['quantity'])


def calculate_order_totals(items, taxes, discount=0):
    """
    Totals for a list of normalized cart lines.

    ``taxes`` maps tax id -> Tax. ``discount`` is an order level discount
    taken off the grand total.
    """
    sub_total = round_money(sum((cart.line_subtotal(item) for item in items), Decimal('0')))
    total_tax = round_money(sum((calculate_item_tax(item, taxes) for item in items), Decimal('0')))
    discount = round_money(discount)
    return {
        'sub_total': sub_total,
        'total_tax': total_tax,
        'discount': discount,
        'grand_total': round_money(sub_total + total_tax - discount),
        'formatted_sub_total': format_currency(sub_total),
        'formatted_total_tax': format_currency(total_tax),
        'formatted_grand_total': format_currency(sub_total + total_tax - discount),
        'tax_breakdown': tax_breakdown(items, taxes),
    }


def tax_breakdown(items, taxes):
    """Tax per tax id, sorted by tax name, for receipts"""
    grouped = {}
    for item in items:
        tax = applicable_tax(item, taxes)
        if tax is None:
            continue
        entry = grouped.setdefault(tax.tax_id, {
            'tax_id': tax.tax_id,
            'tax_name': tax.tax_name,
            'tax_type': tax.tax_type,
            'rate': tax.rate,
            'taxable_amount': Decimal('0.00'),
            'tax_amount': Decimal('0.00'),
            'display_text': tax.display_text,
        })
        entry['taxable_amount'] += max(cart.line_subtotal(item), Decimal('0.00'))
        entry['tax_amount'] += tax.compute(cart.line_subtotal(item), item['quantity'])

    breakdown = sorted(grouped.values(), key=lambda entry: entry['tax_name'])
    for entry in breakdown:
        entry['formatted_display'] = (
            f"{entry['tax_name']} ({entry['display_text']}): {format_currency(entry['tax_amount'])}"
        )
    return breakdown
