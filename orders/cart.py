"""
Cart lines stored in ``WaitingTransactions.CartItems``.

The desktop application writes the cart as a JSON array with PascalCase keys.
The API works with snake_case dicts holding ``Decimal`` money values; the
functions below convert between the two and compute line totals. Keys this
module does not know about are carried in ``item['extra']`` and written back
untouched.
"""
import json
from decimal import Decimal

from django.utils import timezone

from core.formatting import round_money, to_decimal

ITEM_KEYS = {
    'ProductId': 'product_id',
    'Name': 'name',
    'Quantity': 'quantity',
    'Price': 'price',
    'Discount': 'discount',
    'TaxId': 'tax_id',
    'Taxable': 'taxable',
    'TaxAmount': 'tax_amount',
    'StaffId': 'staff_id',
    'IsCompleted': 'is_completed',
    'CreatedDate': 'created_date',
    'AppliedModifiers': 'applied_modifiers',
    'ModifierSelectionId': 'modifier_selection_id',
    'UnitType': 'unit_type',
    'UnitsPerPackage': 'units_per_package',
    'IsBundle': 'is_bundle',
    'IsRecipe': 'is_recipe',
    'Total': 'total',
}

MODIFIER_KEYS = {
    'ModifierId': 'modifier_id',
    'ModifierName': 'modifier_name',
    'PriceChange': 'price_change',
    'RecipeId': 'recipe_id',
}

# Computed by the desktop models on serialization; recomputed here instead.
DERIVED_KEYS = {'SubTotal', 'BaseUnitQuantity', 'ModifiersJson', 'HasModifiers'}

MONEY_FIELDS = ('price', 'discount', 'tax_amount', 'total')


def normalize_modifier(data):
    return {
        'modifier_id': str(data.get('modifier_id') or ''),
        'modifier_name': str(data.get('modifier_name') or ''),
        'price_change': to_decimal(data.get('price_change')),
        'recipe_id': data.get('recipe_id'),
    }


def normalize_item(data):
    """Fill defaults and coerce types for a snake_case cart line"""
    item = {
        'product_id': str(data.get('product_id') or ''),
        'name': str(data.get('name') or ''),
        'quantity': int(data.get('quantity') or 0),
        'price': to_decimal(data.get('price')),
        'discount': to_decimal(data.get('discount')),
        'tax_id': data.get('tax_id') or None,
        'taxable': True if data.get('taxable') is None else bool(data.get('taxable')),
        'tax_amount': to_decimal(data.get('tax_amount')),
        'staff_id': data.get('staff_id'),
        'is_completed': bool(data.get('is_completed', False)),
        'created_date': data.get('created_date') or timezone.now().isoformat(),
        'applied_modifiers': [normalize_modifier(mod) for mod in (data.get('applied_modifiers') or [])],
        'modifier_selection_id': data.get('modifier_selection_id'),
        'unit_type': data.get('unit_type') or 'Base',
        'units_per_package': to_decimal(data.get('units_per_package') or 1),
        'is_bundle': bool(data.get('is_bundle', False)),
        'is_recipe': bool(data.get('is_recipe', False)),
        'total': to_decimal(data.get('total')),
        'extra': dict(data.get('extra') or {}),
    }
    return item


def modifier_total(item):
    return sum((mod['price_change'] for mod in item.get('applied_modifiers') or []), Decimal('0'))


def line_subtotal(item):
    """(price + modifier deltas) x quantity - discount"""
    amount = (item['price'] + modifier_total(item)) * item['quantity'] - item['discount']
    return round_money(amount)


def order_total(items):
    return sum((line_subtotal(item) for item in items), Decimal('0'))


def total_quantity(items):
    return sum(item['quantity'] for item in items)


def modifier_signature(item):
    """Ordered, hashable view of the applied modifiers"""
    return tuple(
        (mod['modifier_id'], mod['modifier_name'], mod['price_change'], mod['recipe_id'])
        for mod in item.get('applied_modifiers') or []
    )


# =============== STORAGE FORMAT ===============

def _from_pascal(raw, mapping):
    data, extra = {}, {}
    for key, value in raw.items():
        if key in mapping:
            data[mapping[key]] = value
        elif key not in DERIVED_KEYS:
            extra[key] = value
    return data, extra


def _plain(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def parse_cart(raw_json):
    """CartItems column -> list of normalized snake_case lines"""
    if not raw_json:
        return []
    try:
        rows = json.loads(raw_json, parse_float=Decimal)
    except ValueError:
        raise ValueError("Cart items are not valid JSON")
    if not isinstance(rows, list):
        raise ValueError("Cart items must be a JSON array")

    items = []
    for row in rows:
        if not isinstance(row, dict):
            raise ValueError("Each cart item must be a JSON object")
        try:
            data, extra = _from_pascal(row, ITEM_KEYS)
            data['applied_modifiers'] = [
                _from_pascal(mod, MODIFIER_KEYS)[0] for mod in (data.get('applied_modifiers') or [])
            ]
            data['extra'] = extra
            items.append(normalize_item(data))
        except (AttributeError, TypeError, ArithmeticError) as exc:
            raise ValueError(f"Cart item is malformed: {exc}") from exc
    return items


def dump_cart(items):
    """List of snake_case lines -> CartItems column"""
    item_keys = {snake: pascal for pascal, snake in ITEM_KEYS.items()}
    modifier_keys = {snake: pascal for pascal, snake in MODIFIER_KEYS.items()}

    rows = []
    for item in items:
        row = dict(item.get('extra') or {})
        for snake, pascal in item_keys.items():
            value = item.get(snake)
            if snake == 'applied_modifiers':
                value = [
                    {modifier_keys[key]: _plain(mod_value) for key, mod_value in mod.items() if key in modifier_keys}
                    for mod in value or []
                ]
            row[pascal] = _plain(value)
        rows.append(row)
    return json.dumps(rows)


def api_item(item):
    """Cart line as returned by the API, with its subtotal"""
    data = {key: value for key, value in item.items() if key != 'extra'}
    data['subtotal'] = line_subtotal(item)
    return data
