from datetime import timedelta
from decimal import Decimal

import pytest
from django.apps import apps
from django.db import connection
from django.utils import timezone
from rest_framework.test import APIClient

from customers.models import Customer
from discounts.models import Discount
from inventory.models import BundleItem, Category, Product
from orders import cart
from orders.models import WaitingTransaction
from staff.models import Staff
from tables.models import Table, Seat
from taxes.models import Tax

POTTA_APPS = (
    'inventory', 'tables', 'floorplans', 'staff', 'orders', 'taxes',
    'discounts', 'operations', 'customers',
)


@pytest.fixture(scope='session')
def django_db_setup(django_db_setup, django_db_blocker):
    """
    The POS tables belong to the desktop application, so the models are
    unmanaged and migrations never create them. Build them here instead.
    """
    with django_db_blocker.unblock():
        existing = set(connection.introspection.table_names())
        with connection.schema_editor() as editor:
            for app_label in POTTA_APPS:
                for model in apps.get_app_config(app_label).get_models():
                    if model._meta.db_table not in existing:
                        editor.create_model(model)
                        existing.add(model._meta.db_table)


@pytest.fixture()
def api_client():
    return APIClient()


@pytest.fixture()
def make_staff(db):
    def factory(staff_id=1, first_name='Amina', last_name='Njoya', daily_code='1234', generated=None, **kwargs):
        return Staff.objects.create(
            id=staff_id,
            first_name=first_name,
            last_name=last_name,
            daily_code=daily_code,
            code_generated_date=generated if generated is not None else timezone.now() - timedelta(hours=1),
            is_active=kwargs.pop('is_active', True),
            **kwargs,
        )
    return factory


@pytest.fixture()
def make_table(db):
    def factory(table_id='T1', table_number=1, table_name=None, status="Available", **kwargs):
        return Table.objects.create(
            table_id=table_id,
            table_number=table_number,
            table_name=table_name or f"Table {table_number}",
            status=status,
            created_date=timezone.now(),
            **kwargs,
        )
    return factory


@pytest.fixture()
def make_seat(db):
    def factory(table, seat_id='S1', seat_number=1, status="Available", **kwargs):
        return Seat.objects.create(
            seat_id=seat_id, table=table, seat_number=seat_number, status=status, **kwargs,
        )
    return factory


@pytest.fixture()
def make_tax(db):
    def factory(tax_id='TAX1', tax_name='VAT', tax_type='Percentage', percentage=Decimal('19.25'), **kwargs):
        return Tax.objects.create(
            tax_id=tax_id, tax_name=tax_name, tax_type=tax_type, percentage=percentage, **kwargs,
        )
    return factory


@pytest.fixture()
def line():
    """A normalized cart line"""
    def factory(product_id='P1', name='Ndole', quantity=1, price='2500', **kwargs):
        data = {'product_id': product_id, 'name': name, 'quantity': quantity, 'price': Decimal(price)}
        data.update(kwargs)
        return cart.normalize_item(data)
    return factory


@pytest.fixture()
def make_order(db, line):
    def factory(transaction_id='M20260101120000', items=None, staff_id=1, table=None, **kwargs):
        order = WaitingTransaction(
            transaction_id=transaction_id,
            staff_id=staff_id,
            table_id=table.table_id if table else kwargs.pop('table_id', None),
            table_number=table.table_number if table else kwargs.pop('table_number', None),
            table_name=table.table_name if table else kwargs.pop('table_name', None),
            status=kwargs.pop('status', "Pending"),
            created_date=kwargs.pop('created_date', timezone.now()),
            modified_date=timezone.now(),
            **kwargs,
        )
        order.set_items(items if items is not None else [line(staff_id=staff_id)])
        order.save(force_insert=True)
        return order
    return factory


@pytest.fixture()
def make_product(db):
    def factory(product_id='P1', name='Ndole', sales_price=Decimal('2500'), **kwargs):
        return Product.objects.create(
            product_id=product_id, name=name, sales_price=sales_price, created_date=timezone.now(), **kwargs,
        )
    return factory


@pytest.fixture()
def make_bundle(db):
    def factory(bundle_id='B1', name='Lunch combo', sales_price=Decimal('4000'), **kwargs):
        return BundleItem.objects.create(
            bundle_id=bundle_id, name=name, sales_price=sales_price, created_date=timezone.now(), **kwargs,
        )
    return factory


@pytest.fixture()
def make_category(db):
    def factory(category_id='C1', category_name='Mains', **kwargs):
        return Category.objects.create(category_id=category_id, category_name=category_name, **kwargs)
    return factory


@pytest.fixture()
def make_discount(db):
    def factory(discount_id='D1', discount_name='Happy hour', coupon_code='HAPPY', **kwargs):
        return Discount.objects.create(
            discount_id=discount_id, discount_name=discount_name, coupon_code=coupon_code, **kwargs,
        )
    return factory


@pytest.fixture()
def make_customer(db):
    def factory(customer_id='CU1', first_name='Paul', last_name='Mbarga', **kwargs):
        return Customer.objects.create(
            customer_id=customer_id, first_name=first_name, last_name=last_name,
            created_date=kwargs.pop('created_date', timezone.now()), **kwargs,
        )
    return factory
