import logging

from django.db import models
from django.db.models import Q
from django.utils import timezone

from core.formatting import format_currency, time_ago
from . import cart

logger = logging.getLogger(__name__)

WAITING_STATUS_CHOICES = (
    ("Pending", "Pending"),
    ("Ready", "Ready"),
    ("Completed", "Completed"),
    ("Cancelled", "Cancelled"),
)


def readable_orders(orders):
    """Orders whose cart parses; a row with a broken CartItems column is logged and skipped"""
    readable = []
    for order in orders:
        try:
            order.items
        except ValueError as exc:
            logger.warning(f"Skipping waiting transaction {order.transaction_id}: {exc}")
            continue
        readable.append(order)
    return readable


class WaitingTransactionQuerySet(models.QuerySet):

    def pending(self):
        # the desktop leaves Status empty on orders it has not touched yet
        return self.filter(Q(status__iexact="Pending") | Q(status__isnull=True))


class WaitingTransaction(models.Model):
    """An open order parked by a waiter until the cashier settles it"""
    transaction_id = models.CharField(primary_key=True, max_length=50, db_column='TransactionId')
    cart_items = models.TextField(default='[]', db_column='CartItems')
    customer_id = models.CharField(max_length=50, null=True, blank=True, db_column='CustomerId')
    table_id = models.CharField(max_length=50, null=True, blank=True, db_column='TableId')
    table_number = models.IntegerField(null=True, blank=True, db_column='TableNumber')
    table_name = models.CharField(max_length=100, null=True, blank=True, db_column='TableName')
    staff_id = models.IntegerField(null=True, blank=True, db_column='StaffId')
    status = models.CharField(
        max_length=20, choices=WAITING_STATUS_CHOICES, default="Pending", null=True, blank=True, db_column='Status',
    )
    notes = models.TextField(null=True, blank=True, db_column='Notes')
    is_refired = models.BooleanField(default=False, db_column='IsRefired')
    refire_reason = models.CharField(max_length=200, null=True, blank=True, db_column='RefireReason')
    refired_at = models.DateTimeField(null=True, blank=True, db_column='RefiredAt')
    refired_by_staff_id = models.IntegerField(null=True, blank=True, db_column='RefiredByStaffId')
    refired_by_staff_name = models.CharField(max_length=200, null=True, blank=True, db_column='RefiredByStaffName')
    created_date = models.DateTimeField(null=True, blank=True, db_column='CreatedDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='ModifiedDate')

    objects = WaitingTransactionQuerySet.as_manager()

    @classmethod
    def next_transaction_id(cls, prefix='M', moment=None):
        """'M' + yyyyMMddHHmmss, with -2, -3... appended when the second is taken"""
        base = f"{prefix}{(moment or timezone.now()).strftime('%Y%m%d%H%M%S')}"
        candidate, suffix = base, 1
        while cls.objects.filter(transaction_id=candidate).exists():
            suffix += 1
            candidate = f"{base}-{suffix}"
        return candidate

    @property
    def items(self):
        if not hasattr(self, '_items'):
            self._items = cart.parse_cart(self.cart_items)
        return self._items

    def set_items(self, items):
        self._items = items
        self.cart_items = cart.dump_cart(items)

    @property
    def is_pending(self):
        return (self.status or "Pending").lower() == "pending"

    @property
    def total_items(self):
        return cart.total_quantity(self.items)

    @property
    def total_amount(self):
        return cart.order_total(self.items)

    @property
    def formatted_total(self):
        return format_currency(self.total_amount)

    @property
    def table_display(self):
        if self.table_name:
            return self.table_name
        if self.table_number is not None:
            return f"Table {self.table_number}"
        return "Takeaway"

    @property
    def time_ago(self):
        return time_ago(self.created_date)

    def touch(self):
        self.modified_date = timezone.now()

    def __str__(self):
        return self.transaction_id

    class Meta:
        managed = False
        db_table = 'WaitingTransactions'
        ordering = ['-created_date']
