from django.db import models
from django.utils import timezone


TABLE_STATUS_CHOICES = (
    ("Available", "Available"),
    ("Occupied", "Occupied"),
    ("Reserved", "Reserved"),
    ("Not Available", "Not Available"),
    ("Unpaid", "Unpaid"),
)

SEAT_STATUS_CHOICES = TABLE_STATUS_CHOICES[:4]


class Table(models.Model):
    table_id = models.CharField(primary_key=True, max_length=50, db_column='tableId')
    branch_id = models.CharField(max_length=50, null=True, blank=True, db_column='branchId')
    org_id = models.CharField(max_length=50, null=True, blank=True, db_column='orgId')
    table_name = models.CharField(max_length=100, null=True, blank=True, db_column='tableName')
    table_number = models.IntegerField(default=0, db_column='tableNumber')
    capacity = models.IntegerField(default=4, db_column='capacity')
    status = models.CharField(max_length=20, choices=TABLE_STATUS_CHOICES, default="Available", db_column='status')
    current_customer_id = models.CharField(max_length=50, null=True, blank=True, db_column='currentCustomerId')
    current_transaction_id = models.CharField(max_length=50, null=True, blank=True, db_column='currentTransactionId')
    description = models.TextField(null=True, blank=True, db_column='description')
    size = models.CharField(max_length=50, null=True, blank=True, db_column='size')
    shape = models.CharField(max_length=50, null=True, blank=True, db_column='shape')
    reservation_date = models.DateTimeField(null=True, blank=True, db_column='reservationDate')
    is_active = models.BooleanField(default=True, db_column='isActive')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')
    is_synced = models.BooleanField(default=False, db_column='isSynced')

    @property
    def display_name(self):
        return self.table_name or f"Table {self.table_number}"

    @property
    def is_available(self):
        return self.status == "Available"

    @property
    def is_occupied(self):
        return self.status == "Occupied"

    @property
    def is_reserved(self):
        return self.status == "Reserved"

    @property
    def is_not_available(self):
        return self.status == "Not Available"

    def set_status(self, status, customer_id=None, transaction_id=None):
        """Write the status and occupancy, and flag the row for the desktop sync"""
        self.status = status
        self.current_customer_id = customer_id
        self.current_transaction_id = transaction_id
        self.modified_date = timezone.now()
        self.is_synced = False
        self.save(update_fields=[
            'status', 'current_customer_id', 'current_transaction_id', 'modified_date', 'is_synced',
        ])

    def __str__(self):
        return self.display_name

    class Meta:
        managed = False
        db_table = 'Tables'
        ordering = ['table_number']


class Seat(models.Model):
    seat_id = models.CharField(primary_key=True, max_length=50, db_column='seatId')
    table = models.ForeignKey(
        Table, on_delete=models.DO_NOTHING, db_constraint=False,
        db_column='tableId', related_name='seats'
    )
    seat_number = models.IntegerField(default=1, db_column='seatNumber')
    status = models.CharField(max_length=20, choices=SEAT_STATUS_CHOICES, default="Available", db_column='status')
    customer_id = models.CharField(max_length=50, null=True, blank=True, db_column='customerId')
    is_active = models.BooleanField(default=True, db_column='isActive')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')
    is_synced = models.BooleanField(default=False, db_column='isSynced')

    @property
    def display_name(self):
        return f"Seat {self.seat_number}"

    def set_status(self, status, customer_id=None):
        self.status = status
        self.customer_id = customer_id
        self.modified_date = timezone.now()
        self.is_synced = False
        self.save(update_fields=['status', 'customer_id', 'modified_date', 'is_synced'])

    def __str__(self):
        return f"{self.table_id} / {self.display_name}"

    class Meta:
        managed = False
        db_table = 'Seats'
        ordering = ['seat_number']
