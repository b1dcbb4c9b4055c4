import uuid

from django.db import models
from django.utils import timezone

REQUEST_STATUS_CHOICES = (
    ("Pending", "Pending"),
    ("Completed", "Completed"),
    ("Cancelled", "Cancelled"),
)


def generate_request_id(prefix, moment=None):
    """e.g. PBR-20260118193005-4F1A9C2E"""
    stamp = (moment or timezone.now()).strftime('%Y%m%d%H%M%S')
    return f"{prefix}-{stamp}-{uuid.uuid4().hex[:8].upper()}"


class BillRequest(models.Model):
    """A request from a mobile device that the desktop app polls for and processes"""
    id_prefix = None

    request_id = models.CharField(primary_key=True, max_length=50, db_column='requestId')
    transaction_id = models.CharField(max_length=50, db_column='transactionId')
    staff_id = models.IntegerField(db_column='staffId')
    staff_name = models.CharField(max_length=200, db_column='staffName')
    table_id = models.CharField(max_length=50, null=True, blank=True, db_column='tableId')
    table_name = models.CharField(max_length=100, null=True, blank=True, db_column='tableName')
    requested_at = models.DateTimeField(db_column='requestedAt')
    status = models.CharField(max_length=20, choices=REQUEST_STATUS_CHOICES, default="Pending", db_column='status')
    notes = models.TextField(null=True, blank=True, db_column='notes')
    completed_at = models.DateTimeField(null=True, blank=True, db_column='completedAt')
    completed_by = models.CharField(max_length=200, null=True, blank=True, db_column='completedBy')

    @classmethod
    def new_request_id(cls):
        return generate_request_id(cls.id_prefix)

    def __str__(self):
        return f"{self.request_id} ({self.status})"

    class Meta:
        abstract = True
        ordering = ['requested_at']


class PrintBillRequest(BillRequest):
    id_prefix = 'PBR'

    class Meta(BillRequest.Meta):
        managed = False
        db_table = 'PrintBillRequests'


class PayEntireBillRequest(BillRequest):
    id_prefix = 'PEBR'

    class Meta(BillRequest.Meta):
        managed = False
        db_table = 'PayEntireBillRequests'


class TaxAdjustmentAuditLog(models.Model):
    audit_id = models.CharField(primary_key=True, max_length=50, db_column='auditId')
    transaction_id = models.CharField(max_length=50, db_column='transactionId')
    staff_id = models.IntegerField(db_column='staffId')
    staff_name = models.CharField(max_length=200, db_column='staffName')
    action = models.CharField(max_length=50, db_column='action')
    apply_to = models.CharField(max_length=50, db_column='applyTo')
    original_tax_amount = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='originalTaxAmount')
    new_tax_amount = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='newTaxAmount')
    reason = models.CharField(max_length=200, db_column='reason')
    timestamp = models.DateTimeField(db_column='timestamp')

    def __str__(self):
        return f"{self.audit_id}: {self.action} on {self.transaction_id}"

    class Meta:
        managed = False
        db_table = 'TaxAdjustmentAuditLog'
        ordering = ['-timestamp']
