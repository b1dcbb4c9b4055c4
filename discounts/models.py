from django.db import models
from django.utils import timezone

from core.formatting import format_currency, format_rate


class Discount(models.Model):
    discount_id = models.CharField(primary_key=True, max_length=50, db_column='discountId')
    coupon_code = models.CharField(max_length=50, null=True, blank=True, db_column='couponCode')
    discount_name = models.CharField(max_length=100, db_column='discountName')
    discount_type = models.CharField(max_length=50, default='Percentage', db_column='discountType')
    percentage = models.DecimalField(max_digits=9, decimal_places=4, default=0, db_column='percentage')
    flat_rate = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='flatRate')
    description = models.TextField(null=True, blank=True, db_column='description')
    requires_approval = models.BooleanField(default=False, db_column='requiresApproval')
    is_active = models.BooleanField(default=True, db_column='isActive')
    valid_from = models.DateTimeField(null=True, blank=True, db_column='validFrom')
    valid_until = models.DateTimeField(null=True, blank=True, db_column='validUntil')
    usage_limit = models.IntegerField(default=0, db_column='usageLimit')
    usage_count = models.IntegerField(default=0, db_column='usageCount')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')

    @property
    def display_text(self):
        if (self.discount_type or '').lower() == 'percentage':
            return f"{format_rate(self.percentage)}%"
        return format_currency(self.flat_rate)

    def is_currently_valid(self, now=None):
        if not self.is_active:
            return False
        now = now or timezone.now()
        if self.valid_from and now < self.valid_from:
            return False
        if self.valid_until and now > self.valid_until:
            return False
        if self.usage_limit > 0 and self.usage_count >= self.usage_limit:
            return False
        return True

    def __str__(self):
        return f"{self.discount_name} ({self.display_text})"

    class Meta:
        managed = False
        db_table = 'Discounts'
        ordering = ['discount_name']
