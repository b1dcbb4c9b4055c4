from decimal import Decimal

from django.db import models

from core.formatting import format_currency, format_rate, round_money, to_decimal

FLAT_RATE_TYPES = {'flat rate', 'flatrate', 'flat'}


class Tax(models.Model):
    tax_id = models.CharField(primary_key=True, max_length=50, db_column='taxId')
    tax_name = models.CharField(max_length=100, db_column='taxName')
    tax_type = models.CharField(max_length=50, default='Percentage', db_column='taxType')
    description = models.TextField(null=True, blank=True, db_column='description')
    percentage = models.DecimalField(max_digits=9, decimal_places=4, default=0, db_column='percentage')
    flat_rate = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='flatRate')
    percentage_cap = models.DecimalField(max_digits=18, decimal_places=2, null=True, blank=True, db_column='percentageCap')
    is_active = models.BooleanField(default=True, db_column='isActive')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')

    @property
    def is_flat_rate(self):
        return (self.tax_type or '').strip().lower() in FLAT_RATE_TYPES

    @property
    def rate(self):
        return self.flat_rate if self.is_flat_rate else self.percentage

    @property
    def display_text(self):
        if self.is_flat_rate:
            return format_currency(self.flat_rate)
        return f"{format_rate(self.percentage)}%"

    def compute(self, amount, quantity=1):
        """
        Tax owed on ``amount`` (the line's taxable amount).

        Flat rates are charged per unit; percentages are capped by
        ``percentage_cap`` when one is set.
        """
        amount = to_decimal(amount)
        if amount <= 0:
            return Decimal('0.00')
        if self.is_flat_rate:
            return round_money(to_decimal(self.flat_rate) * quantity)

        tax = amount * to_decimal(self.percentage) / 100
        cap = to_decimal(self.percentage_cap)
        if cap > 0 and tax > cap:
            tax = cap
        return round_money(tax)

    def __str__(self):
        return f"{self.tax_name} ({self.display_text})"

    class Meta:
        managed = False
        db_table = 'Taxes'
        ordering = ['tax_name']
        verbose_name_plural = "Taxes"
