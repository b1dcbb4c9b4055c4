from django.db import models


class Customer(models.Model):
    customer_id = models.CharField(primary_key=True, max_length=50, db_column='customerId')
    first_name = models.CharField(max_length=100, null=True, blank=True, db_column='firstName')
    last_name = models.CharField(max_length=100, null=True, blank=True, db_column='lastName')
    gender = models.CharField(max_length=20, null=True, blank=True, db_column='gender')
    contact_person = models.CharField(max_length=200, null=True, blank=True, db_column='contactPerson')
    email = models.CharField(max_length=255, null=True, blank=True, db_column='email')
    phone = models.CharField(max_length=50, null=True, blank=True, db_column='phone')
    date_of_birth = models.DateTimeField(null=True, blank=True, db_column='date_of_birth')
    credit_limit = models.CharField(max_length=50, null=True, blank=True, db_column='creditLimit')
    address = models.CharField(max_length=255, null=True, blank=True, db_column='address')
    city = models.CharField(max_length=100, null=True, blank=True, db_column='city')
    state = models.CharField(max_length=100, null=True, blank=True, db_column='state')
    postal_code = models.CharField(max_length=20, null=True, blank=True, db_column='postalCode')
    country = models.CharField(max_length=100, null=True, blank=True, db_column='country')
    tax_id = models.CharField(max_length=50, null=True, blank=True, db_column='taxId')
    type = models.CharField(max_length=50, null=True, blank=True, db_column='type')
    opening_balance = models.DecimalField(max_digits=18, decimal_places=2, default=0, db_column='openingBalance')
    created_date = models.DateTimeField(null=True, blank=True, db_column='createdDate')
    modified_date = models.DateTimeField(null=True, blank=True, db_column='modifiedDate')
    is_active = models.BooleanField(default=True, db_column='isActive')

    @property
    def full_name(self):
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    @property
    def status_display(self):
        return "Enabled" if self.is_active else "Disabled"

    def __str__(self):
        return self.full_name or self.customer_id

    class Meta:
        managed = False
        db_table = 'Customer'
        ordering = ['first_name', 'last_name']
