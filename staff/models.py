from datetime import timedelta

from django.db import models
from django.utils import timezone

CODE_EXPIRY_HOURS = 24


class Staff(models.Model):
    id = models.IntegerField(primary_key=True, db_column='Id')
    first_name = models.CharField(max_length=100, db_column='FirstName')
    last_name = models.CharField(max_length=100, db_column='LastName')
    email = models.CharField(max_length=255, null=True, blank=True, db_column='Email')
    phone = models.CharField(max_length=50, null=True, blank=True, db_column='Phone')
    daily_code = models.CharField(max_length=4, null=True, blank=True, db_column='DailyCode')
    code_generated_date = models.DateTimeField(null=True, blank=True, db_column='CodeGeneratedDate')
    created_date = models.DateTimeField(null=True, blank=True, db_column='CreatedDate')
    is_active = models.BooleanField(default=True, db_column='IsActive')

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def code_expires_at(self):
        if self.code_generated_date is None:
            return None
        return self.code_generated_date + timedelta(hours=CODE_EXPIRY_HOURS)

    def is_code_expired(self, now=None):
        """A code is good for 24 hours after the desktop app generated it"""
        expires_at = self.code_expires_at
        if expires_at is None:
            return True
        return (now or timezone.now()) > expires_at

    def __str__(self):
        return self.full_name

    class Meta:
        managed = False
        db_table = 'Staff'
        ordering = ['first_name', 'last_name']
        verbose_name_plural = "Staff"
