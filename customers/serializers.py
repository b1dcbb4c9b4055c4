from rest_framework import serializers

from core.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    full_name = serializers.ReadOnlyField()
    status_display = serializers.ReadOnlyField()

    class Meta:
        model = Customer
        fields = [
            'customer_id', 'first_name', 'last_name', 'full_name', 'gender', 'contact_person',
            'email', 'phone', 'date_of_birth', 'credit_limit', 'address', 'city', 'state',
            'postal_code', 'country', 'tax_id', 'type', 'opening_balance', 'created_date',
            'modified_date', 'is_active', 'status_display',
        ]


class CustomerSearchSerializer(serializers.Serializer):
    """Query string of the customer search"""
    search_term = serializers.CharField(max_length=100, required=False, allow_blank=True, default='', error_messages={
        'max_length': "Search term cannot exceed 100 characters",
    })
    page = serializers.IntegerField(min_value=1, required=False, default=1, error_messages={
        'min_value': "Page must be greater than 0",
    })
    page_size = serializers.IntegerField(
        min_value=1, max_value=MAX_PAGE_SIZE, required=False, default=DEFAULT_PAGE_SIZE,
        error_messages={
            'min_value': "PageSize must be between 1 and 100",
            'max_value': "PageSize must be between 1 and 100",
        },
    )
    include_inactive = serializers.BooleanField(required=False, default=False)
