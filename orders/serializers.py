from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from tables.models import Table
from .models import WaitingTransaction, WAITING_STATUS_CHOICES
from . import cart


class AppliedModifierSerializer(serializers.Serializer):
    modifier_id = serializers.CharField(max_length=50)
    modifier_name = serializers.CharField(max_length=255, allow_blank=True, required=False, default='')
    price_change = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, default=0)
    recipe_id = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)


class CartItemSerializer(serializers.Serializer):
    product_id = serializers.CharField(max_length=50, error_messages={
        'blank': "ProductId is required for each item",
        'required': "ProductId is required for each item",
    })
    name = serializers.CharField(max_length=200, error_messages={
        'blank': "Product name is required for each item",
        'required': "Product name is required for each item",
        'max_length': "Product name cannot exceed 200 characters",
    })
    quantity = serializers.IntegerField(min_value=1, error_messages={
        'min_value': "Quantity must be greater than 0",
    })
    price = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, error_messages={
        'min_value': "Price cannot be negative",
    })
    discount = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, default=0)
    tax_id = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    taxable = serializers.BooleanField(required=False, default=True)
    tax_amount = serializers.DecimalField(max_digits=18, decimal_places=2, required=False, default=0)
    staff_id = serializers.IntegerField(required=False, allow_null=True)
    is_completed = serializers.BooleanField(required=False, default=False)
    applied_modifiers = AppliedModifierSerializer(many=True, required=False)
    modifier_selection_id = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    unit_type = serializers.CharField(max_length=50, required=False, default='Base')
    units_per_package = serializers.DecimalField(max_digits=18, decimal_places=4, min_value=1, required=False, default=1)
    is_bundle = serializers.BooleanField(required=False, default=False)
    is_recipe = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        item = cart.normalize_item(attrs)
        if cart.line_subtotal(item) < 0:
            raise serializers.ValidationError("SubTotal cannot be negative")
        return attrs


class OrderCreateSerializer(serializers.Serializer):
    staff_id = serializers.IntegerField(min_value=1, error_messages={
        'required': "StaffId is required",
        'null': "StaffId is required",
        'min_value': "StaffId must be greater than 0",
    })
    items = CartItemSerializer(many=True, allow_empty=False, error_messages={
        'empty': "Order must contain at least one item",
        'required': "Order must contain at least one item",
    })
    customer_id = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    table_id = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)
    table_number = serializers.IntegerField(required=False, allow_null=True)
    table_name = serializers.CharField(max_length=100, required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        items = [cart.normalize_item(item) for item in attrs['items']]
        if cart.order_total(items) <= 0:
            raise serializers.ValidationError({'items': "Invalid total amount"})
        attrs['items'] = items
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        now = timezone.now()
        items = validated_data['items']
        for item in items:
            item['total'] = cart.line_subtotal(item)
            if item['staff_id'] is None:
                item['staff_id'] = validated_data['staff_id']

        table_id = validated_data.get('table_id') or None
        table_number = validated_data.get('table_number')
        table_name = validated_data.get('table_name') or None
        if table_id:
            table = Table.objects.filter(table_id=table_id).first()
            if table is not None:
                table_number = table.table_number
                table_name = table.table_name

        order = WaitingTransaction(
            transaction_id=WaitingTransaction.next_transaction_id(moment=now),
            customer_id=validated_data.get('customer_id') or None,
            table_id=table_id,
            table_number=table_number,
            table_name=table_name,
            staff_id=validated_data['staff_id'],
            status="Pending",
            created_date=now,
            modified_date=now,
        )
        order.set_items(items)
        order.save(force_insert=True)
        return order


class WaitingTransactionSerializer(serializers.ModelSerializer):
    items = serializers.SerializerMethodField()
    table_display = serializers.ReadOnlyField()
    time_ago = serializers.ReadOnlyField()
    total_items = serializers.ReadOnlyField()
    total_amount = serializers.ReadOnlyField()
    formatted_total = serializers.ReadOnlyField()

    class Meta:
        model = WaitingTransaction
        fields = [
            'transaction_id', 'customer_id', 'table_id', 'table_number', 'table_name', 'table_display',
            'staff_id', 'status', 'notes', 'is_refired', 'refire_reason', 'refired_at',
            'refired_by_staff_id', 'refired_by_staff_name', 'created_date', 'modified_date',
            'time_ago', 'items', 'total_items', 'total_amount', 'formatted_total',
        ]

    def get_items(self, obj):
        return [cart.api_item(item) for item in obj.items]


class TransactionStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=20)

    def validate_status(self, value):
        """Accept any casing, store the canonical one"""
        for canonical, _ in WAITING_STATUS_CHOICES:
            if value.strip().lower() == canonical.lower():
                return canonical
        allowed = ", ".join(choice for choice, _ in WAITING_STATUS_CHOICES)
        raise serializers.ValidationError(f"Status must be one of: {allowed}")
