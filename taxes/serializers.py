from rest_framework import serializers

from orders.serializers import CartItemSerializer
from .models import Tax


class TaxSerializer(serializers.ModelSerializer):
    display_text = serializers.ReadOnlyField()
    is_flat_rate = serializers.ReadOnlyField()

    class Meta:
        model = Tax
        fields = [
            'tax_id', 'tax_name', 'tax_type', 'description', 'percentage', 'flat_rate',
            'percentage_cap', 'display_text', 'is_flat_rate', 'is_active',
            'created_date', 'modified_date',
        ]


class TaxableItemSerializer(CartItemSerializer):
    """Cart line for a quote; product identity is optional"""
    product_id = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    name = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')


class TaxCalculationSerializer(serializers.Serializer):
    items = TaxableItemSerializer(many=True, allow_empty=False, error_messages={
        'empty': "Items list cannot be empty",
        'required': "Items list cannot be empty",
    })
    discount = serializers.DecimalField(max_digits=18, decimal_places=2, min_value=0, required=False, default=0)

    def to_internal_value(self, data):
        # a bare JSON array of items is accepted too
        if isinstance(data, list):
            data = {'items': data}
        return super().to_internal_value(data)
