from rest_framework import serializers

from .models import Discount


class DiscountSerializer(serializers.ModelSerializer):
    display_text = serializers.ReadOnlyField()
    is_currently_valid = serializers.SerializerMethodField()

    class Meta:
        model = Discount
        fields = [
            'discount_id', 'coupon_code', 'discount_name', 'discount_type', 'percentage',
            'flat_rate', 'display_text', 'description', 'requires_approval', 'is_active',
            'valid_from', 'valid_until', 'usage_limit', 'usage_count', 'is_currently_valid',
            'created_date', 'modified_date',
        ]

    def get_is_currently_valid(self, obj):
        return obj.is_currently_valid()
