from rest_framework import serializers

from .models import Table, Seat, TABLE_STATUS_CHOICES, SEAT_STATUS_CHOICES


class TableSerializer(serializers.ModelSerializer):
    display_name = serializers.ReadOnlyField()
    is_available = serializers.ReadOnlyField()
    is_occupied = serializers.ReadOnlyField()
    is_reserved = serializers.ReadOnlyField()
    is_not_available = serializers.ReadOnlyField()

    class Meta:
        model = Table
        fields = [
            'table_id', 'table_name', 'table_number', 'display_name', 'capacity', 'status',
            'current_customer_id', 'current_transaction_id', 'description', 'size', 'shape',
            'reservation_date', 'is_active', 'created_date', 'modified_date',
            'is_available', 'is_occupied', 'is_reserved', 'is_not_available',
        ]


class SeatSerializer(serializers.ModelSerializer):
    table_id = serializers.CharField(read_only=True)
    display_name = serializers.ReadOnlyField()

    class Meta:
        model = Seat
        fields = [
            'seat_id', 'table_id', 'seat_number', 'display_name', 'status', 'customer_id',
            'is_active', 'created_date', 'modified_date',
        ]


class SeatStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SEAT_STATUS_CHOICES)
    customer_id = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        if attrs['status'] in ('Occupied', 'Reserved') and not attrs.get('customer_id'):
            raise serializers.ValidationError({
                'customer_id': f"Customer ID is required when status is {attrs['status']}"
            })
        return attrs


class TableStatusUpdateSerializer(SeatStatusUpdateSerializer):
    status = serializers.ChoiceField(choices=TABLE_STATUS_CHOICES)
    transaction_id = serializers.CharField(max_length=50, required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        attrs = super().validate(attrs)
        if attrs['status'] == 'Occupied' and not attrs.get('transaction_id'):
            raise serializers.ValidationError({
                'transaction_id': "Transaction ID is required when status is Occupied"
            })
        return attrs
