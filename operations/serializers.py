from rest_framework import serializers

from .models import PrintBillRequest, PayEntireBillRequest

TRANSACTION_ID_ERRORS = {
    'required': "Transaction ID is required",
    'blank': "Transaction ID is required",
    'max_length': "Transaction ID cannot exceed 50 characters",
}

REASON_ERRORS = {
    'required': "Reason is required",
    'blank': "Reason is required",
    'max_length': "Reason cannot exceed 200 characters",
}


def staff_id_field(label='Staff ID', **kwargs):
    return serializers.IntegerField(min_value=1, error_messages={
        'required': f"{label} is required",
        'min_value': f"{label} must be greater than 0",
    }, **kwargs)


class AddNotesSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=50, error_messages=TRANSACTION_ID_ERRORS)
    note_text = serializers.CharField(max_length=500, error_messages={
        'required': "Note text is required",
        'blank': "Note text cannot be empty",
        'max_length': "Note text cannot exceed 500 characters",
    })
    added_by_staff_id = serializers.IntegerField(required=False, allow_null=True)


class TransferServerSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=50, error_messages=TRANSACTION_ID_ERRORS)
    new_staff_id = staff_id_field('New staff ID')
    reason = serializers.CharField(max_length=200, required=False, allow_null=True, allow_blank=True)


class ShiftHandoverSerializer(serializers.Serializer):
    current_staff_id = staff_id_field('Current staff ID')
    new_staff_id = staff_id_field('New staff ID')
    reason = serializers.CharField(max_length=200, required=False, allow_null=True, allow_blank=True)

    def validate(self, attrs):
        if attrs['current_staff_id'] == attrs['new_staff_id']:
            raise serializers.ValidationError({'new_staff_id': "New staff must be different from current staff"})
        return attrs


class MoveOrderSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=50, error_messages=TRANSACTION_ID_ERRORS)
    target_table_id = serializers.CharField(max_length=50, error_messages={
        'required': "Target table ID is required",
        'blank': "Target table ID is required",
    })
    reason = serializers.CharField(max_length=200, required=False, allow_null=True, allow_blank=True)


class PrintBillSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=50, error_messages=TRANSACTION_ID_ERRORS)
    staff_id = staff_id_field()
    notes = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)


class TablePrintBillSerializer(serializers.Serializer):
    table_id = serializers.CharField(max_length=50, error_messages={
        'required': "Table ID is required",
        'blank': "Table ID is required",
    })
    staff_id = staff_id_field()
    notes = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)


class CompleteRequestSerializer(serializers.Serializer):
    completed_by = serializers.CharField(max_length=200, required=False, allow_null=True, allow_blank=True)


class RefireSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=50, error_messages=TRANSACTION_ID_ERRORS)
    staff_id = staff_id_field()
    item_indices = serializers.ListField(child=serializers.IntegerField(), required=False, default=list)
    reason = serializers.CharField(max_length=200, error_messages=REASON_ERRORS)


class CombineOrdersSerializer(serializers.Serializer):
    transaction_ids = serializers.ListField(
        child=serializers.CharField(max_length=50),
        min_length=2,
        error_messages={
            'required': "Transaction IDs are required",
            'min_length': "At least 2 transactions are required to combine orders",
        },
    )
    target_table_id = serializers.CharField(max_length=50, error_messages={
        'required': "Target table ID is required",
        'blank': "Target table ID is required",
    })
    target_staff_id = staff_id_field('Target staff ID')
    notes = serializers.CharField(max_length=500, required=False, allow_null=True, allow_blank=True)


class RemoveTaxesSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=50, error_messages=TRANSACTION_ID_ERRORS)
    staff_id = staff_id_field()
    reason = serializers.CharField(max_length=200, error_messages=REASON_ERRORS)


class PrintBillRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = PrintBillRequest
        fields = [
            'request_id', 'transaction_id', 'staff_id', 'staff_name', 'table_id', 'table_name',
            'requested_at', 'status', 'notes', 'completed_at', 'completed_by',
        ]


class PayEntireBillRequestSerializer(serializers.ModelSerializer):
    class Meta:
        model = PayEntireBillRequest
        fields = PrintBillRequestSerializer.Meta.fields
