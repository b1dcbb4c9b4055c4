from rest_framework import serializers

from .models import Staff


class StaffSerializer(serializers.ModelSerializer):
    full_name = serializers.ReadOnlyField()
    code_expires_at = serializers.ReadOnlyField()

    class Meta:
        model = Staff
        fields = [
            'id', 'first_name', 'last_name', 'full_name', 'email', 'phone',
            'code_generated_date', 'code_expires_at', 'created_date', 'is_active',
        ]


class StaffCodeSerializer(StaffSerializer):
    """Includes the daily code; only for the desktop code display"""
    is_code_expired = serializers.SerializerMethodField()

    class Meta(StaffSerializer.Meta):
        fields = StaffSerializer.Meta.fields + ['daily_code', 'is_code_expired']

    def get_is_code_expired(self, obj):
        return obj.is_code_expired()


class DailyCodeSerializer(serializers.Serializer):
    daily_code = serializers.CharField(max_length=4, trim_whitespace=True)

    def validate_daily_code(self, value):
        if len(value) != 4 or not (value.isascii() and value.isdigit()):
            raise serializers.ValidationError("Daily code must be exactly 4 digits")
        return value
