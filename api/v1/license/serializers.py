"""
Serializers for the client License API endpoints.
"""

from rest_framework import serializers


class ActivateRequestSerializer(serializers.Serializer):
    """Serializer for activate request."""

    license_key = serializers.CharField(required=True, max_length=64)
    device_id = serializers.CharField(required=True, max_length=255)
    device_name = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, max_length=255
    )


class DeactivateRequestSerializer(serializers.Serializer):
    """Serializer for deactivate request."""

    license_key = serializers.CharField(required=True, max_length=64)
    device_id = serializers.CharField(required=True, max_length=255)


class ValidateRequestSerializer(serializers.Serializer):
    """Serializer for validate request."""

    license_key = serializers.CharField(required=True, max_length=64)
    device_id = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, max_length=255
    )


class FeatureLimitsSerializer(serializers.Serializer):
    """Serializer for tier feature limits."""

    max_session_types = serializers.IntegerField(allow_null=True)
    max_goals = serializers.IntegerField(allow_null=True)
    analytics_days = serializers.IntegerField(allow_null=True)
    has_invoices = serializers.BooleanField()
    has_ai_advisor = serializers.BooleanField()
    has_voice_input = serializers.BooleanField()
    has_simulator = serializers.BooleanField()
    has_pdf_export = serializers.BooleanField()
    advisor_daily_quota = serializers.IntegerField()


class SlotUsageSerializer(serializers.Serializer):
    """Serializer for activation slot usage."""

    count = serializers.IntegerField()
    max = serializers.IntegerField()


class DeviceSlotSerializer(SlotUsageSerializer):
    """Serializer for slot usage seen from one device."""

    is_activated = serializers.BooleanField()
    can_activate = serializers.BooleanField()


class ActivateResponseSerializer(serializers.Serializer):
    """Serializer for activate response."""

    success = serializers.BooleanField()
    tier = serializers.CharField()
    limits = FeatureLimitsSerializer()
    activation = SlotUsageSerializer()


class DeactivateResponseSerializer(serializers.Serializer):
    """Serializer for deactivate response."""

    success = serializers.BooleanField()
    message = serializers.CharField()
    activation = SlotUsageSerializer()


class ValidateResponseSerializer(serializers.Serializer):
    """Serializer for validate response."""

    valid = serializers.BooleanField()
    tier = serializers.CharField(required=False)
    status = serializers.CharField(required=False)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
    limits = FeatureLimitsSerializer()
    activation = DeviceSlotSerializer(required=False)
    error = serializers.CharField(required=False)
