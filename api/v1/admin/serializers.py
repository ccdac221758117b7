"""
Serializers for Admin API endpoints.
"""

from rest_framework import serializers


class LicenseListQuerySerializer(serializers.Serializer):
    """Serializer for license list query parameters."""

    q = serializers.CharField(required=False, allow_blank=True, max_length=255)
    query = serializers.CharField(required=False, allow_blank=True, max_length=255)
    limit = serializers.IntegerField(required=False, default=50, min_value=1, max_value=500)
    offset = serializers.IntegerField(required=False, default=0, min_value=0)

    def validate(self, attrs):
        attrs["search"] = (attrs.get("q") or attrs.get("query") or "").strip() or None
        return attrs


class LicenseSerializer(serializers.Serializer):
    """Serializer for a license as seen by administrators."""

    id = serializers.UUIDField()
    license_key = serializers.CharField()
    tier = serializers.CharField()
    status = serializers.CharField()
    email = serializers.CharField(allow_null=True)
    customer_id = serializers.CharField(allow_null=True)
    order_id = serializers.CharField(allow_null=True)
    subscription_id = serializers.CharField(allow_null=True)
    max_activations = serializers.IntegerField()
    expires_at = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class ActivationSerializer(serializers.Serializer):
    """Serializer for a device activation."""

    device_id = serializers.CharField()
    device_name = serializers.CharField(allow_null=True)
    activated_at = serializers.DateTimeField()


class LicenseListResponseSerializer(serializers.Serializer):
    """Serializer for license list response."""

    licenses = LicenseSerializer(many=True)
    count = serializers.IntegerField()
    limit = serializers.IntegerField()
    offset = serializers.IntegerField()


class LicenseDetailResponseSerializer(serializers.Serializer):
    """Serializer for license detail response."""

    license = LicenseSerializer()
    activations = ActivationSerializer(many=True)


class RevokeLicenseResponseSerializer(serializers.Serializer):
    """Serializer for revoke response."""

    success = serializers.BooleanField()
    message = serializers.CharField()
    license_key = serializers.CharField()
