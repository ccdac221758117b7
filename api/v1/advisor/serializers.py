"""
Serializers for Advisor API endpoints.
"""

from rest_framework import serializers

from advisor.domain.prompt import AdvisorContext


class ChatRequestSerializer(serializers.Serializer):
    """Serializer for advisor chat request."""

    license_key = serializers.CharField(required=True, max_length=64)
    device_id = serializers.CharField(required=True, max_length=255)
    question = serializers.CharField(required=True, max_length=4000)
    context = serializers.DictField(required=True)

    def validate_context(self, value):
        try:
            AdvisorContext.from_dict(value)
        except (TypeError, ValueError) as e:
            raise serializers.ValidationError(f"Invalid context: {e}")
        return value


class UsageSerializer(serializers.Serializer):
    """Serializer for remaining advisor quota."""

    remaining = serializers.IntegerField()
    limit = serializers.IntegerField()
    reset_at = serializers.DateTimeField()


class ChatResponseSerializer(serializers.Serializer):
    """Serializer for advisor chat response."""

    response = serializers.CharField()
    usage = UsageSerializer()
