"""Serializers for request input and for rendering domain models."""

from rest_framework import serializers


def _text(**kwargs) -> serializers.CharField:
    # Blankness is a domain rule; the service trims and rejects empty values.
    return serializers.CharField(allow_blank=True, trim_whitespace=False, **kwargs)


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model. Never exposes pin_hash."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    is_active = serializers.BooleanField()
    created_at = serializers.DateTimeField()


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = serializers.UUIDField(source="id.value")
    event_id = serializers.UUIDField(source="event_id.value")
    number = serializers.IntegerField()
    name = serializers.CharField()
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()


class WaitEstimateSerializer(serializers.Serializer):
    total_minutes = serializers.IntegerField()
    hours = serializers.IntegerField()
    minutes = serializers.IntegerField()
    is_next = serializers.BooleanField()
    label = serializers.CharField()


class QueuePositionSerializer(serializers.Serializer):
    """Serializer for a ticket's place in line."""

    ticket = TicketSerializer()
    ahead = serializers.IntegerField()
    eta = WaitEstimateSerializer(source="estimate")


class DashboardSerializer(serializers.Serializer):
    """Serializer for the admin queue dashboard."""

    event = EventSerializer()
    waiting_count = serializers.IntegerField()
    total_count = serializers.IntegerField()
    next_number = serializers.IntegerField(allow_null=True)
    now_serving = TicketSerializer(many=True)
    avg_minutes_per_ticket = serializers.IntegerField()


class CreateEventSerializer(serializers.Serializer):
    name = _text(default="")
    pin = _text(default="")


class VerifyPinSerializer(serializers.Serializer):
    pin = _text(default="")


class CreateTicketSerializer(serializers.Serializer):
    name = _text(default="")
    event_id = _text(default="")


class PatchTicketSerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    name = _text(required=False)
