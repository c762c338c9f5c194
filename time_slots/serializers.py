from rest_framework import serializers
from django.utils import timezone

from .models import TimeSlot
from .services import TimeSlotService


class TimeSlotSerializer(serializers.ModelSerializer):
    duration_minutes = serializers.IntegerField(read_only=True)

    class Meta:
        model = TimeSlot
        fields = [
            'id', 'start_time', 'end_time', 'service_provider', 'is_available',
            'duration_minutes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'is_available', 'created_at', 'updated_at']

    def validate_start_time(self, value):
        if value <= timezone.now():
            raise serializers.ValidationError("Start time must be in the future.")
        return value

    def validate(self, attrs):
        start_time = attrs.get('start_time', self.instance.start_time if self.instance else None)
        end_time = attrs.get('end_time', self.instance.end_time if self.instance else None)
        if start_time and end_time and end_time <= start_time:
            raise serializers.ValidationError({"end_time": "End time must be after start time."})
        return attrs

    def create(self, validated_data):
        return TimeSlotService.create_time_slot(
            start_time=validated_data['start_time'],
            end_time=validated_data['end_time'],
            service_provider=validated_data['service_provider'],
        )

    def update(self, instance, validated_data):
        return TimeSlotService.update_time_slot(
            instance,
            start_time=validated_data.get('start_time', instance.start_time),
            end_time=validated_data.get('end_time', instance.end_time),
            service_provider=validated_data.get('service_provider', instance.service_provider),
        )


class TimeSlotValidationSerializer(serializers.Serializer):
    """Candidate slot checked by the validate endpoint; nothing is saved."""
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    service_provider = serializers.CharField(max_length=100)
    exclude_id = serializers.UUIDField(required=False, allow_null=True, help_text="Slot to ignore, when checking an edit.")


class AvailableSlotsQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)
    service_provider = serializers.CharField(required=False, max_length=100)
