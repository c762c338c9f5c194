from rest_framework import serializers

from .models import Appointment, AppointmentStatusHistory
from .services import AppointmentService
from time_slots.serializers import TimeSlotSerializer


class AppointmentStatusHistorySerializer(serializers.ModelSerializer):
    changed_by_username = serializers.CharField(source='changed_by.username', read_only=True, allow_null=True)

    class Meta:
        model = AppointmentStatusHistory
        fields = ['id', 'previous_status', 'new_status', 'reason', 'changed_by_username', 'changed_at']


class AppointmentSerializer(serializers.ModelSerializer):
    time_slot = TimeSlotSerializer(read_only=True)
    time_slot_id = serializers.UUIDField(write_only=True)
    status_history = AppointmentStatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Appointment
        fields = [
            'id', 'time_slot', 'time_slot_id', 'client_name', 'client_email', 'client_phone',
            'service_type', 'notes', 'status', 'booked_at', 'confirmed_at', 'cancelled_at',
            'updated_at', 'status_history'
        ]
        read_only_fields = [
            'id', 'status', 'booked_at', 'confirmed_at', 'cancelled_at', 'updated_at', 'status_history'
        ]
        extra_kwargs = {
            'notes': {'required': False, 'allow_blank': True},
        }

    def create(self, validated_data):
        # Availability and double-booking checks happen under the slot lock in the service
        request = self.context.get('request')
        changed_by = request.user if request and request.user.is_authenticated else None
        return AppointmentService.book_appointment(
            time_slot_id=validated_data['time_slot_id'],
            client_name=validated_data['client_name'],
            client_email=validated_data['client_email'],
            client_phone=validated_data['client_phone'],
            service_type=validated_data['service_type'],
            notes=validated_data.get('notes', ''),
            changed_by=changed_by,
        )


class AppointmentStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Appointment.STATUS_CHOICES)
    reason = serializers.CharField(write_only=True, required=False, allow_blank=True)

    def to_internal_value(self, data):
        # Status names are accepted in any case
        if isinstance(data, dict) and isinstance(data.get('status'), str):
            data = data.copy()
            data['status'] = data['status'].strip().lower()
        return super().to_internal_value(data)


class AppointmentCancelSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True)
