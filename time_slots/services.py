import logging
from django.db import transaction
from django.utils import timezone

from booking_api.exceptions import BookingConflict
from .models import TimeSlot

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "Time slot conflicts with existing slot for this provider"


class TimeSlotService:

    @staticmethod
    def get_available_slots(date=None, service_provider=None):
        """
        Returns upcoming slots that can still be booked, optionally narrowed to
        one calendar day (server time zone) and/or one service provider.
        """
        queryset = TimeSlot.objects.filter(is_available=True, start_time__gt=timezone.now())
        if date:
            queryset = queryset.filter(start_time__date=date)
        if service_provider:
            queryset = queryset.filter(service_provider=service_provider)
        return queryset.order_by('start_time')

    @staticmethod
    def has_conflict(start_time, end_time, service_provider, exclude_id=None):
        """
        True if another slot of the same provider overlaps [start_time, end_time).
        `exclude_id` is used to skip the slot itself when checking an update.
        """
        queryset = TimeSlot.objects.filter(
            TimeSlot.overlap_q(start_time, end_time),
            service_provider=service_provider,
        )
        if exclude_id:
            queryset = queryset.exclude(pk=exclude_id)
        return queryset.exists()

    @staticmethod
    def validate_time_slot(start_time, end_time, service_provider, exclude_id=None):
        if start_time >= end_time:
            return False
        if start_time <= timezone.now():
            return False
        return not TimeSlotService.has_conflict(start_time, end_time, service_provider, exclude_id)

    @staticmethod
    @transaction.atomic
    def create_time_slot(start_time, end_time, service_provider):
        if TimeSlotService.has_conflict(start_time, end_time, service_provider):
            raise BookingConflict(CONFLICT_MESSAGE)

        time_slot = TimeSlot.objects.create(
            start_time=start_time,
            end_time=end_time,
            service_provider=service_provider,
            is_available=True,
        )
        logger.info("Created time slot %s for %s", time_slot.id, service_provider)
        return time_slot

    @staticmethod
    @transaction.atomic
    def update_time_slot(time_slot, start_time, end_time, service_provider):
        if TimeSlotService.has_conflict(start_time, end_time, service_provider, exclude_id=time_slot.pk):
            raise BookingConflict(CONFLICT_MESSAGE)

        time_slot.start_time = start_time
        time_slot.end_time = end_time
        time_slot.service_provider = service_provider
        time_slot.save(update_fields=['start_time', 'end_time', 'service_provider', 'updated_at'])
        logger.info("Updated time slot %s", time_slot.id)
        return time_slot

    @staticmethod
    @transaction.atomic
    def delete_time_slot(time_slot):
        from appointments.models import Appointment  # Local import to avoid circular dependencies

        if Appointment.objects.filter(time_slot=time_slot).exclude(status=Appointment.CANCELLED).exists():
            raise BookingConflict("Cannot delete time slot with existing appointments")

        slot_id = time_slot.pk
        time_slot.delete()
        logger.info("Deleted time slot %s", slot_id)

    @staticmethod
    def make_slot_available(time_slot, changed_by=None):
        """
        Cancels every active appointment on the slot and opens it for booking again.
        A slot holding a completed appointment is not re-opened.
        Returns the number of appointments that were cancelled.
        """
        from appointments.models import Appointment
        from appointments.services import AppointmentService

        with transaction.atomic():
            time_slot = TimeSlot.objects.select_for_update().get(pk=time_slot.pk)
            if time_slot.appointments.filter(status=Appointment.COMPLETED).exists():
                logger.warning("Refused to re-open time slot %s with a completed appointment", time_slot.pk)
                raise BookingConflict("Cannot make a time slot with a completed appointment available")
            active_appointments = list(
                time_slot.appointments.filter(status__in=Appointment.ACTIVE_STATUSES)
            )
            for appointment in active_appointments:
                AppointmentService.update_status(
                    appointment,
                    Appointment.CANCELLED,
                    changed_by=changed_by,
                    reason="Time slot re-opened by administrator.",
                )

            time_slot.is_available = True
            time_slot.save(update_fields=['is_available', 'updated_at'])

        logger.info("Made time slot %s available again (%d appointment(s) cancelled)",
                    time_slot.id, len(active_appointments))
        return len(active_appointments)
