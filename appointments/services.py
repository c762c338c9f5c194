import logging
from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from booking_api.exceptions import BookingConflict, InvalidStatusTransition
from time_slots.models import TimeSlot
from .models import Appointment, AppointmentStatusHistory

logger = logging.getLogger(__name__)

DOUBLE_BOOKING_MESSAGE = "Time slot is already booked. Cannot create duplicate appointment."


def _queue_status_email(appointment, previous_status):
    if not settings.BOOKING_EMAIL_NOTIFICATIONS:
        return
    from notifications.tasks import send_appointment_status_email_task

    appointment_id = str(appointment.id)
    new_status = appointment.status
    transaction.on_commit(
        lambda: send_appointment_status_email_task.delay(appointment_id, previous_status, new_status)
    )


class AppointmentService:

    @staticmethod
    def slot_has_booking(time_slot):
        """True while any non-cancelled appointment (completed ones included) holds the slot."""
        return time_slot.appointments.exclude(status=Appointment.CANCELLED).exists()

    @staticmethod
    def book_appointment(time_slot_id, client_name, client_email, client_phone,
                         service_type, notes='', changed_by=None):
        """
        Books a time slot for a client.

        The slot row is locked for the whole transaction, so two concurrent
        requests for one slot are serialized; the partial unique constraint on
        appointments backs the check up at the database level.
        """
        with transaction.atomic():
            time_slot = TimeSlot.objects.select_for_update().filter(pk=time_slot_id).first()
            if time_slot is None:
                raise NotFound(f"Time slot with ID {time_slot_id} not found")

            if not time_slot.is_available or time_slot.is_past:
                logger.warning("Rejected booking for unavailable time slot %s", time_slot_id)
                raise BookingConflict("Time slot is not available")

            if AppointmentService.slot_has_booking(time_slot):
                logger.warning("Rejected duplicate booking for time slot %s", time_slot_id)
                raise BookingConflict(DOUBLE_BOOKING_MESSAGE)

            try:
                with transaction.atomic():
                    appointment = Appointment.objects.create(
                        time_slot=time_slot,
                        client_name=client_name,
                        client_email=client_email,
                        client_phone=client_phone,
                        service_type=service_type,
                        notes=notes or '',
                        status=Appointment.PENDING,
                    )
            except IntegrityError:
                logger.warning("Database rejected duplicate booking for time slot %s", time_slot_id)
                raise BookingConflict(DOUBLE_BOOKING_MESSAGE)

            AppointmentStatusHistory.objects.create(
                appointment=appointment,
                new_status=appointment.status,
                changed_by=changed_by,
            )

            time_slot.is_available = False
            time_slot.save(update_fields=['is_available', 'updated_at'])

            if settings.BOOKING_EMAIL_NOTIFICATIONS:
                from notifications.tasks import send_booking_confirmation_email_task
                appointment_id = str(appointment.id)
                transaction.on_commit(lambda: send_booking_confirmation_email_task.delay(appointment_id))

        logger.info("Created appointment %s for client %s", appointment.id, client_name)
        return appointment

    @staticmethod
    def update_status(appointment, new_status, changed_by=None, reason=None):
        """
        Moves an appointment to `new_status`.
        Confirming stamps confirmed_at; cancelling stamps cancelled_at and frees the slot.
        Setting the current status again changes nothing.
        """
        with transaction.atomic():
            appointment = Appointment.objects.select_for_update().select_related('time_slot').get(pk=appointment.pk)
            original_status = appointment.status

            if new_status == original_status:
                return appointment

            if not appointment.can_transition_to(new_status):
                raise InvalidStatusTransition(
                    f"Cannot change appointment status from '{original_status}' to '{new_status}'."
                )

            now = timezone.now()
            appointment.status = new_status
            update_fields = ['status', 'updated_at']

            if new_status == Appointment.CONFIRMED:
                appointment.confirmed_at = now
                update_fields.append('confirmed_at')
            elif new_status == Appointment.CANCELLED:
                appointment.cancelled_at = now
                update_fields.append('cancelled_at')

                # Make time slot available again
                time_slot = TimeSlot.objects.select_for_update().get(pk=appointment.time_slot_id)
                time_slot.is_available = True
                time_slot.save(update_fields=['is_available', 'updated_at'])
                appointment.time_slot = time_slot

            appointment.save(update_fields=update_fields)

            AppointmentStatusHistory.objects.create(
                appointment=appointment,
                previous_status=original_status,
                new_status=new_status,
                changed_by=changed_by,
                reason=reason,
            )
            _queue_status_email(appointment, original_status)

        logger.info("Updated appointment %s from %s to %s", appointment.id, original_status, new_status)
        return appointment

    @staticmethod
    def cancel_appointment(appointment, changed_by=None, reason=None):
        with transaction.atomic():
            # Checked on the locked row; the caller's instance may be stale
            appointment = Appointment.objects.select_for_update().select_related('time_slot').get(pk=appointment.pk)
            if not appointment.can_be_cancelled:
                raise BookingConflict(
                    "This appointment cannot be cancelled (it has already started or is cancelled/completed)."
                )
            return AppointmentService.update_status(
                appointment,
                Appointment.CANCELLED,
                changed_by=changed_by,
                reason=reason or "Cancelled by client.",
            )
