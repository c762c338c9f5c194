import logging
from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail

logger = logging.getLogger(__name__)


def _slot_description(appointment):
    time_slot = appointment.time_slot
    return (
        f"{time_slot.start_time.strftime('%B %d, %Y at %I:%M %p')} "
        f"with {time_slot.service_provider}"
    )


@shared_task(bind=True, max_retries=3)
def send_booking_confirmation_email_task(self, appointment_id):
    """
    Tells the client their booking was received.
    The booking reference in the email is the appointment id.
    """
    # Import here to avoid circular dependencies at module load time
    from appointments.models import Appointment

    try:
        appointment = Appointment.objects.select_related('time_slot').get(pk=appointment_id)
    except Appointment.DoesNotExist:
        logger.warning("Appointment %s not found. Booking email not sent.", appointment_id)
        return

    mail_subject = "We received your booking"
    message = (
        f"Hi {appointment.client_name},\n\n"
        f"Your appointment for '{appointment.service_type}' on {_slot_description(appointment)} "
        f"has been booked and is awaiting confirmation.\n\n"
        f"Booking reference: {appointment.id}\n\n"
        f"Thank you!"
    )

    try:
        send_mail(mail_subject, message, settings.DEFAULT_FROM_EMAIL, [appointment.client_email])
    except Exception as e:
        logger.warning("Failed to send booking email to %s: %s. Retrying...", appointment.client_email, e)
        raise self.retry(exc=e, countdown=60)
    logger.info("Sent booking email for appointment %s", appointment_id)


@shared_task(bind=True, max_retries=3)
def send_appointment_status_email_task(self, appointment_id, previous_status, new_status):
    from appointments.models import Appointment  # Local import to avoid circular dependencies

    try:
        appointment = Appointment.objects.select_related('time_slot').get(pk=appointment_id)
    except Appointment.DoesNotExist:
        logger.warning("Appointment %s not found. Status email not sent.", appointment_id)
        return

    mail_subject = f"Your appointment is now {new_status}"
    message = (
        f"Hi {appointment.client_name},\n\n"
        f"The status of your appointment on {_slot_description(appointment)} "
        f"has been changed from '{previous_status}' to '{new_status}'.\n\n"
        f"Booking reference: {appointment.id}\n\n"
        f"Thank you!"
    )

    try:
        send_mail(mail_subject, message, settings.DEFAULT_FROM_EMAIL, [appointment.client_email])
    except Exception as e:
        logger.warning("Failed to send status email to %s: %s. Retrying...", appointment.client_email, e)
        raise self.retry(exc=e, countdown=60)
    logger.info("Sent status email for appointment %s (%s -> %s)", appointment_id, previous_status, new_status)
