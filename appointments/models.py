import uuid
from django.db import models
from django.db.models import Q
from django.conf import settings
from django.core.validators import RegexValidator
from django.utils import timezone

phone_validator = RegexValidator(
    regex=r'^[\d\s\-\+\(\)]+$',
    message="Invalid phone number format",
)


class Appointment(models.Model):
    """
    A client's booking of a single time slot.
    Core model for the booking system; the id doubles as the client's booking reference.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'

    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (CONFIRMED, 'Confirmed'),
        (CANCELLED, 'Cancelled'),
        (COMPLETED, 'Completed'),
    ]

    # Statuses that hold the slot
    ACTIVE_STATUSES = (PENDING, CONFIRMED)
    TERMINAL_STATUSES = (CANCELLED, COMPLETED)

    ALLOWED_TRANSITIONS = {
        PENDING: {CONFIRMED, CANCELLED, COMPLETED},
        CONFIRMED: {CANCELLED, COMPLETED},
        CANCELLED: set(),
        COMPLETED: set(),
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    time_slot = models.ForeignKey(
        'time_slots.TimeSlot',
        on_delete=models.CASCADE,
        related_name='appointments'
    )
    client_name = models.CharField(max_length=100)
    client_email = models.EmailField(max_length=100)
    client_phone = models.CharField(max_length=20, validators=[phone_validator])
    service_type = models.CharField(max_length=100)
    notes = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING)
    booked_at = models.DateTimeField(default=timezone.now, editable=False)
    confirmed_at = models.DateTimeField(blank=True, null=True)
    cancelled_at = models.DateTimeField(blank=True, null=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'appointments'
        ordering = ['-booked_at']
        # Prevent double booking - one non-cancelled appointment per slot
        constraints = [
            models.UniqueConstraint(
                fields=['time_slot'],
                condition=~Q(status='cancelled'),
                name='unique_active_appointment_per_slot',
            ),
        ]
        indexes = [
            models.Index(fields=['status'], name='appointments_status_idx'),
            models.Index(fields=['client_email'], name='appointments_email_idx'),
            models.Index(fields=['booked_at'], name='appointments_booked_at_idx'),
        ]

    def __str__(self):
        return f"{self.client_name} - {self.time_slot} ({self.get_status_display()})"

    @property
    def is_active(self):
        return self.status in self.ACTIVE_STATUSES

    @property
    def can_be_cancelled(self):
        """Check if appointment can be cancelled (still active and its slot has not started)"""
        return self.is_active and not self.time_slot.is_past

    def can_transition_to(self, new_status):
        return new_status in self.ALLOWED_TRANSITIONS.get(self.status, set())


class AppointmentStatusHistory(models.Model):
    """
    Track appointment status changes for audit purposes
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    appointment = models.ForeignKey(Appointment, on_delete=models.CASCADE, related_name='status_history')
    # Null for the very first status entry of an appointment.
    previous_status = models.CharField(max_length=20, choices=Appointment.STATUS_CHOICES, null=True, blank=True)
    new_status = models.CharField(max_length=20, choices=Appointment.STATUS_CHOICES)
    changed_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    reason = models.TextField(blank=True, null=True)
    changed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'appointment_status_history'
        ordering = ['-changed_at']
        verbose_name_plural = 'Appointment status history'

    def __str__(self):
        return f"Appointment {self.appointment_id}: {self.previous_status or 'Initial'} -> {self.new_status} by {self.changed_by or 'System'}"
