import uuid
from django.db import models
from django.db.models import F, Q
from django.utils import timezone


class TimeSlot(models.Model):
    """
    A bookable window of a service provider's time.
    A slot holds at most one active appointment; is_available is False while it does.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    service_provider = models.CharField(max_length=100)
    is_available = models.BooleanField(default=True, help_text="False while the slot is booked")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'time_slots'
        ordering = ['start_time']
        indexes = [
            models.Index(fields=['service_provider', 'start_time'], name='time_slots_provider_start_idx'),
            models.Index(fields=['is_available', 'start_time'], name='time_slots_available_start_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(end_time__gt=F('start_time')),
                name='time_slot_end_after_start',
            ),
        ]

    def __str__(self):
        return f"{self.service_provider}: {self.start_time:%Y-%m-%d %H:%M} - {self.end_time:%H:%M}"

    @property
    def duration_minutes(self):
        return int((self.end_time - self.start_time).total_seconds() // 60)

    @property
    def is_past(self):
        """Check if the slot has already started"""
        return self.start_time <= timezone.now()

    @staticmethod
    def overlap_q(start_time, end_time):
        """
        Q-condition for slots overlapping [start_time, end_time).
        Slots that only touch at an edge do not overlap.
        """
        return Q(start_time__lt=end_time) & Q(end_time__gt=start_time)

    def clean(self):
        """Validate that end_time is after start_time"""
        from django.core.exceptions import ValidationError
        if self.start_time and self.end_time and self.start_time >= self.end_time:
            raise ValidationError({"end_time": "End time must be after start time."})
