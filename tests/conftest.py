# tests/conftest.py
from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from appointments.models import Appointment, AppointmentStatusHistory
from time_slots.models import TimeSlot


def slot_start(hours_from_now: int = 24):
    """A whole-hour start time `hours_from_now` hours ahead."""
    return (timezone.now() + timedelta(hours=hours_from_now)).replace(minute=0, second=0, microsecond=0)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(django_user_model):
    return django_user_model.objects.create_user(
        username="admin", email="admin@example.com", password="admin-pass-123", is_staff=True
    )


@pytest.fixture
def regular_user(django_user_model):
    return django_user_model.objects.create_user(
        username="visitor", email="visitor@example.com", password="visitor-pass-123"
    )


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def user_client(regular_user):
    client = APIClient()
    client.force_authenticate(user=regular_user)
    return client


@pytest.fixture
def make_time_slot(db):
    """
    Factory for time slots written straight through the ORM, so tests can also
    set up past or unavailable slots.
    """
    def _create(
        start_time=None,
        hours_from_now: int = 24,
        minutes: int = 60,
        service_provider: str = "Dr. Smith",
        is_available: bool = True,
    ):
        start_time = start_time or slot_start(hours_from_now)
        return TimeSlot.objects.create(
            start_time=start_time,
            end_time=start_time + timedelta(minutes=minutes),
            service_provider=service_provider,
            is_available=is_available,
        )
    return _create


@pytest.fixture
def make_appointment(db, make_time_slot):
    def _create(
        time_slot=None,
        status: str = Appointment.PENDING,
        client_name: str = "Jane Doe",
        client_email: str = "jane@example.com",
        client_phone: str = "+1 (555) 010-2030",
        service_type: str = "Consultation",
    ):
        time_slot = time_slot or make_time_slot()
        appointment = Appointment.objects.create(
            time_slot=time_slot,
            client_name=client_name,
            client_email=client_email,
            client_phone=client_phone,
            service_type=service_type,
            status=status,
        )
        AppointmentStatusHistory.objects.create(appointment=appointment, new_status=status)
        if status != Appointment.CANCELLED:
            time_slot.is_available = False
            time_slot.save(update_fields=["is_available"])
        return appointment
    return _create


@pytest.fixture
def booking_payload():
    def _payload(time_slot, **overrides):
        payload = {
            "time_slot_id": str(time_slot.id),
            "client_name": "Jane Doe",
            "client_email": "jane@example.com",
            "client_phone": "+1 (555) 010-2030",
            "service_type": "Consultation",
            "notes": "First visit",
        }
        payload.update(overrides)
        return payload
    return _payload
