# tests/test_time_slot_service.py
from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from appointments.models import Appointment
from booking_api.exceptions import BookingConflict
from time_slots.models import TimeSlot
from time_slots.services import TimeSlotService


@pytest.mark.django_db
def test_overlapping_slot_for_same_provider_conflicts(make_time_slot):
    slot = make_time_slot()
    start = slot.start_time + timedelta(minutes=30)
    assert TimeSlotService.has_conflict(start, start + timedelta(hours=1), "Dr. Smith")


@pytest.mark.django_db
def test_slot_enclosing_existing_slot_conflicts(make_time_slot):
    slot = make_time_slot()
    assert TimeSlotService.has_conflict(
        slot.start_time - timedelta(hours=1), slot.end_time + timedelta(hours=1), "Dr. Smith"
    )


@pytest.mark.django_db
def test_touching_slots_do_not_conflict(make_time_slot):
    slot = make_time_slot()
    assert not TimeSlotService.has_conflict(slot.end_time, slot.end_time + timedelta(hours=1), "Dr. Smith")
    assert not TimeSlotService.has_conflict(slot.start_time - timedelta(hours=1), slot.start_time, "Dr. Smith")


@pytest.mark.django_db
def test_other_provider_never_conflicts(make_time_slot):
    slot = make_time_slot()
    assert not TimeSlotService.has_conflict(slot.start_time, slot.end_time, "Dr. Johnson")


@pytest.mark.django_db
def test_conflict_check_can_exclude_the_slot_itself(make_time_slot):
    slot = make_time_slot()
    assert TimeSlotService.has_conflict(slot.start_time, slot.end_time, "Dr. Smith")
    assert not TimeSlotService.has_conflict(slot.start_time, slot.end_time, "Dr. Smith", exclude_id=slot.pk)


@pytest.mark.django_db
def test_validate_time_slot_rules(make_time_slot):
    slot = make_time_slot(hours_from_now=48)
    start = slot.end_time + timedelta(hours=1)

    assert TimeSlotService.validate_time_slot(start, start + timedelta(hours=1), "Dr. Smith")
    assert not TimeSlotService.validate_time_slot(start, start, "Dr. Smith")
    assert not TimeSlotService.validate_time_slot(
        timezone.now() - timedelta(hours=2), timezone.now() - timedelta(hours=1), "Dr. Smith"
    )
    assert not TimeSlotService.validate_time_slot(slot.start_time, slot.end_time, "Dr. Smith")


@pytest.mark.django_db
def test_create_time_slot_rejects_overlap(make_time_slot):
    slot = make_time_slot()
    with pytest.raises(BookingConflict) as exc_info:
        TimeSlotService.create_time_slot(slot.start_time, slot.end_time, "Dr. Smith")
    assert "conflicts with existing slot" in str(exc_info.value.detail)
    assert TimeSlot.objects.count() == 1


@pytest.mark.django_db
def test_create_time_slot_is_available(make_time_slot):
    slot = make_time_slot()
    created = TimeSlotService.create_time_slot(slot.end_time, slot.end_time + timedelta(hours=1), "Dr. Smith")
    assert created.is_available


@pytest.mark.django_db
def test_update_time_slot_keeps_availability(make_appointment):
    appointment = make_appointment()
    slot = appointment.time_slot
    new_start = slot.start_time + timedelta(minutes=15)

    TimeSlotService.update_time_slot(slot, new_start, new_start + timedelta(hours=1), "Dr. Smith")
    slot.refresh_from_db()
    assert slot.start_time == new_start
    assert slot.is_available is False


@pytest.mark.django_db
def test_available_slots_skip_booked_and_past_slots(make_time_slot, make_appointment):
    open_slot = make_time_slot(hours_from_now=24)
    make_time_slot(hours_from_now=26, is_available=False)
    make_time_slot(hours_from_now=-3)
    make_appointment(time_slot=make_time_slot(hours_from_now=30))

    assert list(TimeSlotService.get_available_slots()) == [open_slot]


@pytest.mark.django_db
def test_available_slots_by_day_and_provider(make_time_slot):
    first = make_time_slot(hours_from_now=24, service_provider="Dr. Smith")
    make_time_slot(hours_from_now=24, service_provider="Dr. Johnson")
    later = make_time_slot(hours_from_now=24 * 3, service_provider="Dr. Smith")

    by_provider = TimeSlotService.get_available_slots(service_provider="Dr. Smith")
    assert list(by_provider) == [first, later]

    by_day = TimeSlotService.get_available_slots(date=timezone.localdate(later.start_time))
    assert list(by_day) == [later]


@pytest.mark.django_db
def test_delete_rejected_while_slot_is_booked(make_appointment):
    appointment = make_appointment()
    with pytest.raises(BookingConflict):
        TimeSlotService.delete_time_slot(appointment.time_slot)
    assert TimeSlot.objects.filter(pk=appointment.time_slot_id).exists()


@pytest.mark.django_db
def test_delete_removes_cancelled_appointments_with_slot(make_appointment):
    appointment = make_appointment(status=Appointment.CANCELLED)
    TimeSlotService.delete_time_slot(appointment.time_slot)
    assert not TimeSlot.objects.exists()
    assert not Appointment.objects.exists()


@pytest.mark.django_db
def test_make_slot_available_cancels_active_appointment(make_appointment, admin_user):
    appointment = make_appointment(status=Appointment.CONFIRMED)

    cancelled = TimeSlotService.make_slot_available(appointment.time_slot, changed_by=admin_user)

    assert cancelled == 1
    appointment.refresh_from_db()
    assert appointment.status == Appointment.CANCELLED
    assert appointment.cancelled_at is not None
    assert appointment.time_slot.is_available
    history = appointment.status_history.get(new_status=Appointment.CANCELLED)
    assert history.previous_status == Appointment.CONFIRMED
    assert history.changed_by == admin_user


@pytest.mark.django_db
def test_make_slot_available_without_appointments(make_time_slot):
    slot = make_time_slot(is_available=False)
    assert TimeSlotService.make_slot_available(slot) == 0
    slot.refresh_from_db()
    assert slot.is_available


@pytest.mark.django_db
def test_delete_rejected_while_slot_holds_completed_appointment(make_appointment):
    appointment = make_appointment(status=Appointment.COMPLETED)

    with pytest.raises(BookingConflict):
        TimeSlotService.delete_time_slot(appointment.time_slot)

    assert Appointment.objects.filter(pk=appointment.pk, status=Appointment.COMPLETED).exists()
    assert appointment.status_history.exists()


@pytest.mark.django_db
def test_make_slot_available_refuses_slot_with_completed_appointment(make_appointment):
    appointment = make_appointment(status=Appointment.COMPLETED)
    slot = appointment.time_slot

    with pytest.raises(BookingConflict):
        TimeSlotService.make_slot_available(slot)

    slot.refresh_from_db()
    assert slot.is_available is False
    assert slot not in TimeSlotService.get_available_slots()
    appointment.refresh_from_db()
    assert appointment.status == Appointment.COMPLETED


@pytest.mark.django_db
def test_reopened_slot_can_be_booked_again(make_appointment):
    from appointments.services import AppointmentService

    appointment = make_appointment(status=Appointment.CONFIRMED)
    slot = appointment.time_slot
    TimeSlotService.make_slot_available(slot)

    assert slot in TimeSlotService.get_available_slots()
    rebooked = AppointmentService.book_appointment(
        slot.id, "John Roe", "john@example.com", "555-0101", "Consultation"
    )
    assert rebooked.status == Appointment.PENDING
