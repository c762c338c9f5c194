# tests/test_appointments_api.py
from __future__ import annotations

import uuid

import pytest

from appointments.models import Appointment

LIST_URL = "/api/appointments/"


@pytest.mark.django_db
def test_anyone_can_book_a_slot(api_client, make_time_slot, booking_payload):
    slot = make_time_slot()

    resp = api_client.post(LIST_URL, booking_payload(slot), format="json")

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "pending"
    assert body["time_slot"]["id"] == str(slot.id)
    assert body["notes"] == "First visit"
    assert len(body["status_history"]) == 1
    slot.refresh_from_db()
    assert slot.is_available is False


@pytest.mark.django_db
def test_double_booking_is_rejected(api_client, make_time_slot, booking_payload):
    slot = make_time_slot()
    api_client.post(LIST_URL, booking_payload(slot), format="json")

    resp = api_client.post(LIST_URL, booking_payload(slot, client_name="John Roe"), format="json")

    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "BOOKING_CONFLICT"
    assert error["message"] == "Time slot is not available"
    assert Appointment.objects.count() == 1


@pytest.mark.django_db
def test_booking_unknown_slot_is_not_found(api_client, make_time_slot, booking_payload):
    slot = make_time_slot()
    payload = booking_payload(slot, time_slot_id=str(uuid.uuid4()))

    resp = api_client.post(LIST_URL, payload, format="json")

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.django_db
def test_booking_validates_client_details(api_client, make_time_slot, booking_payload):
    slot = make_time_slot()
    payload = booking_payload(slot, client_phone="call me", client_email="not-an-email")
    payload.pop("client_name")

    resp = api_client.post(LIST_URL, payload, format="json")

    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert {"client_name", "client_phone", "client_email"} <= {d["field"] for d in error["details"]}
    assert not Appointment.objects.exists()


@pytest.mark.django_db
def test_listing_appointments_requires_admin(api_client, user_client):
    assert api_client.get(LIST_URL).status_code == 401
    assert user_client.get(LIST_URL).status_code == 403


@pytest.mark.django_db
def test_admin_lists_and_filters_appointments(admin_client, make_time_slot, make_appointment):
    make_appointment(client_email="jane@example.com")
    make_appointment(
        time_slot=make_time_slot(hours_from_now=30, service_provider="Dr. Johnson"),
        client_email="john@example.com",
        status=Appointment.CONFIRMED,
    )

    resp = admin_client.get(LIST_URL)
    assert resp.status_code == 200
    assert resp.json()["count"] == 2

    resp = admin_client.get(LIST_URL, {"status": "Confirmed"})
    assert [item["client_email"] for item in resp.json()["results"]] == ["john@example.com"]

    resp = admin_client.get(LIST_URL, {"service_provider": "Dr. Smith"})
    assert [item["client_email"] for item in resp.json()["results"]] == ["jane@example.com"]


@pytest.mark.django_db
def test_list_is_paginated(admin_client, make_time_slot, make_appointment):
    for hours in range(24, 36):
        make_appointment(time_slot=make_time_slot(hours_from_now=hours))

    resp = admin_client.get(LIST_URL, {"page_size": 5})

    body = resp.json()
    assert body["count"] == 12
    assert len(body["results"]) == 5
    assert body["next"] is not None


@pytest.mark.django_db
def test_appointments_by_status(admin_client, make_time_slot, make_appointment):
    cancelled = make_appointment(status=Appointment.CANCELLED)
    make_appointment(time_slot=make_time_slot(hours_from_now=30))

    resp = admin_client.get(f"{LIST_URL}status/CANCELLED/")

    assert resp.status_code == 200
    assert [item["id"] for item in resp.json()["results"]] == [str(cancelled.id)]


@pytest.mark.django_db
def test_appointments_by_unknown_status(admin_client):
    resp = admin_client.get(f"{LIST_URL}status/lost/")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.django_db
def test_booking_reference_lookup_is_public(api_client, make_appointment):
    appointment = make_appointment()

    resp = api_client.get(f"{LIST_URL}{appointment.id}/")

    assert resp.status_code == 200
    assert resp.json()["client_name"] == "Jane Doe"


@pytest.mark.django_db
def test_unknown_booking_reference_is_not_found(api_client):
    resp = api_client.get(f"{LIST_URL}{uuid.uuid4()}/")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.django_db
def test_client_cancels_with_post(api_client, make_appointment):
    appointment = make_appointment()

    resp = api_client.post(f"{LIST_URL}{appointment.id}/cancel/", {"reason": "Feeling better"}, format="json")

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "cancelled"
    assert body["cancelled_at"] is not None
    assert body["time_slot"]["is_available"] is True
    entry = appointment.status_history.get(new_status=Appointment.CANCELLED)
    assert entry.reason == "Feeling better"
    assert entry.changed_by is None


@pytest.mark.django_db
def test_client_cancels_with_delete(api_client, make_appointment):
    appointment = make_appointment()

    resp = api_client.delete(f"{LIST_URL}{appointment.id}/")

    assert resp.status_code == 200
    appointment.refresh_from_db()
    assert appointment.status == Appointment.CANCELLED
    assert Appointment.objects.filter(pk=appointment.pk).exists()


@pytest.mark.django_db
def test_cancelling_twice_is_rejected(api_client, make_appointment):
    appointment = make_appointment(status=Appointment.CANCELLED)

    resp = api_client.post(f"{LIST_URL}{appointment.id}/cancel/", format="json")

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "BOOKING_CONFLICT"


@pytest.mark.django_db
def test_admin_confirms_appointment_case_insensitively(admin_client, admin_user, make_appointment):
    appointment = make_appointment()

    resp = admin_client.patch(
        f"{LIST_URL}{appointment.id}/status/", {"status": "Confirmed", "reason": "Checked"}, format="json"
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "confirmed"
    assert body["confirmed_at"] is not None
    entry = appointment.status_history.get(new_status=Appointment.CONFIRMED)
    assert entry.changed_by == admin_user
    assert entry.reason == "Checked"


@pytest.mark.django_db
def test_invalid_transition_is_reported(admin_client, make_appointment):
    appointment = make_appointment(status=Appointment.COMPLETED)

    resp = admin_client.patch(f"{LIST_URL}{appointment.id}/status/", {"status": "cancelled"}, format="json")

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"


@pytest.mark.django_db
def test_unknown_status_value_is_a_validation_error(admin_client, make_appointment):
    appointment = make_appointment()
    resp = admin_client.patch(f"{LIST_URL}{appointment.id}/status/", {"status": "archived"}, format="json")
    assert resp.status_code == 400
    assert resp.json()["error"]["details"][0]["field"] == "status"


@pytest.mark.django_db
def test_status_update_requires_admin(api_client, user_client, make_appointment):
    appointment = make_appointment()
    url = f"{LIST_URL}{appointment.id}/status/"

    assert api_client.patch(url, {"status": "confirmed"}, format="json").status_code == 401
    assert user_client.patch(url, {"status": "confirmed"}, format="json").status_code == 403
    appointment.refresh_from_db()
    assert appointment.status == Appointment.PENDING
