"""
Tests for the visit flow: check-in, consultation, completion, billing and reminders.
"""
from datetime import datetime, time

import pytest

from clinic.appointments.models import AppointmentStatus
from clinic.appointments.service import create_appointment, change_appointment_status
from clinic.exceptions import InvalidTransitionException

CONSULTATION = {
    "vitals": {"bp": "120/80", "temp": 36.8, "weight": 64.5},
    "notes": "Mild fever, review in a week",
    "prescription": [
        {"medicine": "Paracetamol 500mg", "dosage": "1 tab", "frequency": "TID", "duration": "3 days"},
    ],
}


@pytest.fixture
def appointment(db, clinic, future_day):
    return create_appointment(db, {
        "patient_id": clinic.sowmya.id,
        "service_id": clinic.consultation.id,
        "start_time": datetime.combine(future_day, time(10)),
        "branch_id": clinic.west.id,
        "doctor_id": clinic.doctor.id,
    })


def set_status(client, appointment_id, status, headers):
    return client.patch(
        f"/api/v1/appointments/{appointment_id}/status",
        json={"status": status},
        headers=headers,
    )


def test_check_in_stamps_arrival(client, clinic, as_user, appointment):
    response = set_status(client, appointment.id, "checked_in", as_user(clinic.reception_west))

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "checked_in"
    assert data["checked_in_time"] is not None


def test_full_visit_raises_invoice(client, clinic, as_user, appointment):
    desk = as_user(clinic.reception_west)
    doctor = as_user(clinic.doctor)

    assert set_status(client, appointment.id, "checked_in", desk).status_code == 200
    assert set_status(client, appointment.id, "in_consult", doctor).status_code == 200

    response = client.post(f"/api/v1/appointments/{appointment.id}/complete", json=CONSULTATION, headers=doctor)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["vitals"]["bp"] == "120/80"
    assert data["prescription"][0]["medicine"] == "Paracetamol 500mg"
    assert data["invoice_id"] is not None

    response = client.get(f"/api/v1/billing/appointments/{appointment.id}/invoice", headers=desk)
    assert response.status_code == 200
    invoice = response.json()
    assert invoice["id"] == data["invoice_id"]
    assert invoice["status"] == "pending"
    assert invoice["service_name"] == "Consultation"
    assert invoice["patient_name"] == "Sowmya"
    assert float(invoice["amount"]) == 500

    response = client.post(f"/api/v1/billing/invoices/{invoice['id']}/payment", headers=desk)
    assert response.status_code == 200
    assert response.json()["status"] == "paid"
    assert response.json()["paid_at"] is not None


def test_consult_can_start_without_check_in(client, clinic, as_user, appointment):
    response = set_status(client, appointment.id, "in_consult", as_user(clinic.doctor))

    assert response.status_code == 200
    assert response.json()["checked_in_time"] is None


@pytest.mark.parametrize("target", ["completed", "pending", "confirmed"])
def test_illegal_moves_from_confirmed(client, clinic, as_user, appointment, target):
    response = set_status(client, appointment.id, target, as_user(clinic.doctor))

    assert response.status_code == 409


def test_complete_requires_consult_in_progress(client, clinic, as_user, appointment):
    response = client.post(
        f"/api/v1/appointments/{appointment.id}/complete",
        json=CONSULTATION,
        headers=as_user(clinic.doctor),
    )

    assert response.status_code == 409
    response = client.get(
        f"/api/v1/billing/appointments/{appointment.id}/invoice",
        headers=as_user(clinic.doctor),
    )
    assert response.status_code == 404


def test_canceled_is_terminal(db, appointment):
    change_appointment_status(db, appointment.id, AppointmentStatus.CANCELED)

    with pytest.raises(InvalidTransitionException):
        change_appointment_status(db, appointment.id, AppointmentStatus.CHECKED_IN)


def test_receptionist_cannot_complete(client, clinic, as_user, appointment):
    set_status(client, appointment.id, "in_consult", as_user(clinic.doctor))

    response = client.post(
        f"/api/v1/appointments/{appointment.id}/complete",
        json=CONSULTATION,
        headers=as_user(clinic.reception_west),
    )

    assert response.status_code == 403


def test_doctor_cannot_record_payment(client, clinic, as_user, appointment):
    doctor = as_user(clinic.doctor)
    set_status(client, appointment.id, "in_consult", doctor)
    invoice_id = client.post(
        f"/api/v1/appointments/{appointment.id}/complete", json=CONSULTATION, headers=doctor
    ).json()["invoice_id"]

    response = client.post(f"/api/v1/billing/invoices/{invoice_id}/payment", headers=doctor)

    assert response.status_code == 403


def test_reminder(client, clinic, as_user, appointment):
    desk = as_user(clinic.reception_west)

    response = client.post(f"/api/v1/appointments/{appointment.id}/reminder", headers=desk)
    assert response.status_code == 200
    assert response.json()["reminder_sent"] is True

    set_status(client, appointment.id, "canceled", desk)
    response = client.post(f"/api/v1/appointments/{appointment.id}/reminder", headers=desk)
    assert response.status_code == 409


def test_unknown_appointment(client, clinic, as_user):
    response = set_status(client, 999, "checked_in", as_user(clinic.doctor))

    assert response.status_code == 404
