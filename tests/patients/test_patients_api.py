"""
Tests for patient intake, search and history.
"""
from datetime import date, datetime

from clinic.appointments.models import Appointment, AppointmentStatus
from clinic.followups.models import Followup, FollowupStatus


def test_register_patient(client, clinic, as_user):
    response = client.post(
        "/api/v1/patients/",
        json={"name": "Meena Iyer", "phone": "9123456780", "dob": "1985-04-12", "gender": "F"},
        headers=as_user(clinic.reception_west),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["id"] > clinic.rajesh.id
    assert data["dob"] == "1985-04-12"


def test_register_patient_requires_name(client, clinic, as_user):
    response = client.post(
        "/api/v1/patients/",
        json={"name": "", "phone": "9123456780"},
        headers=as_user(clinic.reception_west),
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "Validation error"


def test_search_by_name_or_phone(client, clinic, as_user):
    desk = as_user(clinic.reception_west)

    response = client.get("/api/v1/patients/", params={"search": "sow"}, headers=desk)
    assert [p["name"] for p in response.json()] == ["Sowmya"]

    response = client.get("/api/v1/patients/", params={"search": "87654"}, headers=desk)
    assert [p["name"] for p in response.json()] == ["Sowmya", "Rajesh Kumar"]


def test_blank_search_returns_nothing(client, clinic, as_user):
    desk = as_user(clinic.reception_west)

    assert client.get("/api/v1/patients/", headers=desk).json() == []
    assert client.get("/api/v1/patients/", params={"search": "   "}, headers=desk).json() == []


def test_history_is_newest_first(client, db, clinic, as_user):
    db.add_all([
        Followup(
            patient_id=clinic.sowmya.id,
            doctor_id=clinic.doctor.id,
            branch_id=clinic.west.id,
            scheduled_date=date(2024, 5, 20),
            status=FollowupStatus.DONE,
            created_by=clinic.reception_west.id,
        ),
        Appointment(
            patient_id=clinic.sowmya.id,
            service_id=clinic.consultation.id,
            branch_id=clinic.west.id,
            doctor_id=clinic.doctor.id,
            start_time=datetime(2024, 6, 2, 10, 0),
            end_time=datetime(2024, 6, 2, 10, 30),
            status=AppointmentStatus.COMPLETED,
        ),
        Followup(
            patient_id=clinic.sowmya.id,
            doctor_id=clinic.doctor.id,
            branch_id=clinic.west.id,
            scheduled_date=date(2024, 6, 9),
            created_by=clinic.reception_west.id,
        ),
    ])
    db.commit()

    response = client.get(f"/api/v1/patients/{clinic.sowmya.id}/history", headers=as_user(clinic.doctor))

    assert response.status_code == 200
    data = response.json()
    assert data["patient"]["name"] == "Sowmya"
    assert [(h["type"], h["event_date"], h["status"]) for h in data["history"]] == [
        ("followup", "2024-06-09", "pending"),
        ("appointment", "2024-06-02", "completed"),
        ("followup", "2024-05-20", "done"),
    ]
    assert data["history"][1]["service_name"] == "Consultation"


def test_history_of_unknown_patient(client, clinic, as_user):
    response = client.get("/api/v1/patients/999/history", headers=as_user(clinic.doctor))

    assert response.status_code == 404
