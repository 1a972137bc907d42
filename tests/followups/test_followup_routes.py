"""
Tests for the follow-up endpoints.
"""
from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from clinic.followups.models import Followup, FollowupStatus, Priority

DAY = date(2024, 6, 1)


@pytest.fixture
def followups(db, clinic):
    """
    Four follow-ups on DAY: three at West (one canceled), one at East.
    """
    def make(patient, branch, **fields):
        return Followup(
            patient_id=patient.id,
            doctor_id=clinic.doctor.id,
            branch_id=branch.id,
            scheduled_date=DAY,
            created_by=clinic.reception_west.id,
            **fields,
        )

    records = SimpleNamespace(
        routine=make(clinic.sowmya, clinic.west, priority=Priority.NORMAL),
        urgent=make(clinic.rajesh, clinic.west, priority=Priority.URGENT),
        canceled=make(clinic.sowmya, clinic.west, status=FollowupStatus.CANCELED),
        east=make(clinic.rajesh, clinic.east, priority=Priority.LOW, status=FollowupStatus.SNOOZED),
    )
    db.add_all([records.routine, records.urgent, records.canceled, records.east])
    db.commit()
    return records


def list_followups(client, headers, **params):
    return client.get("/api/v1/followups/", params={"date": DAY.isoformat(), **params}, headers=headers)


def test_day_list_is_prioritized_and_skips_canceled(client, clinic, as_user, followups):
    response = list_followups(client, as_user(clinic.doctor))

    assert response.status_code == 200
    assert [f["id"] for f in response.json()] == [followups.urgent.id, followups.routine.id, followups.east.id]


def test_day_list_filters(client, clinic, as_user, followups):
    doctor = as_user(clinic.doctor)

    response = list_followups(client, doctor, status="snoozed")
    assert [f["id"] for f in response.json()] == [followups.east.id]

    response = list_followups(client, doctor, search="rajesh", branch_id=clinic.west.id)
    assert [f["id"] for f in response.json()] == [followups.urgent.id]

    response = list_followups(client, doctor, status="done")
    assert response.status_code == 422


def test_receptionist_sees_own_branch_only(client, clinic, as_user, followups):
    response = list_followups(client, as_user(clinic.reception_east), branch_id=clinic.west.id)

    assert [f["id"] for f in response.json()] == [followups.east.id]


def test_create_followup(client, clinic, as_user):
    payload = {
        "patient_id": clinic.sowmya.id,
        "doctor_id": clinic.doctor.id,
        "branch_id": clinic.west.id,
        "scheduled_date": DAY.isoformat(),
        "scheduled_time": "10:30:00",
        "priority": "high",
        "recurrence": {"type": "daily", "interval": 7},
        "notes": "Weekly BP check",
    }

    response = client.post("/api/v1/followups/", json=payload, headers=as_user(clinic.reception_west))

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["priority"] == "high"
    assert data["recurrence"] == {"type": "daily", "interval": 7, "days": None}
    assert data["created_by"] == clinic.reception_west.id
    assert data["patient"]["name"] == "Sowmya"


def test_create_followup_for_unknown_patient(client, clinic, as_user):
    payload = {
        "patient_id": 999,
        "doctor_id": clinic.doctor.id,
        "branch_id": clinic.west.id,
        "scheduled_date": DAY.isoformat(),
    }

    response = client.post("/api/v1/followups/", json=payload, headers=as_user(clinic.doctor))

    assert response.status_code == 404


def test_done_schedules_next_occurrence(client, db, clinic, as_user):
    followup = Followup(
        patient_id=clinic.sowmya.id,
        doctor_id=clinic.doctor.id,
        branch_id=clinic.west.id,
        scheduled_date=DAY,
        recurrence={"type": "daily", "interval": 7},
        created_by=clinic.reception_west.id,
    )
    db.add(followup)
    db.commit()

    response = client.post(f"/api/v1/followups/{followup.id}/done", headers=as_user(clinic.doctor))
    assert response.status_code == 200
    assert response.json()["status"] == "done"

    response = client.get(
        "/api/v1/followups/",
        params={"date": (DAY + timedelta(days=7)).isoformat()},
        headers=as_user(clinic.doctor),
    )
    [created] = response.json()
    assert created["status"] == "pending"
    assert created["created_by"] == clinic.doctor.id

    response = client.post(f"/api/v1/followups/{followup.id}/done", headers=as_user(clinic.doctor))
    assert response.status_code == 409


def test_weekly_done_is_rejected(client, db, clinic, as_user):
    followup = Followup(
        patient_id=clinic.sowmya.id,
        doctor_id=clinic.doctor.id,
        branch_id=clinic.west.id,
        scheduled_date=DAY,
        recurrence={"type": "weekly", "interval": 1, "days": [0, 3]},
        created_by=clinic.reception_west.id,
    )
    db.add(followup)
    db.commit()

    response = client.post(f"/api/v1/followups/{followup.id}/done", headers=as_user(clinic.doctor))

    assert response.status_code == 422
    assert "weekly" in response.json()["detail"]


def test_snooze(client, clinic, as_user, followups):
    desk = as_user(clinic.reception_west)

    response = client.post(f"/api/v1/followups/{followups.routine.id}/snooze", json={"days": 3}, headers=desk)
    assert response.status_code == 200
    assert response.json()["scheduled_date"] == "2024-06-04"
    assert response.json()["status"] == "snoozed"

    response = client.post(f"/api/v1/followups/{followups.urgent.id}/snooze", json={"days": 0}, headers=desk)
    assert response.status_code == 422


def test_unknown_followup(client, clinic, as_user):
    response = client.post("/api/v1/followups/999/done", headers=as_user(clinic.doctor))

    assert response.status_code == 404


def test_bulk_done_and_snooze(client, clinic, as_user, followups):
    doctor = as_user(clinic.doctor)

    response = client.post(
        "/api/v1/followups/bulk/snooze",
        json={"ids": [followups.routine.id, followups.east.id], "days": 2},
        headers=doctor,
    )
    assert response.status_code == 200
    assert response.json() == {"processed": 2}

    response = client.post("/api/v1/followups/bulk/done", json={"ids": [followups.urgent.id]}, headers=doctor)
    assert response.status_code == 200

    response = list_followups(client, doctor)
    assert [(f["id"], f["status"]) for f in response.json()] == [(followups.urgent.id, "done")]


def test_bulk_partial_failure_reports_failed_ids(client, clinic, as_user, followups):
    desk = as_user(clinic.reception_west)

    response = client.post(
        "/api/v1/followups/bulk/snooze",
        json={"ids": [followups.routine.id, followups.canceled.id], "days": 1},
        headers=desk,
    )

    assert response.status_code == 502
    assert response.json()["failed_ids"] == [followups.canceled.id]

    response = client.get(
        "/api/v1/followups/",
        params={"date": (DAY + timedelta(days=1)).isoformat()},
        headers=desk,
    )
    assert [f["id"] for f in response.json()] == [followups.routine.id]


def test_bulk_needs_ids(client, clinic, as_user):
    response = client.post("/api/v1/followups/bulk/done", json={"ids": []}, headers=as_user(clinic.doctor))

    assert response.status_code == 422


def test_pending_counts(client, clinic, as_user, followups):
    response = client.get(
        "/api/v1/followups/counts",
        params={"start": "2024-05-30", "end": "2024-06-02"},
        headers=as_user(clinic.doctor),
    )

    assert response.status_code == 200
    assert response.json() == {"counts": {"2024-06-01": 2}}

    response = client.get(
        "/api/v1/followups/counts",
        params={"start": "2024-05-30", "end": "2024-06-02"},
        headers=as_user(clinic.reception_east),
    )
    assert response.json() == {"counts": {}}


def test_receptionist_works_only_own_branch(client, clinic, as_user, followups):
    desk = as_user(clinic.reception_west)

    response = client.post(f"/api/v1/followups/{followups.east.id}/done", headers=desk)
    assert response.status_code == 403

    response = client.post(f"/api/v1/followups/{followups.east.id}/snooze", json={"days": 1}, headers=desk)
    assert response.status_code == 403

    response = client.post(
        "/api/v1/followups/bulk/done",
        json={"ids": [followups.routine.id, followups.east.id]},
        headers=desk,
    )
    assert response.status_code == 403

    response = list_followups(client, as_user(clinic.doctor))
    assert {f["status"] for f in response.json()} == {"pending", "snoozed"}


def test_receptionist_creates_followups_for_own_branch(client, clinic, as_user):
    payload = {
        "patient_id": clinic.rajesh.id,
        "doctor_id": clinic.doctor.id,
        "branch_id": clinic.west.id,
        "scheduled_date": DAY.isoformat(),
    }

    response = client.post("/api/v1/followups/", json=payload, headers=as_user(clinic.reception_east))

    assert response.status_code == 201
    assert response.json()["branch_id"] == clinic.east.id
