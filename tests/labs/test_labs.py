"""
Tests for lab records.
"""
import pytest
from pydantic import ValidationError

from clinicdesk.core.dates import clinic_today
from clinicdesk.exceptions import RecordNotFoundException, ValidationFailedException
from clinicdesk.labs import service
from clinicdesk.labs.schemas import LabCreate, LabUpdate


def test_lab_defaults(db):
    lab = service.add_lab(db, LabCreate(patient_id="P1", tests=[{"name": "CBC", "amount": 300}]))

    assert lab.type == "regular"
    assert lab.date == clinic_today()
    assert lab.tests == [{"name": "CBC", "amount": 300.0}]


def test_vannela_lab(db):
    lab = service.add_lab(db, LabCreate(
        patient_id="P2",
        type="vannela",
        vtests=[{"name": "Sugar", "amount": 80}],
        vamount_received=80,
    ))
    assert lab.type == "vannela"
    assert lab.vamount_received == 80


def test_at_most_ten_slots():
    with pytest.raises(ValidationError):
        LabCreate(tests=[{"name": f"T{i}", "amount": 1} for i in range(11)])


def test_update_search_and_delete(db):
    lab = service.add_lab(db, LabCreate(patient_id="P100"))
    service.add_lab(db, LabCreate(patient_id="P200"))

    updated = service.update_lab(db, lab.id, LabUpdate(amount_received=150, amount_due=50))
    assert (updated.amount_received, updated.amount_due) == (150, 50)

    assert [l.patient_id for l in service.search_labs(db, "P1")] == ["P100"]
    assert len(service.get_todays_labs(db)) == 2

    service.delete_lab(db, lab.id)
    with pytest.raises(RecordNotFoundException):
        service.get_lab(db, lab.id)


def test_update_requires_id(db):
    with pytest.raises(ValidationFailedException):
        service.update_lab(db, None, LabUpdate())


def test_lab_routes(client, admin_headers):
    response = client.post("/api/v1/labs/", json={"patient_id": "P1", "amount_received": 100}, headers=admin_headers)
    assert response.status_code == 201

    response = client.get("/api/v1/labs/search", params={"patient_id": "P1"}, headers=admin_headers)
    assert len(response.json()["data"]) == 1
