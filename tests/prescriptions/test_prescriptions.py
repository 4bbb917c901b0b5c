"""
Tests for prescriptions, receipt numbering, dues and follow-ups.
"""
from datetime import date

from clinicdesk.core.dates import clinic_today
from clinicdesk.prescriptions import service
from clinicdesk.prescriptions.models import Prescription
from clinicdesk.prescriptions.schemas import PrescriptionCreate, PrescriptionUpdate


def add(db, **fields):
    fields.setdefault("patient_id", "P1")
    fields.setdefault("patient_name", "Asha")
    return service.add_prescription(db, PrescriptionCreate(**fields))


def test_serial_and_receipt_numbers_are_allocated(db):
    first = add(db)
    second = add(db)

    assert (first.sno, first.receipt_no) == (1, "R0001")
    assert (second.sno, second.receipt_no) == (2, "R0002")
    assert first.date == clinic_today()


def test_serial_continues_after_highest_stored_value(db):
    db.add(Prescription(id="legacy", sno=41, receipt_no="R0041"))
    db.commit()

    assert service.get_next_serial(db) == 42
    assert add(db).receipt_no == "R0042"


def test_client_cannot_choose_serial_numbers(db):
    prescription = add(db, sno=999, receipt_no="X1")
    assert prescription.sno == 1
    assert prescription.receipt_no == "R0001"


def test_update_keeps_numbers(db):
    prescription = add(db)
    updated = service.update_prescription(
        db, prescription.id, PrescriptionUpdate(diagnosis="Cataract", receipt_no="R9999")
    )
    assert updated.diagnosis == "Cataract"
    assert updated.receipt_no == "R0001"


def test_lookup_by_date_and_patient(db):
    add(db, date=date(2024, 5, 1))
    add(db, date=date(2024, 5, 2), patient_id="P2")

    assert len(service.get_prescriptions_by_date(db, "2024-05-01")) == 1
    assert [p.patient_id for p in service.get_prescriptions_by_patient(db, "P2")] == ["P2"]


def test_dues_and_follow_ups(db):
    add(db, amount_due=150)
    add(db, amount_due=0, paid_for="REVIEW OP CONSULTATION")
    add(db, paid_for="CONSULTATION")

    assert [p.amount_due for p in service.get_dues(db)] == [150]
    assert [p.paid_for for p in service.get_follow_ups(db)] == ["REVIEW OP CONSULTATION"]


def test_search(db):
    add(db, patient_name="Lakshmi", phone_number="12345")
    add(db, patient_name="Gopal")
    assert [p.patient_name for p in service.search_prescriptions(db, "laks")] == ["Lakshmi"]


def test_prescription_routes(client, admin_headers):
    response = client.post("/api/v1/prescriptions/", json={"patient_id": "P1", "amount_due": 20}, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["receipt_no"] == "R0001"

    response = client.get("/api/v1/prescriptions/next-serial", headers=admin_headers)
    assert response.json()["data"] == 2

    response = client.get("/api/v1/prescriptions/by-date/01-05-2024", headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid date format. Use YYYY-MM-DD"

    response = client.get("/api/v1/prescriptions/dues", headers=admin_headers)
    assert len(response.json()["data"]) == 1
