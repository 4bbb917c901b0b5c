"""
Tests for operations, bill numbers and in-patients.
"""
import pytest

from clinicdesk.exceptions import ConflictException, RecordNotFoundException, ValidationFailedException
from clinicdesk.operations import service
from clinicdesk.operations.models import Operation
from clinicdesk.operations.schemas import (
    InPatientCreate,
    InPatientUpdate,
    OperationCreate,
    OperationUpdate,
)


def test_bill_numbers_follow_highest_existing(db):
    db.add(Operation(id="old", patient_id="P0", bill_number="O0011"))
    db.add(Operation(id="odd", patient_id="P0", bill_number="MANUAL-7"))
    db.commit()

    operation = service.add_operation(db, OperationCreate(patient_id="P1", total_amount=5000))
    assert operation.bill_number == "O0012"


def test_first_bill_number(db):
    assert service.next_bill_number(db) == "O0001"


def test_explicit_duplicate_bill_number_is_rejected(db):
    service.add_operation(db, OperationCreate(patient_id="P1", bill_number="B-1"))
    with pytest.raises(ConflictException):
        service.add_operation(db, OperationCreate(patient_id="P2", bill_number="B-1"))


def test_operation_requires_patient(db):
    with pytest.raises(ValidationFailedException):
        service.add_operation(db, OperationCreate(operation_details="Cataract"))


def test_blank_bill_number_on_update_keeps_stored_values(db):
    operation = service.add_operation(db, OperationCreate(patient_id="P1", created_by="dr.rao"))

    updated = service.update_operation(
        db, operation.id, OperationUpdate(bill_number="", created_by="someone", operated_by="Dr Rao")
    )
    assert updated.bill_number == "O0001"
    assert updated.created_by == "dr.rao"
    assert updated.operated_by == "Dr Rao"


def test_patient_operations_and_delete(db):
    operation = service.add_operation(db, OperationCreate(patient_id="P9"))
    assert [o.id for o in service.get_patient_operations(db, "P9")] == [operation.id]

    service.delete_operation(db, operation.id)
    with pytest.raises(RecordNotFoundException):
        service.get_operation(db, operation.id)


def test_inpatient_lifecycle(db):
    inpatient = service.add_inpatient(db, InPatientCreate(
        patient_id="P5",
        name="Kamala",
        doctor_names=["Dr A", "Dr B"],
    ))
    assert inpatient.doctor_names == ["Dr A", "Dr B"]
    assert service.get_latest_inpatient_id(db) == "P5"

    updated = service.update_inpatient(db, inpatient.id, InPatientUpdate(
        prescriptions=[{"medicine": "Drops", "times": "3"}]
    ))
    assert updated.prescriptions == [{"medicine": "Drops", "times": "3"}]

    assert service.delete_inpatient(db, inpatient.id) == inpatient.id
    assert service.get_latest_inpatient_id(db) is None


def test_operation_routes(client, admin_headers):
    response = client.post("/api/v1/operations/", json={"patient_id": "P1"}, headers=admin_headers)
    assert response.status_code == 201
    assert response.json()["data"]["bill_number"] == "O0001"

    response = client.post("/api/v1/inpatients/", json={"patient_id": "P1"}, headers=admin_headers)
    assert response.status_code == 201
    response = client.get("/api/v1/inpatients/latest-id", headers=admin_headers)
    assert response.json()["data"] == "P1"
