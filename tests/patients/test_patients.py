"""
Tests for patient registration, lookup and updates.
"""
import pytest

from clinicdesk.core.dates import clinic_today
from clinicdesk.exceptions import ConflictException, RecordNotFoundException, ValidationFailedException
from clinicdesk.patients import service
from clinicdesk.patients.schemas import PatientCreate, PatientUpdate


def test_patient_lifecycle(db):
    patient = service.add_patient(db, PatientCreate(patient_id="P100", name="Asha", gender="Female", age=34))
    assert patient.date == clinic_today()

    assert service.get_patient_by_id(db, "P100").id == patient.id
    assert service.get_patient_by_id(db, patient.id).patient_id == "P100"

    updated = service.update_patient(db, patient.id, PatientUpdate(phone="9876543210"))
    assert updated.phone == "9876543210"
    assert updated.name == "Asha"

    assert service.delete_patient(db, patient.id) == patient.id
    with pytest.raises(RecordNotFoundException) as exc_info:
        service.get_patient_by_id(db, "P100")
    assert exc_info.value.detail == "No patient found with ID: P100"


def test_missing_required_information(db):
    with pytest.raises(ValidationFailedException) as exc_info:
        service.add_patient(db, PatientCreate(name="No Number"))
    assert exc_info.value.detail == "Missing required patient information"


def test_duplicate_patient_number_conflicts(db):
    service.add_patient(db, PatientCreate(patient_id="7", name="First"))
    with pytest.raises(ConflictException):
        service.add_patient(db, PatientCreate(patient_id="7", name="Second"))


def test_lookup_requires_an_id(db):
    with pytest.raises(ValidationFailedException) as exc_info:
        service.get_patient_by_id(db, "  ")
    assert exc_info.value.detail == "Patient ID is required"


def test_update_requires_an_id(db):
    with pytest.raises(ValidationFailedException) as exc_info:
        service.update_patient(db, "", PatientUpdate(name="x"))
    assert exc_info.value.detail == "Patient ID is required for update"


def test_latest_patient_id_ignores_non_numeric(db):
    for number in ("3", "12", "walk-in"):
        service.add_patient(db, PatientCreate(patient_id=number, name=f"Patient {number}"))
    assert service.get_latest_patient_id(db) == 12


def test_todays_patients_and_search(db):
    service.add_patient(db, PatientCreate(patient_id="1", name="Ravi Kumar", phone="99887"))
    service.add_patient(db, PatientCreate(patient_id="2", name="Meena"))

    assert len(service.get_todays_patients(db)) == 2
    assert [p.patient_id for p in service.search_patients(db, "ravi")] == ["1"]
    assert [p.patient_id for p in service.search_patients(db, "9988")] == ["1"]


def test_extension_fields_are_kept(db):
    patient = service.add_patient(db, PatientCreate(patient_id="9", name="Ext", bloodGroup="B+"))
    assert patient.extra == {"bloodGroup": "B+"}


def test_patient_routes(client, admin_headers):
    response = client.post("/api/v1/patients/", json={"patient_id": "P100", "name": "Asha"}, headers=admin_headers)
    assert response.status_code == 201
    record_id = response.json()["data"]["id"]

    response = client.get("/api/v1/patients/P100", headers=admin_headers)
    assert response.json()["data"]["name"] == "Asha"

    response = client.put(f"/api/v1/patients/{record_id}", json={"address": "MG Road"}, headers=admin_headers)
    assert response.json()["data"]["address"] == "MG Road"

    response = client.get("/api/v1/patients/latest-id", headers=admin_headers)
    assert response.status_code == 200

    response = client.delete(f"/api/v1/patients/{record_id}", headers=admin_headers)
    assert response.json()["success"] is True

    response = client.get("/api/v1/patients/P100", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_patients_module_permission(client, staff_headers):
    headers = staff_headers("optics", opticals=True)
    assert client.get("/api/v1/patients/", headers=headers).status_code == 403

    headers = staff_headers("desk", patients=True)
    assert client.get("/api/v1/patients/", headers=headers).status_code == 200
