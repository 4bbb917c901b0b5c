"""
Tests for spreadsheet snapshots and app settings.
"""
import json
from datetime import date

import pytest

from clinicdesk.exceptions import ValidationFailedException
from clinicdesk.legacy import service
from clinicdesk.legacy.settings_store import get_app_settings, update_app_settings
from clinicdesk.legacy.store import SheetStore
from clinicdesk.patients.models import Patient
from clinicdesk.patients.schemas import PatientCreate
from clinicdesk.patients import service as patient_service


def test_sheet_store_round_trip(tmp_path):
    store = SheetStore(str(tmp_path))
    store.write_records("patients", [
        {"id": "a", "name": "Asha", "tags": ["vip"]},
        {"id": "b", "name": "Ravi"},
    ])

    records = store.read_records("patients")
    assert records[0] == {"id": "a", "name": "Asha", "tags": '["vip"]'}
    assert records[1]["name"] == "Ravi"
    assert records[1]["tags"] is None


def test_missing_sheet_reads_as_empty(tmp_path):
    assert SheetStore(str(tmp_path)).read_records("labs") == []


def test_export_snapshot_writes_sheets_and_manifest(db, tmp_path):
    patient_service.add_patient(db, PatientCreate(patient_id="1", name="Asha"))

    manifest = service.export_snapshot(db, str(tmp_path))

    assert manifest["version"] == service.SNAPSHOT_VERSION
    assert manifest["counts"]["patients"] == 1
    assert manifest["counts"]["labs"] == 0
    assert json.loads((tmp_path / "manifest.json").read_text())["counts"] == manifest["counts"]
    assert (tmp_path / "patients.xlsx").exists()


def test_import_skips_existing_ids(db, tmp_path):
    patient = patient_service.add_patient(db, PatientCreate(patient_id="1", name="Asha", bloodGroup="O+"))
    service.export_snapshot(db, str(tmp_path))

    assert service.import_snapshot(db, "patients", str(tmp_path)) == 0

    record_id, registered_on = patient.id, patient.date
    db.delete(patient)
    db.commit()
    assert service.import_snapshot(db, "patients", str(tmp_path)) == 1

    restored = db.query(Patient).filter(Patient.id == record_id).one()
    assert restored.patient_id == "1"
    assert restored.date == registered_on
    assert restored.extra == {"bloodGroup": "O+"}


def test_import_reads_camel_case_legacy_headers(db, tmp_path):
    SheetStore(str(tmp_path)).write_records("patients", [
        {"id": "legacy-1", "patientId": "55", "name": "Kamala", "date": "2023-11-02", "age": "61", "ward": "B"},
    ])

    assert service.import_snapshot(db, "patients", str(tmp_path)) == 1
    patient = db.query(Patient).filter(Patient.id == "legacy-1").one()
    assert patient.patient_id == "55"
    assert patient.date == date(2023, 11, 2)
    assert patient.age == 61
    assert patient.extra == {"ward": "B"}


def test_unknown_entity(db, tmp_path):
    with pytest.raises(ValidationFailedException):
        service.import_snapshot(db, "staff", str(tmp_path))


def test_app_settings_defaults_and_merge(tmp_path):
    assert get_app_settings(str(tmp_path)) == {"theme": "light", "language": "en"}

    merged = update_app_settings({"theme": "dark", "printer": "HP"}, str(tmp_path))

    assert merged == {"theme": "dark", "language": "en", "printer": "HP"}
    assert get_app_settings(str(tmp_path))["printer"] == "HP"


def test_snapshot_route_requires_data_module(client, staff_headers):
    headers = staff_headers("desk", patients=True)
    assert client.post("/api/v1/legacy/snapshot/export", headers=headers).status_code == 403


def test_settings_routes(client, admin_headers, monkeypatch, tmp_path):
    from clinicdesk.config import settings
    monkeypatch.setattr(settings, "legacy_dir", str(tmp_path))

    response = client.put("/api/v1/legacy/settings", json={"language": "ta"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["data"]["language"] == "ta"

    response = client.get("/api/v1/legacy/settings", headers=admin_headers)
    assert response.json()["data"] == {"theme": "light", "language": "ta"}


def test_import_entity_without_extension_map(db, tmp_path):
    from clinicdesk.dropdowns import service as dropdown_service
    from clinicdesk.dropdowns.models import DropdownOption

    dropdown_service.add_dropdown_option(db, "department", "Retina")
    service.export_snapshot(db, str(tmp_path))
    dropdown_service.delete_dropdown_option(db, "department", "Retina")

    assert service.import_snapshot(db, "dropdown_options", str(tmp_path)) == 1
    assert db.query(DropdownOption).one().option_value == "Retina"


def test_import_rows_without_ids_all_get_inserted(db, tmp_path):
    SheetStore(str(tmp_path)).write_records("patients", [
        {"patientId": "101", "name": "Asha"},
        {"patientId": "102", "name": "Ravi"},
        {"patientId": "103", "name": "Meena"},
    ])

    assert service.import_snapshot(db, "patients", str(tmp_path)) == 3
    patients = db.query(Patient).order_by(Patient.patient_id).all()
    assert [p.name for p in patients] == ["Asha", "Ravi", "Meena"]
    assert len({p.id for p in patients}) == 3
