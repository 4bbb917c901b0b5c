"""
Tests for optical stock and dispensing.
"""
import pytest

from clinicdesk.exceptions import InsufficientStockException, ValidationFailedException
from clinicdesk.medicines.models import StockStatus
from clinicdesk.opticals import service
from clinicdesk.opticals.models import OpticalDispenseRecord
from clinicdesk.opticals.schemas import OpticalCreate, OpticalDispenseRequest


def add(db, **fields):
    fields.setdefault("type", "frame")
    fields.setdefault("brand", "Titan")
    fields.setdefault("quantity", 5)
    fields.setdefault("price", 1200)
    return service.add_optical(db, OpticalCreate(**fields))


def test_dispense_frame(db):
    frame = add(db, model="TX-1")

    updated, record = service.dispense_optical(db, frame.id, OpticalDispenseRequest(
        quantity=2, patient_name="Asha", patient_id="P1"
    ))

    assert updated.quantity == 3
    assert record.optical_type == "frame"
    assert record.brand == "Titan"
    assert record.price == 1200


def test_dispensing_all_stock_marks_out_of_stock(db):
    lens = add(db, type="lens", brand="Zeiss", quantity=1)
    updated, _ = service.dispense_optical(db, lens.id, OpticalDispenseRequest(quantity=1, patient_name="Ravi"))
    assert updated.status == StockStatus.OUT_OF_STOCK.value


def test_over_dispense_changes_nothing(db):
    frame = add(db, quantity=1)
    with pytest.raises(InsufficientStockException) as exc_info:
        service.dispense_optical(db, frame.id, OpticalDispenseRequest(quantity=2, patient_name="Asha"))
    assert exc_info.value.detail == "Not enough Titan in stock. Available: 1, Requested: 2"
    db.refresh(frame)
    assert frame.quantity == 1
    assert db.query(OpticalDispenseRecord).count() == 0


def test_unavailable_item_cannot_be_dispensed(db):
    frame = add(db)
    service.update_optical_status(db, frame.id, StockStatus.COMPLETED.value)
    with pytest.raises(ValidationFailedException):
        service.dispense_optical(db, frame.id, OpticalDispenseRequest(quantity=1, patient_name="Asha"))


def test_filters(db):
    add(db)
    add(db, type="lens", brand="Zeiss")

    assert [o.brand for o in service.get_opticals_by_type(db, "lens")] == ["Zeiss"]
    assert len(service.get_opticals_by_status(db, "available")) == 2
    assert [o.brand for o in service.get_opticals_by_status_and_type(db, "available", "frame")] == ["Titan"]
    assert [o.brand for o in service.search_opticals(db, "zei")] == ["Zeiss"]


def test_dispense_record_filters(db):
    frame = add(db)
    lens = add(db, type="lens", brand="Zeiss")
    service.dispense_optical(db, frame.id, OpticalDispenseRequest(quantity=1, patient_name="A", patient_id="P1"))
    service.dispense_optical(db, lens.id, OpticalDispenseRequest(quantity=1, patient_name="A", patient_id="P1"))

    assert service.get_dispense_records(db).total == 2
    assert service.get_dispense_records(db, optical_type="lens").total == 1
    assert len(service.get_dispense_records_by_patient(db, "P1")) == 2
    assert len(service.get_dispense_records_by_type(db, "frame")) == 1
    assert len(service.get_dispense_records_by_optical(db, lens.id)) == 1


def test_dispense_requires_patient_name(client, admin_headers):
    response = client.post("/api/v1/opticals/", json={"type": "frame", "brand": "Rayban", "quantity": 1}, headers=admin_headers)
    assert response.status_code == 201
    optical_id = response.json()["data"]["id"]

    response = client.post(f"/api/v1/opticals/{optical_id}/dispense", json={"quantity": 1}, headers=admin_headers)
    assert response.status_code == 422
