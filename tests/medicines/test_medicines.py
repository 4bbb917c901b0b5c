"""
Tests for medicine stock and dispensing.
"""
import pytest

from clinicdesk.exceptions import InsufficientStockException, RecordNotFoundException, ValidationFailedException
from clinicdesk.medicines import service
from clinicdesk.medicines.models import MedicineDispenseRecord, StockStatus
from clinicdesk.medicines.schemas import MedicineCreate, MedicineDispenseRequest, MedicineUpdate


def add(db, **fields):
    fields.setdefault("name", "Paracetamol")
    fields.setdefault("quantity", 10)
    fields.setdefault("price", 2.5)
    return service.add_medicine(db, MedicineCreate(**fields))


def test_status_defaults_from_quantity(db):
    assert add(db).status == StockStatus.AVAILABLE.value
    assert add(db, name="Empty", quantity=0).status == StockStatus.OUT_OF_STOCK.value


def test_dispense_decrements_and_logs(db):
    medicine = add(db)

    updated, record = service.dispense_medicine(db, medicine.id, MedicineDispenseRequest(
        quantity=4, patient_id="P1", patient_name="Asha", dispensed_by="pharma"
    ))

    assert updated.quantity == 6
    assert updated.status == StockStatus.AVAILABLE.value
    assert record.quantity == 4
    assert record.total_amount == 10.0
    assert record.medicine_name == "Paracetamol"


def test_dispensing_exact_stock_marks_out_of_stock(db):
    medicine = add(db, quantity=3)

    updated, _ = service.dispense_medicine(db, medicine.id, MedicineDispenseRequest(quantity=3))

    assert updated.quantity == 0
    assert updated.status == StockStatus.OUT_OF_STOCK.value


def test_over_dispense_changes_nothing(db):
    medicine = add(db, quantity=5)

    with pytest.raises(InsufficientStockException) as exc_info:
        service.dispense_medicine(db, medicine.id, MedicineDispenseRequest(quantity=6))

    assert exc_info.value.detail == "Not enough medicine in stock. Available: 5, Requested: 6"
    db.refresh(medicine)
    assert medicine.quantity == 5
    assert db.query(MedicineDispenseRecord).count() == 0


def test_charge_overrides(db):
    medicine = add(db)
    _, record = service.dispense_medicine(db, medicine.id, MedicineDispenseRequest(
        quantity=2, price=3, total_amount=5
    ))
    assert (record.price, record.total_amount) == (3, 5)


def test_lookup_errors(db):
    with pytest.raises(ValidationFailedException) as exc_info:
        service.get_medicine(db, "")
    assert exc_info.value.detail == "Medicine ID is required"

    with pytest.raises(RecordNotFoundException) as exc_info:
        service.get_medicine(db, "missing")
    assert exc_info.value.detail == "Medicine with ID missing not found in database"


def test_update_status_search_and_delete(db):
    medicine = add(db)
    add(db, name="Ibuprofen")

    service.update_medicine(db, medicine.id, MedicineUpdate(batch_number="B12"))
    service.update_medicine_status(db, medicine.id, StockStatus.COMPLETED.value)

    assert [m.name for m in service.get_medicines_by_status(db, "completed")] == ["Paracetamol"]
    assert [m.name for m in service.search_medicines(db, "ibu")] == ["Ibuprofen"]
    assert service.delete_medicine(db, medicine.id) == medicine.id


def test_dispense_records_listing(db):
    medicine = add(db, quantity=20)
    for _ in range(3):
        service.dispense_medicine(db, medicine.id, MedicineDispenseRequest(quantity=1, patient_id="P7"))

    page = service.get_dispense_records(db, page=1, size=2)
    assert page.total == 3
    assert len(page.items) == 2
    assert len(service.get_dispense_records_by_patient(db, "P7")) == 3
    assert len(service.get_dispense_records_by_medicine(db, medicine.id)) == 3


def test_dispense_route(client, admin_headers):
    response = client.post("/api/v1/medicines/", json={"name": "Drops", "quantity": 2, "price": 40}, headers=admin_headers)
    assert response.status_code == 201
    medicine_id = response.json()["data"]["id"]

    response = client.post(f"/api/v1/medicines/{medicine_id}/dispense", json={"quantity": 5}, headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"] == "insufficient_stock"

    response = client.post(f"/api/v1/medicines/{medicine_id}/dispense", json={"quantity": 2}, headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["medicine"]["quantity"] == 0
    assert data["medicine"]["status"] == "out_of_stock"
    assert data["record"]["total_amount"] == 80
