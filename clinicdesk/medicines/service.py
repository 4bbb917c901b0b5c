"""
Medicine Service - Business logic for medicine stock and dispensing.

Dispensing decrements stock with a single conditional UPDATE and writes the
dispense log entry in the same transaction, so stock and log never disagree
and concurrent dispenses cannot drive stock below zero.
"""
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
import logging

from ..exceptions import (
    ValidationFailedException,
    RecordNotFoundException,
    InsufficientStockException,
    BackendException,
)
from ..core.pagination import paginate, PageResponse
from ..core.records import build_record, apply_payload, commit_or_raise, new_id, utcnow
from .models import Medicine, MedicineDispenseRecord, StockStatus
from .schemas import (
    MedicineCreate,
    MedicineUpdate,
    MedicineDispenseRequest,
    MedicineDispenseRecordResponse,
)

# Set up logging
logger = logging.getLogger(__name__)

def get_medicine(db: Session, medicine_id: Optional[str]) -> Medicine:
    """
    Get a medicine by id.

    Raises:
        ValidationFailedException: If no id was given
        RecordNotFoundException: If the medicine does not exist
    """
    if not medicine_id:
        raise ValidationFailedException("Medicine ID is required")
    medicine = db.query(Medicine).filter(Medicine.id == medicine_id).first()
    if not medicine:
        raise RecordNotFoundException(f"Medicine with ID {medicine_id} not found in database")
    return medicine

def get_medicines(db: Session) -> List[Medicine]:
    """All medicines ordered by name."""
    return db.query(Medicine).order_by(Medicine.name.asc()).all()

def search_medicines(db: Session, term: Optional[str]) -> List[Medicine]:
    """Case-insensitive search on medicine name; a blank term returns all."""
    term = (term or "").strip()
    if not term:
        return get_medicines(db)
    return db.query(Medicine).filter(Medicine.name.ilike(f"%{term}%")).order_by(Medicine.name.asc()).all()

def get_medicines_by_status(db: Session, status: str) -> List[Medicine]:
    """Medicines in a given stock status."""
    return db.query(Medicine).filter(Medicine.status == status).order_by(Medicine.name.asc()).all()

def add_medicine(db: Session, medicine_data: MedicineCreate) -> Medicine:
    """
    Add a medicine to stock.

    The status defaults to available, or out_of_stock when the quantity is zero.
    """
    payload = medicine_data.model_dump()
    payload["name"] = payload["name"].strip()
    if not payload["name"]:
        raise ValidationFailedException("Medicine name is required")
    if not payload.get("status"):
        payload["status"] = (
            StockStatus.OUT_OF_STOCK.value if payload["quantity"] == 0 else StockStatus.AVAILABLE.value
        )

    medicine = build_record(Medicine, payload)
    db.add(medicine)
    commit_or_raise(db, "add medicine", medicine)
    logger.info(f"Medicine {medicine.name} ({medicine.id}) added with quantity {medicine.quantity}")
    return medicine

def update_medicine(db: Session, medicine_id: Optional[str], medicine_data: MedicineUpdate) -> Medicine:
    """
    Update a medicine.

    Raises:
        ValidationFailedException: If no id was given
        RecordNotFoundException: If the medicine does not exist
    """
    medicine = get_medicine(db, medicine_id)
    apply_payload(medicine, medicine_data.model_dump(exclude_unset=True))
    medicine.updated_at = utcnow()
    commit_or_raise(db, "update medicine", medicine)
    logger.info(f"Medicine {medicine_id} updated")
    return medicine

def update_medicine_status(db: Session, medicine_id: Optional[str], status: Optional[str]) -> Medicine:
    """
    Set the stock status of a medicine.

    Raises:
        ValidationFailedException: If id or status is missing
    """
    if not medicine_id or not status:
        raise ValidationFailedException("Medicine ID and status are required")
    medicine = get_medicine(db, medicine_id)
    medicine.status = status
    medicine.updated_at = utcnow()
    commit_or_raise(db, "update medicine status", medicine)
    logger.info(f"Medicine {medicine_id} status set to {status}")
    return medicine

def delete_medicine(db: Session, medicine_id: Optional[str]) -> str:
    """
    Delete a medicine. Dispense records referencing it are kept.

    Raises:
        ValidationFailedException: If no id was given
        RecordNotFoundException: If the medicine does not exist
    """
    medicine = get_medicine(db, medicine_id)
    db.delete(medicine)
    commit_or_raise(db, "delete medicine")
    logger.info(f"Medicine {medicine_id} deleted")
    return medicine_id

def dispense_medicine(
    db: Session,
    medicine_id: str,
    request: MedicineDispenseRequest
) -> Tuple[Medicine, MedicineDispenseRecord]:
    """
    Dispense medicine to a patient.

    Args:
        db: Database session
        medicine_id: Stock row to dispense from
        request: Quantity, recipient and charge

    Returns:
        Tuple of (updated Medicine, MedicineDispenseRecord)

    Raises:
        RecordNotFoundException: If the medicine does not exist
        InsufficientStockException: If more is requested than is in stock; nothing is changed
        BackendException: If the database write fails; nothing is changed
    """
    medicine = get_medicine(db, medicine_id)
    quantity = request.quantity
    if quantity > medicine.quantity:
        raise InsufficientStockException(medicine.quantity, quantity, "medicine")

    price = request.price if request.price is not None else medicine.price
    total_amount = request.total_amount if request.total_amount is not None else price * quantity

    try:
        updated = (
            db.query(Medicine)
            .filter(Medicine.id == medicine_id, Medicine.quantity >= quantity)
            .update(
                {Medicine.quantity: Medicine.quantity - quantity, Medicine.updated_at: utcnow()},
                synchronize_session=False,
            )
        )
        if not updated:
            # Another dispense got there first
            db.rollback()
            db.refresh(medicine)
            raise InsufficientStockException(medicine.quantity, quantity, "medicine")

        db.query(Medicine).filter(Medicine.id == medicine_id, Medicine.quantity <= 0).update(
            {Medicine.status: StockStatus.OUT_OF_STOCK.value}, synchronize_session=False
        )

        record = MedicineDispenseRecord(
            id=new_id(),
            medicine_id=medicine.id,
            medicine_name=medicine.name,
            batch_number=medicine.batch_number,
            expiry_date=medicine.expiry_date,
            quantity=quantity,
            price=price,
            total_amount=total_amount,
            dispensed_date=utcnow(),
            patient_id=request.patient_id,
            patient_name=request.patient_name,
            dispensed_by=request.dispensed_by,
        )
        db.add(record)
        db.commit()
    except InsufficientStockException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error dispensing medicine {medicine_id}: {str(e)}")
        raise BackendException("An error occurred while dispensing medicine")

    db.refresh(medicine)
    db.refresh(record)
    logger.info(
        f"Dispensed {quantity} x {medicine.name} to patient {request.patient_id}; "
        f"{medicine.quantity} left ({medicine.status})"
    )
    return medicine, record

def get_dispense_records(db: Session, page: int = 1, size: int = 20) -> PageResponse:
    """Dispense log, newest first, one page at a time."""
    query = db.query(MedicineDispenseRecord).order_by(MedicineDispenseRecord.dispensed_date.desc())
    return paginate(query, page, size, MedicineDispenseRecordResponse)

def get_dispense_records_by_patient(db: Session, patient_id: str) -> List[MedicineDispenseRecord]:
    """Dispense log entries for one patient, newest first."""
    return (
        db.query(MedicineDispenseRecord)
        .filter(MedicineDispenseRecord.patient_id == patient_id)
        .order_by(MedicineDispenseRecord.dispensed_date.desc())
        .all()
    )

def get_dispense_records_by_medicine(db: Session, medicine_id: str) -> List[MedicineDispenseRecord]:
    """Dispense log entries for one stock row, newest first."""
    return (
        db.query(MedicineDispenseRecord)
        .filter(MedicineDispenseRecord.medicine_id == medicine_id)
        .order_by(MedicineDispenseRecord.dispensed_date.desc())
        .all()
    )
