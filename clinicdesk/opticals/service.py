"""
Optical Service - Business logic for frames, lenses and optical dispensing.
"""
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import or_
import logging

from ..exceptions import (
    ValidationFailedException,
    RecordNotFoundException,
    InsufficientStockException,
    BackendException,
)
from ..core.pagination import paginate, PageResponse
from ..core.records import build_record, apply_payload, commit_or_raise, new_id, utcnow
from ..medicines.models import StockStatus
from .models import OpticalItem, OpticalDispenseRecord
from .schemas import OpticalCreate, OpticalUpdate, OpticalDispenseRequest, OpticalDispenseRecordResponse

# Set up logging
logger = logging.getLogger(__name__)

def get_optical(db: Session, optical_id: Optional[str]) -> OpticalItem:
    """
    Get an optical item by id.

    Raises:
        ValidationFailedException: If no id was given
        RecordNotFoundException: If the item does not exist
    """
    if not optical_id:
        raise ValidationFailedException("Optical ID is required")
    optical = db.query(OpticalItem).filter(OpticalItem.id == optical_id).first()
    if not optical:
        raise RecordNotFoundException(f"Optical item with ID {optical_id} not found")
    return optical

def get_opticals(db: Session, optical_type: Optional[str] = None) -> List[OpticalItem]:
    """All optical items, optionally of one type, ordered by brand."""
    query = db.query(OpticalItem)
    if optical_type:
        query = query.filter(OpticalItem.type == optical_type)
    return query.order_by(OpticalItem.brand.asc(), OpticalItem.model.asc()).all()

def get_opticals_by_type(db: Session, optical_type: str) -> List[OpticalItem]:
    """Optical items of one type."""
    return get_opticals(db, optical_type)

def get_opticals_by_status(db: Session, status: str, optical_type: Optional[str] = None) -> List[OpticalItem]:
    """Optical items in a stock status, optionally of one type."""
    query = db.query(OpticalItem).filter(OpticalItem.status == status)
    if optical_type:
        query = query.filter(OpticalItem.type == optical_type)
    return query.order_by(OpticalItem.brand.asc()).all()

def get_opticals_by_status_and_type(db: Session, status: str, optical_type: str) -> List[OpticalItem]:
    """Optical items matching both a status and a type."""
    return get_opticals_by_status(db, status, optical_type)

def search_opticals(db: Session, term: Optional[str]) -> List[OpticalItem]:
    """Case-insensitive search over brand, model, type and size."""
    term = (term or "").strip()
    if not term:
        return get_opticals(db)

    pattern = f"%{term}%"
    return (
        db.query(OpticalItem)
        .filter(or_(
            OpticalItem.brand.ilike(pattern),
            OpticalItem.model.ilike(pattern),
            OpticalItem.type.ilike(pattern),
            OpticalItem.size.ilike(pattern),
        ))
        .order_by(OpticalItem.brand.asc())
        .all()
    )

def add_optical(db: Session, optical_data: OpticalCreate) -> OpticalItem:
    """
    Add a frame or lens to stock.

    The status defaults to available, or out_of_stock when the quantity is zero.
    """
    payload = optical_data.model_dump()
    payload["brand"] = payload["brand"].strip()
    if not payload.get("status"):
        payload["status"] = (
            StockStatus.OUT_OF_STOCK.value if payload["quantity"] == 0 else StockStatus.AVAILABLE.value
        )

    optical = build_record(OpticalItem, payload)
    db.add(optical)
    commit_or_raise(db, "add optical item", optical)
    logger.info(f"Optical {optical.type} {optical.brand} ({optical.id}) added with quantity {optical.quantity}")
    return optical

def update_optical(db: Session, optical_id: Optional[str], optical_data: OpticalUpdate) -> OpticalItem:
    """
    Update an optical item.

    Raises:
        RecordNotFoundException: If the item does not exist
    """
    optical = get_optical(db, optical_id)
    apply_payload(optical, optical_data.model_dump(exclude_unset=True))
    optical.updated_at = utcnow()
    commit_or_raise(db, "update optical item", optical)
    logger.info(f"Optical item {optical_id} updated")
    return optical

def update_optical_status(db: Session, optical_id: Optional[str], status: Optional[str]) -> OpticalItem:
    """
    Set the stock status of an optical item.

    Raises:
        ValidationFailedException: If id or status is missing
    """
    if not optical_id or not status:
        raise ValidationFailedException("Optical ID and status are required")
    optical = get_optical(db, optical_id)
    optical.status = status
    optical.updated_at = utcnow()
    commit_or_raise(db, "update optical status", optical)
    logger.info(f"Optical item {optical_id} status set to {status}")
    return optical

def delete_optical(db: Session, optical_id: Optional[str]) -> str:
    """
    Delete an optical item. Dispense records referencing it are kept.

    Raises:
        RecordNotFoundException: If the item does not exist
    """
    optical = get_optical(db, optical_id)
    db.delete(optical)
    commit_or_raise(db, "delete optical item")
    logger.info(f"Optical item {optical_id} deleted")
    return optical_id

def dispense_optical(
    db: Session,
    optical_id: str,
    request: OpticalDispenseRequest
) -> Tuple[OpticalItem, OpticalDispenseRecord]:
    """
    Dispense a frame or lens to a patient.

    Args:
        db: Database session
        optical_id: Stock row to dispense from
        request: Quantity and recipient

    Returns:
        Tuple of (updated OpticalItem, OpticalDispenseRecord)

    Raises:
        RecordNotFoundException: If the item does not exist
        ValidationFailedException: If the item is not available
        InsufficientStockException: If more is requested than is in stock; nothing is changed
    """
    optical = get_optical(db, optical_id)
    if optical.status != StockStatus.AVAILABLE.value:
        raise ValidationFailedException(f"Optical item is not available (status: {optical.status})")

    quantity = request.quantity
    if quantity > optical.quantity:
        raise InsufficientStockException(optical.quantity, quantity, optical.brand)

    try:
        updated = (
            db.query(OpticalItem)
            .filter(
                OpticalItem.id == optical_id,
                OpticalItem.status == StockStatus.AVAILABLE.value,
                OpticalItem.quantity >= quantity,
            )
            .update(
                {OpticalItem.quantity: OpticalItem.quantity - quantity, OpticalItem.updated_at: utcnow()},
                synchronize_session=False,
            )
        )
        if not updated:
            db.rollback()
            db.refresh(optical)
            raise InsufficientStockException(optical.quantity, quantity, optical.brand)

        db.query(OpticalItem).filter(OpticalItem.id == optical_id, OpticalItem.quantity <= 0).update(
            {OpticalItem.status: StockStatus.OUT_OF_STOCK.value}, synchronize_session=False
        )

        record = OpticalDispenseRecord(
            id=new_id(),
            optical_id=optical.id,
            optical_type=optical.type,
            brand=optical.brand,
            model=optical.model,
            quantity=quantity,
            price=optical.price,
            patient_id=request.patient_id,
            patient_name=request.patient_name,
            dispensed_by=request.dispensed_by,
            dispensed_at=utcnow(),
        )
        db.add(record)
        db.commit()
    except InsufficientStockException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error dispensing optical item {optical_id}: {str(e)}")
        raise BackendException("An error occurred while dispensing optical item")

    db.refresh(optical)
    db.refresh(record)
    logger.info(f"Dispensed {quantity} x {optical.brand} {optical.model or ''} to {request.patient_name}")
    return optical, record

def get_dispense_records(
    db: Session,
    page: int = 1,
    size: int = 20,
    optical_type: Optional[str] = None
) -> PageResponse:
    """Optical dispense log, newest first, one page at a time."""
    query = db.query(OpticalDispenseRecord)
    if optical_type:
        query = query.filter(OpticalDispenseRecord.optical_type == optical_type)
    query = query.order_by(OpticalDispenseRecord.dispensed_at.desc())
    return paginate(query, page, size, OpticalDispenseRecordResponse)

def get_dispense_records_by_patient(db: Session, patient_id: str) -> List[OpticalDispenseRecord]:
    return (
        db.query(OpticalDispenseRecord)
        .filter(OpticalDispenseRecord.patient_id == patient_id)
        .order_by(OpticalDispenseRecord.dispensed_at.desc())
        .all()
    )

def get_dispense_records_by_type(db: Session, optical_type: str) -> List[OpticalDispenseRecord]:
    return (
        db.query(OpticalDispenseRecord)
        .filter(OpticalDispenseRecord.optical_type == optical_type)
        .order_by(OpticalDispenseRecord.dispensed_at.desc())
        .all()
    )

def get_dispense_records_by_optical(db: Session, optical_id: str) -> List[OpticalDispenseRecord]:
    return (
        db.query(OpticalDispenseRecord)
        .filter(OpticalDispenseRecord.optical_id == optical_id)
        .order_by(OpticalDispenseRecord.dispensed_at.desc())
        .all()
    )
