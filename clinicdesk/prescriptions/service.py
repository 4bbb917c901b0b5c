"""
Prescription Service - Business logic for prescriptions / receipts.

Serial numbers are allocated as one more than the current maximum. The
columns are unique, so two concurrent allocations cannot both be stored;
the loser re-reads the maximum and tries again.
"""
from typing import List, Optional, Union
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
import logging

from ..exceptions import RecordNotFoundException, BackendException
from ..core.dates import clinic_today, parse_date
from ..core.numbering import next_serial, format_serial
from ..core.records import build_record, apply_payload, commit_or_raise
from .models import Prescription, REVIEW_PAID_FOR
from .schemas import PrescriptionCreate, PrescriptionUpdate

# Set up logging
logger = logging.getLogger(__name__)

RECEIPT_PREFIX = "R"
MAX_ALLOCATION_ATTEMPTS = 3
PROTECTED_FIELDS = {"id", "sno", "receipt_no", "extra", "created_at"}

def get_prescription(db: Session, prescription_id: str) -> Prescription:
    """
    Get a prescription by record id.

    Raises:
        RecordNotFoundException: If the prescription does not exist
    """
    prescription = db.query(Prescription).filter(Prescription.id == prescription_id).first()
    if not prescription:
        raise RecordNotFoundException(f"Prescription with ID {prescription_id} not found")
    return prescription

def get_prescriptions(db: Session) -> List[Prescription]:
    """All prescriptions, newest visit first."""
    return db.query(Prescription).order_by(Prescription.date.desc(), Prescription.sno.desc()).all()

def get_next_serial(db: Session) -> int:
    """Serial number the next prescription will receive."""
    return next_serial(value for (value,) in db.query(Prescription.sno).all())

def get_prescriptions_by_patient(db: Session, patient_id: str) -> List[Prescription]:
    """Prescriptions of one patient, newest first."""
    return (
        db.query(Prescription)
        .filter(Prescription.patient_id == patient_id)
        .order_by(Prescription.date.desc(), Prescription.created_at.desc())
        .all()
    )

def get_prescriptions_by_date(db: Session, day: Union[str, date]) -> List[Prescription]:
    """
    Prescriptions dated on a given day.

    Args:
        db: Database session
        day: Date or YYYY-MM-DD string

    Raises:
        ValidationFailedException: If the date is malformed
    """
    day = parse_date(day)
    return (
        db.query(Prescription)
        .filter(Prescription.date == day)
        .order_by(Prescription.created_at.desc())
        .all()
    )

def get_todays_prescriptions(db: Session) -> List[Prescription]:
    """Prescriptions dated today."""
    return get_prescriptions_by_date(db, clinic_today())

def add_prescription(db: Session, prescription_data: PrescriptionCreate) -> Prescription:
    """
    Create a prescription, allocating its serial and receipt numbers.

    Args:
        db: Database session
        prescription_data: Prescription fields

    Returns:
        Prescription: The stored prescription

    Raises:
        BackendException: If a number could not be allocated or the insert failed
    """
    payload = prescription_data.model_dump(exclude_unset=True)
    if not payload.get("date"):
        payload["date"] = clinic_today()

    for attempt in range(1, MAX_ALLOCATION_ATTEMPTS + 1):
        sno = get_next_serial(db)
        prescription = build_record(
            Prescription,
            {k: v for k, v in payload.items() if k not in PROTECTED_FIELDS},
            sno=sno,
            receipt_no=format_serial(sno, RECEIPT_PREFIX),
        )
        db.add(prescription)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(f"Serial {sno} was taken concurrently (attempt {attempt})")
            continue
        except Exception as e:
            db.rollback()
            logger.error(f"Error adding prescription: {str(e)}")
            raise BackendException("An error occurred while trying to add prescription")

        db.refresh(prescription)
        logger.info(f"Prescription {prescription.receipt_no} created for patient {prescription.patient_id}")
        return prescription

    raise BackendException("Could not allocate a receipt number, please retry")

def update_prescription(db: Session, prescription_id: str, prescription_data: PrescriptionUpdate) -> Prescription:
    """
    Update a prescription. The id, serial and receipt numbers are never overwritten.

    Raises:
        RecordNotFoundException: If the prescription does not exist
    """
    prescription = get_prescription(db, prescription_id)
    apply_payload(prescription, prescription_data.model_dump(exclude_unset=True), protected=PROTECTED_FIELDS)
    commit_or_raise(db, "update prescription", prescription)
    logger.info(f"Prescription {prescription_id} updated")
    return prescription

def delete_prescription(db: Session, prescription_id: str) -> str:
    """
    Delete a prescription.

    Raises:
        RecordNotFoundException: If the prescription does not exist
    """
    prescription = get_prescription(db, prescription_id)
    db.delete(prescription)
    commit_or_raise(db, "delete prescription")
    logger.info(f"Prescription {prescription_id} deleted")
    return prescription_id

def search_prescriptions(db: Session, term: Optional[str]) -> List[Prescription]:
    """Case-insensitive search over patient number, name, phone and guardian."""
    term = (term or "").strip()
    if not term:
        return get_prescriptions(db)

    pattern = f"%{term}%"
    return (
        db.query(Prescription)
        .filter(or_(
            Prescription.patient_id.ilike(pattern),
            Prescription.patient_name.ilike(pattern),
            Prescription.phone_number.ilike(pattern),
            Prescription.guardian_name.ilike(pattern),
        ))
        .order_by(Prescription.date.desc())
        .all()
    )

def get_dues(db: Session) -> List[Prescription]:
    """Prescriptions with an outstanding balance."""
    return (
        db.query(Prescription)
        .filter(Prescription.amount_due > 0)
        .order_by(Prescription.date.desc())
        .all()
    )

def get_follow_ups(db: Session) -> List[Prescription]:
    """Prescriptions recorded as review visits."""
    return (
        db.query(Prescription)
        .filter(Prescription.paid_for.in_(REVIEW_PAID_FOR))
        .order_by(Prescription.date.desc())
        .all()
    )
