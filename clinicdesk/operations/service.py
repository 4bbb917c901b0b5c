"""
Operation Service - Business logic for operations and in-patients.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from ..exceptions import ValidationFailedException, RecordNotFoundException, ConflictException, BackendException
from ..core.dates import clinic_today
from ..core.numbering import next_prefixed_number
from ..core.records import build_record, apply_payload, commit_or_raise, utcnow
from .models import Operation, InPatient
from .schemas import OperationCreate, OperationUpdate, InPatientCreate, InPatientUpdate

# Set up logging
logger = logging.getLogger(__name__)

BILL_PREFIX = "O"
MAX_ALLOCATION_ATTEMPTS = 3

# ============================================================================
# Operations
# ============================================================================

def get_operation(db: Session, operation_id: str) -> Operation:
    """
    Get an operation by record id.

    Raises:
        RecordNotFoundException: If the operation does not exist
    """
    operation = db.query(Operation).filter(Operation.id == operation_id).first()
    if not operation:
        raise RecordNotFoundException(f"Operation with ID {operation_id} not found")
    return operation

def get_operations(db: Session) -> List[Operation]:
    """All operations, latest operation date first."""
    return (
        db.query(Operation)
        .order_by(Operation.date_of_operation.desc(), Operation.created_at.desc())
        .all()
    )

def get_patient_operations(db: Session, patient_id: str) -> List[Operation]:
    """Operations of one patient, latest first."""
    return (
        db.query(Operation)
        .filter(Operation.patient_id == patient_id)
        .order_by(Operation.date_of_operation.desc())
        .all()
    )

def next_bill_number(db: Session) -> str:
    """Bill number the next operation without one will receive."""
    return next_prefixed_number((value for (value,) in db.query(Operation.bill_number).all()), BILL_PREFIX)

def add_operation(db: Session, operation_data: OperationCreate) -> Operation:
    """
    Record an operation.

    When no bill number is given one is allocated; a collision with a
    concurrently allocated number is retried.

    Args:
        db: Database session
        operation_data: Operation fields

    Returns:
        Operation: The stored operation

    Raises:
        ValidationFailedException: If the patient id is missing
        BackendException: If the insert failed
    """
    payload = operation_data.model_dump(exclude_unset=True)
    if not (payload.get("patient_id") or "").strip():
        raise ValidationFailedException("Patient ID is required")

    explicit_bill = (payload.pop("bill_number", None) or "").strip()

    for attempt in range(1, MAX_ALLOCATION_ATTEMPTS + 1):
        bill_number = explicit_bill or next_bill_number(db)
        operation = build_record(Operation, payload, bill_number=bill_number)
        db.add(operation)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if explicit_bill:
                raise ConflictException(f"Bill number {explicit_bill} is already in use")
            logger.warning(f"Bill number {bill_number} was taken concurrently (attempt {attempt})")
            continue
        except Exception as e:
            db.rollback()
            logger.error(f"Error adding operation: {str(e)}")
            raise BackendException("An error occurred while trying to add operation")

        db.refresh(operation)
        logger.info(f"Operation {operation.bill_number} recorded for patient {operation.patient_id}")
        return operation

    raise BackendException("Could not allocate a bill number, please retry")

def update_operation(db: Session, operation_id: str, operation_data: OperationUpdate) -> Operation:
    """
    Update an operation.

    A blank bill number in the update keeps the stored bill number and creator.

    Raises:
        RecordNotFoundException: If the operation does not exist
    """
    operation = get_operation(db, operation_id)
    payload = operation_data.model_dump(exclude_unset=True)

    if "bill_number" in payload and not (payload["bill_number"] or "").strip():
        payload.pop("bill_number")
        payload.pop("created_by", None)

    apply_payload(operation, payload)
    operation.updated_at = utcnow()
    commit_or_raise(db, "update operation", operation)
    logger.info(f"Operation {operation_id} updated")
    return operation

def delete_operation(db: Session, operation_id: str) -> str:
    """
    Delete an operation.

    Raises:
        RecordNotFoundException: If the operation does not exist
    """
    operation = get_operation(db, operation_id)
    db.delete(operation)
    commit_or_raise(db, "delete operation")
    logger.info(f"Operation {operation_id} deleted")
    return operation_id

# ============================================================================
# In-patients
# ============================================================================

def get_inpatient(db: Session, inpatient_id: str) -> InPatient:
    """
    Get an in-patient by record id.

    Raises:
        RecordNotFoundException: If the in-patient does not exist
    """
    inpatient = db.query(InPatient).filter(InPatient.id == inpatient_id).first()
    if not inpatient:
        raise RecordNotFoundException(f"In-patient with ID {inpatient_id} not found")
    return inpatient

def get_inpatients(db: Session) -> List[InPatient]:
    """All in-patients, latest admission first."""
    return db.query(InPatient).order_by(InPatient.date.desc(), InPatient.created_at.desc()).all()

def get_latest_inpatient_id(db: Session) -> Optional[str]:
    """Patient number of the most recently admitted in-patient, if any."""
    latest = db.query(InPatient.patient_id).order_by(InPatient.created_at.desc()).first()
    return latest[0] if latest else None

def add_inpatient(db: Session, inpatient_data: InPatientCreate) -> InPatient:
    """
    Admit an in-patient.

    Raises:
        ValidationFailedException: If the patient id is missing
    """
    payload = inpatient_data.model_dump(exclude_unset=True)
    if not (payload.get("patient_id") or "").strip():
        raise ValidationFailedException("Patient ID is required")
    if not payload.get("date"):
        payload["date"] = clinic_today()

    inpatient = build_record(InPatient, payload)
    db.add(inpatient)
    commit_or_raise(db, "add in-patient", inpatient)
    logger.info(f"In-patient {inpatient.id} admitted for patient {inpatient.patient_id}")
    return inpatient

def update_inpatient(db: Session, inpatient_id: str, inpatient_data: InPatientUpdate) -> InPatient:
    """
    Update an in-patient, e.g. to record operation notes or discharge prescriptions.

    Raises:
        RecordNotFoundException: If the in-patient does not exist
    """
    inpatient = get_inpatient(db, inpatient_id)
    apply_payload(inpatient, inpatient_data.model_dump(exclude_unset=True))
    inpatient.updated_at = utcnow()
    commit_or_raise(db, "update in-patient", inpatient)
    logger.info(f"In-patient {inpatient_id} updated")
    return inpatient

def delete_inpatient(db: Session, inpatient_id: str) -> str:
    """
    Delete an in-patient.

    Raises:
        RecordNotFoundException: If the in-patient does not exist
    """
    inpatient = get_inpatient(db, inpatient_id)
    db.delete(inpatient)
    commit_or_raise(db, "delete in-patient")
    logger.info(f"In-patient {inpatient_id} deleted")
    return inpatient_id
