"""
Lab Service - Business logic for lab billing records.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
import logging

from ..exceptions import ValidationFailedException, RecordNotFoundException
from ..core.dates import clinic_today
from ..core.records import build_record, apply_payload, commit_or_raise
from .models import LabRecord, LabType
from .schemas import LabCreate, LabUpdate

# Set up logging
logger = logging.getLogger(__name__)

def get_lab(db: Session, lab_id: str) -> LabRecord:
    """
    Get a lab record by id.

    Raises:
        RecordNotFoundException: If the record does not exist
    """
    lab = db.query(LabRecord).filter(LabRecord.id == lab_id).first()
    if not lab:
        raise RecordNotFoundException(f"Lab record with ID {lab_id} not found")
    return lab

def get_labs(db: Session) -> List[LabRecord]:
    """All lab records, newest date first."""
    return db.query(LabRecord).order_by(LabRecord.date.desc(), LabRecord.created_at.desc()).all()

def get_todays_labs(db: Session) -> List[LabRecord]:
    """Lab records dated today."""
    return (
        db.query(LabRecord)
        .filter(LabRecord.date == clinic_today())
        .order_by(LabRecord.created_at.desc())
        .all()
    )

def add_lab(db: Session, lab_data: LabCreate) -> LabRecord:
    """
    Create a lab record. The date defaults to today and the type to regular.
    """
    payload = lab_data.model_dump(exclude_unset=True)
    if not payload.get("date"):
        payload["date"] = clinic_today()
    if not payload.get("type"):
        payload["type"] = LabType.REGULAR.value

    lab = build_record(LabRecord, payload)
    db.add(lab)
    commit_or_raise(db, "add lab record", lab)
    logger.info(f"Lab record {lab.id} ({lab.type}) created for patient {lab.patient_id}")
    return lab

def update_lab(db: Session, lab_id: Optional[str], lab_data: LabUpdate) -> LabRecord:
    """
    Update a lab record.

    Raises:
        ValidationFailedException: If no id was given
        RecordNotFoundException: If the record does not exist
    """
    if not lab_id:
        raise ValidationFailedException("Lab ID is required for update")
    lab = get_lab(db, lab_id)
    apply_payload(lab, lab_data.model_dump(exclude_unset=True))
    commit_or_raise(db, "update lab record", lab)
    logger.info(f"Lab record {lab_id} updated")
    return lab

def delete_lab(db: Session, lab_id: str) -> str:
    """
    Delete a lab record.

    Raises:
        RecordNotFoundException: If the record does not exist
    """
    lab = get_lab(db, lab_id)
    db.delete(lab)
    commit_or_raise(db, "delete lab record")
    logger.info(f"Lab record {lab_id} deleted")
    return lab_id

def search_labs(db: Session, patient_id: Optional[str]) -> List[LabRecord]:
    """Lab records whose patient number contains the term; a blank term returns all."""
    term = (patient_id or "").strip()
    if not term:
        return get_labs(db)
    return (
        db.query(LabRecord)
        .filter(LabRecord.patient_id.ilike(f"%{term}%"))
        .order_by(LabRecord.date.desc())
        .all()
    )
