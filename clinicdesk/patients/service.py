"""
Patient Service - Business logic for patient registration and lookup.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import or_
import logging

from ..exceptions import ValidationFailedException, RecordNotFoundException, ConflictException
from ..core.dates import clinic_today, day_bounds_utc
from ..core.numbering import parse_serial
from ..core.records import build_record, apply_payload, commit_or_raise, utcnow
from .models import Patient
from .schemas import PatientCreate, PatientUpdate

# Set up logging
logger = logging.getLogger(__name__)

def get_todays_patients(db: Session) -> List[Patient]:
    """Patients registered today (clinic local time), newest first."""
    start, end = day_bounds_utc(clinic_today())
    return (
        db.query(Patient)
        .filter(Patient.created_at >= start, Patient.created_at < end)
        .order_by(Patient.created_at.desc())
        .all()
    )

def get_patients(db: Session) -> List[Patient]:
    """All patients, most recent registration date first."""
    return db.query(Patient).order_by(Patient.date.desc(), Patient.created_at.desc()).all()

def get_patient_by_id(db: Session, patient_id: Optional[str]) -> Patient:
    """
    Look up a patient by patient number, falling back to the record id.

    Args:
        db: Database session
        patient_id: Patient number or record id

    Returns:
        Patient: The matching patient

    Raises:
        ValidationFailedException: If no id was given
        RecordNotFoundException: If nothing matches
    """
    key = (patient_id or "").strip()
    if not key:
        raise ValidationFailedException("Patient ID is required")

    patient = db.query(Patient).filter(Patient.patient_id == key).first()
    if not patient:
        patient = db.query(Patient).filter(Patient.id == key).first()
    if not patient:
        raise RecordNotFoundException(f"No patient found with ID: {key}")
    return patient

def get_latest_patient_id(db: Session) -> int:
    """
    Highest numeric patient number in use.

    Non-numeric patient numbers are ignored. Returns 0 when there are none.
    """
    numbers = [parse_serial(value) for (value,) in db.query(Patient.patient_id).all()]
    numbers = [n for n in numbers if n is not None]
    return max(numbers) if numbers else 0

def add_patient(db: Session, patient_data: PatientCreate) -> Patient:
    """
    Register a new patient.

    Args:
        db: Database session
        patient_data: Registration details

    Returns:
        Patient: The created patient

    Raises:
        ValidationFailedException: If patient number or name is missing
        ConflictException: If the patient number is already registered
    """
    payload = patient_data.model_dump(exclude_unset=True)
    patient_number = str(payload.get("patient_id") or "").strip()
    name = (payload.get("name") or "").strip()
    if not patient_number or not name:
        raise ValidationFailedException("Missing required patient information")

    if db.query(Patient).filter(Patient.patient_id == patient_number).first():
        raise ConflictException(f"Patient with ID {patient_number} already exists")

    payload.update(patient_id=patient_number, name=name)
    if not payload.get("date"):
        payload["date"] = clinic_today()
    patient = build_record(Patient, payload)

    db.add(patient)
    commit_or_raise(db, "add patient", patient)
    logger.info(f"Patient {patient.patient_id} registered (id {patient.id})")
    return patient

def update_patient(db: Session, record_id: Optional[str], patient_data: PatientUpdate) -> Patient:
    """
    Update a patient by record id.

    Args:
        db: Database session
        record_id: Record id of the patient
        patient_data: Fields to change

    Returns:
        Patient: Updated patient

    Raises:
        ValidationFailedException: If no id was given
        RecordNotFoundException: If the patient does not exist
        ConflictException: If the new patient number is taken
    """
    if not (record_id or "").strip():
        raise ValidationFailedException("Patient ID is required for update")

    patient = db.query(Patient).filter(Patient.id == record_id).first()
    if not patient:
        raise RecordNotFoundException(f"Patient with ID {record_id} not found")

    payload = patient_data.model_dump(exclude_unset=True)
    new_number = payload.get("patient_id")
    if new_number is not None:
        new_number = str(new_number).strip()
        if not new_number:
            raise ValidationFailedException("Patient number cannot be empty")
        clash = db.query(Patient).filter(Patient.patient_id == new_number, Patient.id != record_id).first()
        if clash:
            raise ConflictException(f"Patient with ID {new_number} already exists")
        payload["patient_id"] = new_number
    if "name" in payload and not (payload["name"] or "").strip():
        raise ValidationFailedException("Patient name cannot be empty")

    apply_payload(patient, payload)
    patient.updated_at = utcnow()
    commit_or_raise(db, "update patient", patient)
    logger.info(f"Patient {record_id} updated")
    return patient

def delete_patient(db: Session, record_id: str) -> str:
    """
    Delete a patient after checking that it exists.

    Returns:
        str: The deleted record id

    Raises:
        RecordNotFoundException: If the patient does not exist
    """
    patient = db.query(Patient).filter(Patient.id == record_id).first()
    if not patient:
        raise RecordNotFoundException(f"Patient with ID {record_id} not found")

    db.delete(patient)
    commit_or_raise(db, "delete patient")
    logger.info(f"Patient {record_id} deleted")
    return record_id

def search_patients(db: Session, term: Optional[str]) -> List[Patient]:
    """
    Case-insensitive search over patient number, name and phone.
    A blank term returns every patient.
    """
    term = (term or "").strip()
    if not term:
        return get_patients(db)

    pattern = f"%{term}%"
    return (
        db.query(Patient)
        .filter(or_(
            Patient.patient_id.ilike(pattern),
            Patient.name.ilike(pattern),
            Patient.phone.ilike(pattern),
        ))
        .order_by(Patient.date.desc())
        .all()
    )
