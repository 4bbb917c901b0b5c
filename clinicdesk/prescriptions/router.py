"""
Prescription Router - API endpoints for prescriptions, receipts, dues and follow-ups.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.permissions import Module
from ..staff.dependencies import require_module
from .schemas import PrescriptionCreate, PrescriptionUpdate, PrescriptionResponse
from . import service

router = APIRouter(dependencies=[Depends(require_module(Module.PRESCRIPTIONS))])

@router.get("/", response_model=Envelope[List[PrescriptionResponse]])
async def list_prescriptions(db: Session = Depends(get_db)):
    """Get all prescriptions, newest first."""
    return ok(service.get_prescriptions(db))

@router.get("/today", response_model=Envelope[List[PrescriptionResponse]])
async def list_todays_prescriptions(db: Session = Depends(get_db)):
    """Get prescriptions dated today."""
    return ok(service.get_todays_prescriptions(db))

@router.get("/by-date/{day}", response_model=Envelope[List[PrescriptionResponse]])
async def list_prescriptions_by_date(day: str, db: Session = Depends(get_db)):
    """Get prescriptions dated on a day (YYYY-MM-DD)."""
    return ok(service.get_prescriptions_by_date(db, day))

@router.get("/by-patient/{patient_id}", response_model=Envelope[List[PrescriptionResponse]])
async def list_patient_prescriptions(patient_id: str, db: Session = Depends(get_db)):
    """Get the prescriptions of a patient."""
    return ok(service.get_prescriptions_by_patient(db, patient_id))

@router.get("/next-serial", response_model=Envelope[int])
async def next_serial(db: Session = Depends(get_db)):
    """Get the serial number the next prescription will receive."""
    return ok(service.get_next_serial(db))

@router.get("/search", response_model=Envelope[List[PrescriptionResponse]])
async def search_prescriptions(
    q: Optional[str] = Query(None, description="Patient number, name, phone or guardian"),
    db: Session = Depends(get_db)
):
    """Search prescriptions."""
    return ok(service.search_prescriptions(db, q))

@router.get("/dues", response_model=Envelope[List[PrescriptionResponse]])
async def list_dues(db: Session = Depends(get_db)):
    """Get prescriptions with an outstanding balance."""
    return ok(service.get_dues(db))

@router.get("/follow-ups", response_model=Envelope[List[PrescriptionResponse]])
async def list_follow_ups(db: Session = Depends(get_db)):
    """Get prescriptions recorded as review visits."""
    return ok(service.get_follow_ups(db))

@router.get("/{prescription_id}", response_model=Envelope[PrescriptionResponse])
async def get_prescription(prescription_id: str, db: Session = Depends(get_db)):
    """Get a prescription by record id."""
    return ok(service.get_prescription(db, prescription_id))

@router.post("/", response_model=Envelope[PrescriptionResponse], status_code=201)
async def add_prescription(prescription_data: PrescriptionCreate, db: Session = Depends(get_db)):
    """Create a prescription; serial and receipt numbers are allocated automatically."""
    return ok(service.add_prescription(db, prescription_data), "Prescription added successfully")

@router.put("/{prescription_id}", response_model=Envelope[PrescriptionResponse])
async def update_prescription(
    prescription_id: str,
    prescription_data: PrescriptionUpdate,
    db: Session = Depends(get_db)
):
    """Update a prescription."""
    return ok(service.update_prescription(db, prescription_id, prescription_data), "Prescription updated successfully")

@router.delete("/{prescription_id}", response_model=Envelope[str])
async def delete_prescription(prescription_id: str, db: Session = Depends(get_db)):
    """Delete a prescription."""
    return ok(service.delete_prescription(db, prescription_id), "Prescription deleted successfully")
