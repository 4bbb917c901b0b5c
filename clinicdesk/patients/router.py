"""
Patient Router - API endpoints for patient registration and lookup.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.permissions import Module
from ..staff.dependencies import require_module
from .schemas import PatientCreate, PatientUpdate, PatientResponse
from . import service

router = APIRouter(dependencies=[Depends(require_module(Module.PATIENTS))])

@router.get("/", response_model=Envelope[List[PatientResponse]])
async def list_patients(db: Session = Depends(get_db)):
    """Get all patients, most recent first."""
    return ok(service.get_patients(db))

@router.get("/today", response_model=Envelope[List[PatientResponse]])
async def list_todays_patients(db: Session = Depends(get_db)):
    """Get patients registered today."""
    return ok(service.get_todays_patients(db))

@router.get("/latest-id", response_model=Envelope[int])
async def latest_patient_id(db: Session = Depends(get_db)):
    """Get the highest numeric patient number in use."""
    return ok(service.get_latest_patient_id(db))

@router.get("/search", response_model=Envelope[List[PatientResponse]])
async def search_patients(
    q: Optional[str] = Query(None, description="Patient number, name or phone"),
    db: Session = Depends(get_db)
):
    """Search patients by number, name or phone."""
    return ok(service.search_patients(db, q))

@router.get("/{patient_id}", response_model=Envelope[PatientResponse])
async def get_patient(patient_id: str, db: Session = Depends(get_db)):
    """Get a patient by patient number or record id."""
    return ok(service.get_patient_by_id(db, patient_id))

@router.post("/", response_model=Envelope[PatientResponse], status_code=201)
async def add_patient(patient_data: PatientCreate, db: Session = Depends(get_db)):
    """Register a new patient."""
    return ok(service.add_patient(db, patient_data), "Patient added successfully")

@router.put("/{record_id}", response_model=Envelope[PatientResponse])
async def update_patient(record_id: str, patient_data: PatientUpdate, db: Session = Depends(get_db)):
    """Update a patient by record id."""
    return ok(service.update_patient(db, record_id, patient_data), "Patient updated successfully")

@router.delete("/{record_id}", response_model=Envelope[str])
async def delete_patient(record_id: str, db: Session = Depends(get_db)):
    """Delete a patient by record id."""
    return ok(service.delete_patient(db, record_id), "Patient deleted successfully")
