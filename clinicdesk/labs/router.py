"""
Lab Router - API endpoints for lab billing records.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.permissions import Module
from ..staff.dependencies import require_module
from .schemas import LabCreate, LabUpdate, LabResponse
from . import service

router = APIRouter(dependencies=[Depends(require_module(Module.LABS))])

@router.get("/", response_model=Envelope[List[LabResponse]])
async def list_labs(db: Session = Depends(get_db)):
    """Get all lab records, newest first."""
    return ok(service.get_labs(db))

@router.get("/today", response_model=Envelope[List[LabResponse]])
async def list_todays_labs(db: Session = Depends(get_db)):
    """Get lab records dated today."""
    return ok(service.get_todays_labs(db))

@router.get("/search", response_model=Envelope[List[LabResponse]])
async def search_labs(
    patient_id: Optional[str] = Query(None, description="Patient number"),
    db: Session = Depends(get_db)
):
    """Search lab records by patient number."""
    return ok(service.search_labs(db, patient_id))

@router.get("/{lab_id}", response_model=Envelope[LabResponse])
async def get_lab(lab_id: str, db: Session = Depends(get_db)):
    """Get a lab record by id."""
    return ok(service.get_lab(db, lab_id))

@router.post("/", response_model=Envelope[LabResponse], status_code=201)
async def add_lab(lab_data: LabCreate, db: Session = Depends(get_db)):
    """Create a lab record."""
    return ok(service.add_lab(db, lab_data), "Lab record added successfully")

@router.put("/{lab_id}", response_model=Envelope[LabResponse])
async def update_lab(lab_id: str, lab_data: LabUpdate, db: Session = Depends(get_db)):
    """Update a lab record."""
    return ok(service.update_lab(db, lab_id, lab_data), "Lab record updated successfully")

@router.delete("/{lab_id}", response_model=Envelope[str])
async def delete_lab(lab_id: str, db: Session = Depends(get_db)):
    """Delete a lab record."""
    return ok(service.delete_lab(db, lab_id), "Lab record deleted successfully")
