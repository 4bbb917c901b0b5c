"""
Medicine Router - API endpoints for medicine stock and dispensing.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.pagination import PageParams, PageResponse
from ..core.permissions import Module
from ..staff.dependencies import require_module
from .models import StockStatus
from .schemas import (
    MedicineCreate,
    MedicineUpdate,
    MedicineStatusUpdate,
    MedicineResponse,
    MedicineDispenseRequest,
    MedicineDispenseRecordResponse,
    MedicineDispenseResult,
)
from . import service

router = APIRouter(dependencies=[Depends(require_module(Module.MEDICINES))])

@router.get("/", response_model=Envelope[List[MedicineResponse]])
async def list_medicines(db: Session = Depends(get_db)):
    """Get all medicines ordered by name."""
    return ok(service.get_medicines(db))

@router.get("/search", response_model=Envelope[List[MedicineResponse]])
async def search_medicines(
    q: Optional[str] = Query(None, description="Medicine name"),
    db: Session = Depends(get_db)
):
    """Search medicines by name."""
    return ok(service.search_medicines(db, q))

@router.get("/status/{status}", response_model=Envelope[List[MedicineResponse]])
async def list_medicines_by_status(status: StockStatus, db: Session = Depends(get_db)):
    """Get medicines in a stock status."""
    return ok(service.get_medicines_by_status(db, status.value))

@router.get("/dispense-records", response_model=Envelope[PageResponse[MedicineDispenseRecordResponse]])
async def list_dispense_records(page_params: PageParams = Depends(), db: Session = Depends(get_db)):
    """Get the dispense log one page at a time, newest first."""
    return ok(service.get_dispense_records(db, page_params.page, page_params.size))

@router.get("/dispense-records/patient/{patient_id}", response_model=Envelope[List[MedicineDispenseRecordResponse]])
async def list_patient_dispense_records(patient_id: str, db: Session = Depends(get_db)):
    """Get the medicines dispensed to a patient."""
    return ok(service.get_dispense_records_by_patient(db, patient_id))

@router.get("/dispense-records/medicine/{medicine_id}", response_model=Envelope[List[MedicineDispenseRecordResponse]])
async def list_medicine_dispense_records(medicine_id: str, db: Session = Depends(get_db)):
    """Get the dispense log of one stock row."""
    return ok(service.get_dispense_records_by_medicine(db, medicine_id))

@router.get("/{medicine_id}", response_model=Envelope[MedicineResponse])
async def get_medicine(medicine_id: str, db: Session = Depends(get_db)):
    """Get a medicine by id."""
    return ok(service.get_medicine(db, medicine_id))

@router.post("/", response_model=Envelope[MedicineResponse], status_code=201)
async def add_medicine(medicine_data: MedicineCreate, db: Session = Depends(get_db)):
    """Add a medicine to stock."""
    return ok(service.add_medicine(db, medicine_data), "Medicine added successfully")

@router.put("/{medicine_id}", response_model=Envelope[MedicineResponse])
async def update_medicine(medicine_id: str, medicine_data: MedicineUpdate, db: Session = Depends(get_db)):
    """Update a medicine."""
    return ok(service.update_medicine(db, medicine_id, medicine_data), "Medicine updated successfully")

@router.patch("/{medicine_id}/status", response_model=Envelope[MedicineResponse])
async def update_medicine_status(
    medicine_id: str,
    status_data: MedicineStatusUpdate,
    db: Session = Depends(get_db)
):
    """Set the stock status of a medicine."""
    return ok(service.update_medicine_status(db, medicine_id, status_data.status), "Medicine status updated successfully")

@router.delete("/{medicine_id}", response_model=Envelope[str])
async def delete_medicine(medicine_id: str, db: Session = Depends(get_db)):
    """Delete a medicine."""
    return ok(service.delete_medicine(db, medicine_id), "Medicine deleted successfully")

@router.post("/{medicine_id}/dispense", response_model=Envelope[MedicineDispenseResult])
async def dispense_medicine(
    medicine_id: str,
    dispense_data: MedicineDispenseRequest,
    db: Session = Depends(get_db)
):
    """
    Dispense medicine to a patient.

    Fails without changing anything when more is requested than is in stock.
    """
    medicine, record = service.dispense_medicine(db, medicine_id, dispense_data)
    return ok({"medicine": medicine, "record": record}, "Medicine dispensed successfully")
