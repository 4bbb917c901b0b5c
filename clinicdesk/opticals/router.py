"""
Optical Router - API endpoints for frames, lenses and optical dispensing.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.pagination import PageParams, PageResponse
from ..core.permissions import Module
from ..staff.dependencies import require_module
from ..medicines.models import StockStatus
from .models import OpticalType
from .schemas import (
    OpticalCreate,
    OpticalUpdate,
    OpticalStatusUpdate,
    OpticalResponse,
    OpticalDispenseRequest,
    OpticalDispenseRecordResponse,
    OpticalDispenseResult,
)
from . import service

router = APIRouter(dependencies=[Depends(require_module(Module.OPTICALS))])

@router.get("/", response_model=Envelope[List[OpticalResponse]])
async def list_opticals(
    type: Optional[OpticalType] = Query(None, description="frame or lens"),
    db: Session = Depends(get_db)
):
    """Get optical items, optionally of one type."""
    return ok(service.get_opticals(db, type.value if type else None))

@router.get("/search", response_model=Envelope[List[OpticalResponse]])
async def search_opticals(
    q: Optional[str] = Query(None, description="Brand, model, type or size"),
    db: Session = Depends(get_db)
):
    """Search optical items."""
    return ok(service.search_opticals(db, q))

@router.get("/type/{optical_type}", response_model=Envelope[List[OpticalResponse]])
async def list_opticals_by_type(optical_type: OpticalType, db: Session = Depends(get_db)):
    """Get optical items of one type."""
    return ok(service.get_opticals_by_type(db, optical_type.value))

@router.get("/status/{status}", response_model=Envelope[List[OpticalResponse]])
async def list_opticals_by_status(
    status: StockStatus,
    type: Optional[OpticalType] = Query(None, description="frame or lens"),
    db: Session = Depends(get_db)
):
    """Get optical items in a stock status, optionally of one type."""
    return ok(service.get_opticals_by_status(db, status.value, type.value if type else None))

@router.get("/status/{status}/type/{optical_type}", response_model=Envelope[List[OpticalResponse]])
async def list_opticals_by_status_and_type(
    status: StockStatus,
    optical_type: OpticalType,
    db: Session = Depends(get_db)
):
    """Get optical items matching a status and a type."""
    return ok(service.get_opticals_by_status_and_type(db, status.value, optical_type.value))

@router.get("/dispense-records", response_model=Envelope[PageResponse[OpticalDispenseRecordResponse]])
async def list_dispense_records(
    page_params: PageParams = Depends(),
    type: Optional[OpticalType] = Query(None, description="frame or lens"),
    db: Session = Depends(get_db)
):
    """Get the optical dispense log one page at a time, newest first."""
    return ok(service.get_dispense_records(db, page_params.page, page_params.size, type.value if type else None))

@router.get("/dispense-records/patient/{patient_id}", response_model=Envelope[List[OpticalDispenseRecordResponse]])
async def list_patient_dispense_records(patient_id: str, db: Session = Depends(get_db)):
    """Get the optical items dispensed to a patient."""
    return ok(service.get_dispense_records_by_patient(db, patient_id))

@router.get("/dispense-records/type/{optical_type}", response_model=Envelope[List[OpticalDispenseRecordResponse]])
async def list_type_dispense_records(optical_type: OpticalType, db: Session = Depends(get_db)):
    """Get the dispense log for frames or lenses."""
    return ok(service.get_dispense_records_by_type(db, optical_type.value))

@router.get("/dispense-records/optical/{optical_id}", response_model=Envelope[List[OpticalDispenseRecordResponse]])
async def list_optical_dispense_records(optical_id: str, db: Session = Depends(get_db)):
    """Get the dispense log of one stock row."""
    return ok(service.get_dispense_records_by_optical(db, optical_id))

@router.get("/{optical_id}", response_model=Envelope[OpticalResponse])
async def get_optical(optical_id: str, db: Session = Depends(get_db)):
    """Get an optical item by id."""
    return ok(service.get_optical(db, optical_id))

@router.post("/", response_model=Envelope[OpticalResponse], status_code=201)
async def add_optical(optical_data: OpticalCreate, db: Session = Depends(get_db)):
    """Add a frame or lens to stock."""
    return ok(service.add_optical(db, optical_data), "Optical item added successfully")

@router.put("/{optical_id}", response_model=Envelope[OpticalResponse])
async def update_optical(optical_id: str, optical_data: OpticalUpdate, db: Session = Depends(get_db)):
    """Update an optical item."""
    return ok(service.update_optical(db, optical_id, optical_data), "Optical item updated successfully")

@router.patch("/{optical_id}/status", response_model=Envelope[OpticalResponse])
async def update_optical_status(optical_id: str, status_data: OpticalStatusUpdate, db: Session = Depends(get_db)):
    """Set the stock status of an optical item."""
    return ok(service.update_optical_status(db, optical_id, status_data.status), "Optical status updated successfully")

@router.delete("/{optical_id}", response_model=Envelope[str])
async def delete_optical(optical_id: str, db: Session = Depends(get_db)):
    """Delete an optical item."""
    return ok(service.delete_optical(db, optical_id), "Optical item deleted successfully")

@router.post("/{optical_id}/dispense", response_model=Envelope[OpticalDispenseResult])
async def dispense_optical(
    optical_id: str,
    dispense_data: OpticalDispenseRequest,
    db: Session = Depends(get_db)
):
    """Dispense a frame or lens to a patient."""
    optical, record = service.dispense_optical(db, optical_id, dispense_data)
    return ok({"optical": optical, "record": record}, "Optical item dispensed successfully")
