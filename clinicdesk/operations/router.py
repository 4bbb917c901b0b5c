"""
Operation Router - API endpoints for operations and in-patients.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.permissions import Module
from ..staff.dependencies import require_module
from .schemas import (
    OperationCreate,
    OperationUpdate,
    OperationResponse,
    InPatientCreate,
    InPatientUpdate,
    InPatientResponse,
)
from . import service

router = APIRouter(dependencies=[Depends(require_module(Module.OPERATIONS))])
inpatient_router = APIRouter(dependencies=[Depends(require_module(Module.OPERATIONS))])

@router.get("/", response_model=Envelope[List[OperationResponse]])
async def list_operations(db: Session = Depends(get_db)):
    """Get all operations, latest first."""
    return ok(service.get_operations(db))

@router.get("/by-patient/{patient_id}", response_model=Envelope[List[OperationResponse]])
async def list_patient_operations(patient_id: str, db: Session = Depends(get_db)):
    """Get the operations of a patient."""
    return ok(service.get_patient_operations(db, patient_id))

@router.get("/{operation_id}", response_model=Envelope[OperationResponse])
async def get_operation(operation_id: str, db: Session = Depends(get_db)):
    """Get an operation by record id."""
    return ok(service.get_operation(db, operation_id))

@router.post("/", response_model=Envelope[OperationResponse], status_code=201)
async def add_operation(operation_data: OperationCreate, db: Session = Depends(get_db)):
    """Record an operation."""
    return ok(service.add_operation(db, operation_data), "Operation added successfully")

@router.put("/{operation_id}", response_model=Envelope[OperationResponse])
async def update_operation(operation_id: str, operation_data: OperationUpdate, db: Session = Depends(get_db)):
    """Update an operation."""
    return ok(service.update_operation(db, operation_id, operation_data), "Operation updated successfully")

@router.delete("/{operation_id}", response_model=Envelope[str])
async def delete_operation(operation_id: str, db: Session = Depends(get_db)):
    """Delete an operation."""
    return ok(service.delete_operation(db, operation_id), "Operation deleted successfully")


@inpatient_router.get("/", response_model=Envelope[List[InPatientResponse]])
async def list_inpatients(db: Session = Depends(get_db)):
    """Get all in-patients, latest admission first."""
    return ok(service.get_inpatients(db))

@inpatient_router.get("/latest-id", response_model=Envelope[Optional[str]])
async def latest_inpatient_id(db: Session = Depends(get_db)):
    """Get the patient number of the most recent admission."""
    return ok(service.get_latest_inpatient_id(db))

@inpatient_router.get("/{inpatient_id}", response_model=Envelope[InPatientResponse])
async def get_inpatient(inpatient_id: str, db: Session = Depends(get_db)):
    """Get an in-patient by record id."""
    return ok(service.get_inpatient(db, inpatient_id))

@inpatient_router.post("/", response_model=Envelope[InPatientResponse], status_code=201)
async def add_inpatient(inpatient_data: InPatientCreate, db: Session = Depends(get_db)):
    """Admit an in-patient."""
    return ok(service.add_inpatient(db, inpatient_data), "In-patient added successfully")

@inpatient_router.put("/{inpatient_id}", response_model=Envelope[InPatientResponse])
async def update_inpatient(inpatient_id: str, inpatient_data: InPatientUpdate, db: Session = Depends(get_db)):
    """Update an in-patient."""
    return ok(service.update_inpatient(db, inpatient_id, inpatient_data), "In-patient updated successfully")

@inpatient_router.delete("/{inpatient_id}", response_model=Envelope[str])
async def delete_inpatient(inpatient_id: str, db: Session = Depends(get_db)):
    """Delete an in-patient."""
    return ok(service.delete_inpatient(db, inpatient_id), "In-patient deleted successfully")
