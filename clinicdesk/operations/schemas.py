"""
Operation Schemas - Pydantic models for operations and in-patients.
"""
from typing import Optional, Dict, Any, List
from pydantic import BaseModel
import datetime as dt

class OperationBase(BaseModel):
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    date_of_admit: Optional[dt.date] = None
    time_of_admit: Optional[str] = None
    date_of_operation: Optional[dt.date] = None
    time_of_operation: Optional[str] = None
    date_of_discharge: Optional[dt.date] = None
    time_of_discharge: Optional[str] = None
    operation_details: Optional[str] = None
    operation_procedure: Optional[str] = None
    provision_diagnosis: Optional[str] = None
    review_on: Optional[dt.date] = None
    operated_by: Optional[str] = None
    total_amount: Optional[float] = None
    bill_number: Optional[str] = None
    created_by: Optional[str] = None

    class Config:
        extra = "allow"

class OperationCreate(OperationBase):
    """New operation; a blank bill number is allocated by the server"""
    pass

class OperationUpdate(OperationBase):
    """Partial update; a blank bill number keeps the stored one"""
    pass

class OperationResponse(OperationBase):
    id: str
    patient_id: str
    extra: Optional[Dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
        extra = "ignore"


class InPatientBase(BaseModel):
    patient_id: Optional[str] = None
    name: Optional[str] = None
    age: Optional[str] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    dob: Optional[dt.date] = None
    guardian_name: Optional[str] = None
    operation_name: Optional[str] = None
    operation_date: Optional[dt.date] = None
    operation_details: Optional[str] = None
    operation_procedure: Optional[str] = None
    provision_diagnosis: Optional[str] = None
    department: Optional[str] = None
    doctor_names: Optional[List[str]] = None
    on_duty_doctor: Optional[str] = None
    prescriptions: Optional[List[Dict[str, Any]]] = None
    date: Optional[dt.date] = None

    class Config:
        extra = "allow"

class InPatientCreate(InPatientBase):
    pass

class InPatientUpdate(InPatientBase):
    pass

class InPatientResponse(InPatientBase):
    id: str
    patient_id: str
    extra: Optional[Dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
        extra = "ignore"
