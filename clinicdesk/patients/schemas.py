"""
Patient Schemas - Pydantic models for patient registration and updates.
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel
import datetime as dt

class PatientBase(BaseModel):
    """
    Base Patient Schema

    Fields:
    - patient_id: Human readable patient number
    - name: Patient's name
    - guardian, dob, age, gender, phone, address: Demographics
    - doctor_name, department, referred_by, status, created_by: Registration details
    - date: Registration date (defaults to today)
    """
    patient_id: Optional[str] = None
    name: Optional[str] = None
    guardian: Optional[str] = None
    dob: Optional[dt.date] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    doctor_name: Optional[str] = None
    department: Optional[str] = None
    referred_by: Optional[str] = None
    status: Optional[str] = None
    created_by: Optional[str] = None
    date: Optional[dt.date] = None

class PatientCreate(PatientBase):
    """Patient registration; unknown fields are kept in the extension map"""
    class Config:
        extra = "allow"

class PatientUpdate(PatientBase):
    """Partial patient update; only fields that were sent change"""
    class Config:
        extra = "allow"

class PatientResponse(PatientBase):
    """Stored patient record"""
    id: str
    patient_id: str
    name: str
    extra: Optional[Dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        """Configuration for Pydantic model"""
        from_attributes = True
