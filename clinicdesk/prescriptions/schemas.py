"""
Prescription Schemas - Pydantic models for prescriptions / receipts.
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel
import datetime as dt

class PrescriptionBase(BaseModel):
    """
    Base Prescription Schema - every field optional

    Eye-exam readings and other form fields not listed here are accepted
    and stored in the extension map.
    """
    date: Optional[dt.date] = None
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    guardian_name: Optional[str] = None
    phone_number: Optional[str] = None
    age: Optional[str] = None
    gender: Optional[str] = None
    address: Optional[str] = None
    doctor_name: Optional[str] = None
    department: Optional[str] = None
    referred_by: Optional[str] = None
    paid_for: Optional[str] = None
    mode: Optional[str] = None
    total_amount: Optional[float] = None
    advance_paid: Optional[float] = None
    amount_received: Optional[float] = None
    discount: Optional[float] = None
    amount_due: Optional[float] = None
    present_complain: Optional[str] = None
    previous_history: Optional[str] = None
    others: Optional[str] = None
    diagnosis: Optional[str] = None
    review_on: Optional[dt.date] = None
    created_by: Optional[str] = None

    class Config:
        extra = "allow"

class PrescriptionCreate(PrescriptionBase):
    """New prescription; serial and receipt numbers are allocated by the server"""
    pass

class PrescriptionUpdate(PrescriptionBase):
    """Partial prescription update; serial and receipt numbers never change"""
    pass

class PrescriptionResponse(PrescriptionBase):
    """Stored prescription"""
    id: str
    sno: int
    receipt_no: str
    extra: Optional[Dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        """Configuration for Pydantic model"""
        from_attributes = True
        extra = "ignore"
