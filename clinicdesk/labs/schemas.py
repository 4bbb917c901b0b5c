"""
Lab Schemas - Pydantic models for lab records.
"""
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field
import datetime as dt

from .models import LabType, MAX_LAB_SLOTS

class LabSlot(BaseModel):
    """One test/amount pair"""
    name: str
    amount: float = 0

class LabBase(BaseModel):
    date: Optional[dt.date] = None
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    type: Optional[LabType] = None
    tests: Optional[List[LabSlot]] = Field(None, max_length=MAX_LAB_SLOTS)
    vtests: Optional[List[LabSlot]] = Field(None, max_length=MAX_LAB_SLOTS)
    total_amount: Optional[float] = None
    discount_percentage: Optional[float] = Field(None, ge=0, le=100)
    amount_received: Optional[float] = None
    amount_due: Optional[float] = None
    vamount_received: Optional[float] = None

    class Config:
        extra = "allow"
        use_enum_values = True

class LabCreate(LabBase):
    pass

class LabUpdate(LabBase):
    pass

class LabResponse(LabBase):
    id: str
    type: str
    extra: Optional[Dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
        extra = "ignore"
