"""
Optical Schemas - Pydantic models for optical stock and dispensing.
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field
import datetime as dt

from ..medicines.models import StockStatus
from .models import OpticalType

class OpticalBase(BaseModel):
    type: Optional[OpticalType] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    size: Optional[str] = None
    power: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
    status: Optional[StockStatus] = None

    class Config:
        extra = "allow"
        use_enum_values = True
        protected_namespaces = ()

class OpticalCreate(OpticalBase):
    type: OpticalType
    brand: str = Field(..., min_length=1)
    quantity: int = Field(0, ge=0)
    price: float = Field(0, ge=0)

class OpticalUpdate(OpticalBase):
    pass

class OpticalStatusUpdate(BaseModel):
    status: StockStatus

    class Config:
        use_enum_values = True

class OpticalResponse(OpticalBase):
    id: str
    type: str
    brand: str
    quantity: int
    price: float
    status: str
    extra: Optional[Dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
        extra = "ignore"

class OpticalDispenseRequest(BaseModel):
    """
    Optical Dispense Request

    Fields:
    - quantity: Units to dispense, must be positive
    - patient_name: Recipient name
    - patient_id: Recipient patient number
    - dispensed_by: Staff member handing out the item
    """
    quantity: int = Field(..., gt=0)
    patient_name: str = Field(..., min_length=1)
    patient_id: Optional[str] = None
    dispensed_by: Optional[str] = None

class OpticalDispenseRecordResponse(BaseModel):
    id: str
    optical_id: str
    optical_type: str
    brand: Optional[str] = None
    model: Optional[str] = None
    quantity: int
    price: float
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    dispensed_by: Optional[str] = None
    dispensed_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
        protected_namespaces = ()

class OpticalDispenseResult(BaseModel):
    """Updated stock row together with the dispense log entry"""
    optical: OpticalResponse
    record: OpticalDispenseRecordResponse
