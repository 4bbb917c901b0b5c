"""
Medicine Schemas - Pydantic models for medicine stock and dispensing.
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field
import datetime as dt

from .models import StockStatus

class MedicineBase(BaseModel):
    """
    Base Medicine Schema

    Fields:
    - name: Medicine name
    - batch_number: Manufacturer batch
    - expiry_date: Expiry date
    - quantity: Units in stock
    - price: Unit price
    - status: available, completed or out_of_stock
    """
    name: Optional[str] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[dt.date] = None
    quantity: Optional[int] = Field(None, ge=0)
    price: Optional[float] = Field(None, ge=0)
    status: Optional[StockStatus] = None

    class Config:
        extra = "allow"
        use_enum_values = True

class MedicineCreate(MedicineBase):
    name: str = Field(..., min_length=1)
    quantity: int = Field(0, ge=0)
    price: float = Field(0, ge=0)

class MedicineUpdate(MedicineBase):
    pass

class MedicineStatusUpdate(BaseModel):
    status: StockStatus

    class Config:
        use_enum_values = True

class MedicineResponse(MedicineBase):
    id: str
    name: str
    quantity: int
    price: float
    status: str
    extra: Optional[Dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
        extra = "ignore"

class MedicineDispenseRequest(BaseModel):
    """
    Medicine Dispense Request

    Fields:
    - quantity: Units to dispense, must be positive
    - dispensed_by: Staff member handing out the medicine
    - patient_id, patient_name: Recipient
    - price: Unit price charged (defaults to the stock price)
    - total_amount: Amount charged (defaults to price x quantity)
    """
    quantity: int = Field(..., gt=0)
    dispensed_by: Optional[str] = None
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    total_amount: Optional[float] = Field(None, ge=0)

class MedicineDispenseRecordResponse(BaseModel):
    id: str
    medicine_id: str
    medicine_name: str
    batch_number: Optional[str] = None
    expiry_date: Optional[dt.date] = None
    quantity: int
    price: float
    total_amount: float
    dispensed_date: Optional[dt.datetime] = None
    patient_id: Optional[str] = None
    patient_name: Optional[str] = None
    dispensed_by: Optional[str] = None

    class Config:
        from_attributes = True

class MedicineDispenseResult(BaseModel):
    """Updated stock row together with the dispense log entry"""
    medicine: MedicineResponse
    record: MedicineDispenseRecordResponse
