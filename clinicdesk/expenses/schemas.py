"""
Expense Schemas - Pydantic models for clinic expenses.
"""
from typing import Optional, Dict, Any, Union
from pydantic import BaseModel, field_validator
import datetime as dt

class ExpenseBase(BaseModel):
    title: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    reason: Optional[str] = None
    date: Optional[dt.date] = None

    class Config:
        extra = "allow"

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value: Union[str, float, int, None]):
        """Forms send amounts as text; "1,250.50" reads as 1250.5."""
        if value is None or not isinstance(value, str):
            return value
        text = value.replace(",", "").strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            raise ValueError("Amount must be a number")

    @field_validator("amount")
    @classmethod
    def amount_not_negative(cls, value: Optional[float]):
        if value is not None and value < 0:
            raise ValueError("Amount cannot be negative")
        return value

class ExpenseCreate(ExpenseBase):
    pass

class ExpenseUpdate(ExpenseBase):
    pass

class ExpenseResponse(ExpenseBase):
    id: str
    title: str
    amount: float
    category: str
    extra: Optional[Dict[str, Any]] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True
        extra = "ignore"
