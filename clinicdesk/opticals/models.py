"""
Optical Models - Frames and lenses in stock and their dispense log.
"""
from enum import Enum
from sqlalchemy import Column, String, Integer, Float, DateTime, JSON

from ..database import Base
from ..core.records import utcnow
from ..medicines.models import StockStatus

class OpticalType(str, Enum):
    FRAME = "frame"
    LENS = "lens"


class OpticalItem(Base):
    """
    Optical Item Model - A frame or lens stock row

    Fields:
    - id: Primary key (UUID string)
    - type: frame or lens
    - brand, model, size, power: Item description
    - quantity: Units in stock, never negative
    - price: Unit price
    - status: available, completed or out_of_stock
    - extra: Extension map for unknown fields
    """
    __tablename__ = "opticals"

    id = Column(String, primary_key=True, index=True)
    type = Column(String, nullable=False, index=True)
    brand = Column(String, nullable=False, index=True)
    model = Column(String, nullable=True)
    size = Column(String, nullable=True)
    power = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False, default=0)
    status = Column(String, nullable=False, default=StockStatus.AVAILABLE.value, index=True)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<OpticalItem(id={self.id}, type='{self.type}', brand='{self.brand}', quantity={self.quantity})>"


class OpticalDispenseRecord(Base):
    """
    Optical Dispense Record - Append-only log of dispensed frames and lenses

    Fields:
    - id: Primary key (UUID string)
    - optical_id: Source stock row
    - optical_type, brand, model: Snapshot of the stock row
    - quantity: Units dispensed
    - price: Unit price
    - patient_id, patient_name: Recipient
    - dispensed_by: Staff member
    - dispensed_at: When the item was handed out
    """
    __tablename__ = "optical_dispense_records"

    id = Column(String, primary_key=True, index=True)
    optical_id = Column(String, nullable=False, index=True)
    optical_type = Column(String, nullable=False, index=True)
    brand = Column(String, nullable=True)
    model = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False, default=0)
    patient_id = Column(String, nullable=True, index=True)
    patient_name = Column(String, nullable=True)
    dispensed_by = Column(String, nullable=True)
    dispensed_at = Column(DateTime(timezone=True), default=utcnow, index=True)

    def __repr__(self):
        return f"<OpticalDispenseRecord(id={self.id}, optical_id={self.optical_id}, quantity={self.quantity})>"
