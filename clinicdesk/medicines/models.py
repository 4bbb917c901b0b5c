"""
Medicine Models - Medicine stock and the dispense log.
"""
from enum import Enum
from sqlalchemy import Column, String, Integer, Float, Date, DateTime, JSON

from ..database import Base
from ..core.records import utcnow

class StockStatus(str, Enum):
    """Inventory status shared by medicines and optical items"""
    AVAILABLE = "available"
    COMPLETED = "completed"
    OUT_OF_STOCK = "out_of_stock"


class Medicine(Base):
    """
    Medicine Model - One stocked batch of a medicine

    Fields:
    - id: Primary key (UUID string)
    - name: Medicine name
    - batch_number: Manufacturer batch
    - expiry_date: Expiry date
    - quantity: Units in stock, never negative
    - price: Unit price
    - status: available, completed or out_of_stock
    - extra: Extension map for unknown fields
    """
    __tablename__ = "medicines"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    batch_number = Column(String, nullable=True)
    expiry_date = Column(Date, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False, default=0)
    status = Column(String, nullable=False, default=StockStatus.AVAILABLE.value, index=True)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        """String representation of the Medicine model"""
        return f"<Medicine(id={self.id}, name='{self.name}', quantity={self.quantity}, status='{self.status}')>"


class MedicineDispenseRecord(Base):
    """
    Medicine Dispense Record - Append-only log of dispensed medicine

    Fields:
    - id: Primary key (UUID string)
    - medicine_id: Source stock row
    - medicine_name, batch_number, expiry_date: Snapshot of the stock row
    - quantity: Units dispensed
    - price: Unit price charged
    - total_amount: Amount charged
    - dispensed_date: When the medicine was handed out
    - patient_id, patient_name: Recipient
    - dispensed_by: Staff member
    """
    __tablename__ = "medicine_dispense_records"

    id = Column(String, primary_key=True, index=True)
    medicine_id = Column(String, nullable=False, index=True)
    medicine_name = Column(String, nullable=False)
    batch_number = Column(String, nullable=True)
    expiry_date = Column(Date, nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False, default=0)
    total_amount = Column(Float, nullable=False, default=0)
    dispensed_date = Column(DateTime(timezone=True), default=utcnow, index=True)
    patient_id = Column(String, nullable=True, index=True)
    patient_name = Column(String, nullable=True)
    dispensed_by = Column(String, nullable=True)

    def __repr__(self):
        return f"<MedicineDispenseRecord(id={self.id}, medicine_id={self.medicine_id}, quantity={self.quantity})>"
