"""
Lab Model - Lab test billing records.
"""
from enum import Enum
from sqlalchemy import Column, String, Float, Date, DateTime, JSON

from ..database import Base
from ..core.records import utcnow
from ..core.dates import clinic_today

# Each scheme holds at most this many test/amount slots
MAX_LAB_SLOTS = 10

class LabType(str, Enum):
    """Billing scheme of a lab record"""
    REGULAR = "regular"
    VANNELA = "vannela"


class LabRecord(Base):
    """
    Lab Record Model - Tests billed for a patient on a day

    Fields:
    - id: Primary key (UUID string)
    - date: Billing date
    - patient_id, patient_name: Patient reference
    - type: regular or vannela (second billing scheme)
    - tests: Regular scheme slots, list of {"name", "amount"} (at most 10)
    - vtests: Vannela scheme slots, same shape (at most 10)
    - total_amount, discount_percentage, amount_received, amount_due: Regular billing
    - vamount_received: Amount received under the vannela scheme
    - extra: Extension map for unknown fields
    """
    __tablename__ = "labs"

    id = Column(String, primary_key=True, index=True)
    date = Column(Date, default=clinic_today, index=True)
    patient_id = Column(String, nullable=True, index=True)
    patient_name = Column(String, nullable=True)
    type = Column(String, nullable=False, default=LabType.REGULAR.value)
    tests = Column(JSON, nullable=True)
    vtests = Column(JSON, nullable=True)
    total_amount = Column(Float, default=0)
    discount_percentage = Column(Float, default=0)
    amount_received = Column(Float, default=0)
    amount_due = Column(Float, default=0)
    vamount_received = Column(Float, default=0)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)

    def __repr__(self):
        return f"<LabRecord(id={self.id}, patient_id='{self.patient_id}', type='{self.type}')>"
