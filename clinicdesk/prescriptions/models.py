"""
Prescription Model - Consultation record that doubles as the billing receipt.
"""
from sqlalchemy import Column, String, Integer, Float, Date, DateTime, JSON

from ..database import Base
from ..core.records import utcnow
from ..core.dates import clinic_today

# "Paid for" values that mark a visit as a follow-up review
REVIEW_PAID_FOR = (
    "REVIEW OP CONSULTATION",
    "REVIEW OP WITHIN 15 DAYS",
    "ROP REVIEW CONSULTATION",
)

class Prescription(Base):
    """
    Prescription Model - Clinical and billing fields of a visit

    Fields:
    - id: Primary key (UUID string)
    - sno: Sequential serial number, unique
    - receipt_no: Receipt number derived from the serial ("R0001"), unique
    - date: Visit date
    - patient_id, patient_name, guardian_name, phone_number, age, gender, address: Patient snapshot
    - doctor_name, department, referred_by: Consultation details
    - paid_for, mode: What was paid for and how
    - total_amount, advance_paid, amount_received, discount, amount_due: Billing totals
    - present_complain, previous_history, others, diagnosis: Clinical notes
    - review_on: Review date
    - created_by: Staff member who created the record
    - extra: Extension map (eye-exam readings and other free fields)
    - created_at: Creation timestamp
    """
    __tablename__ = "prescriptions"

    id = Column(String, primary_key=True, index=True)
    sno = Column(Integer, unique=True, nullable=False, index=True)
    receipt_no = Column(String, unique=True, nullable=False)
    date = Column(Date, default=clinic_today, index=True)

    patient_id = Column(String, nullable=True, index=True)
    patient_name = Column(String, nullable=True)
    guardian_name = Column(String, nullable=True)
    phone_number = Column(String, nullable=True)
    age = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    address = Column(String, nullable=True)

    doctor_name = Column(String, nullable=True)
    department = Column(String, nullable=True)
    referred_by = Column(String, nullable=True)

    paid_for = Column(String, nullable=True)
    mode = Column(String, nullable=True)
    total_amount = Column(Float, default=0)
    advance_paid = Column(Float, default=0)
    amount_received = Column(Float, default=0)
    discount = Column(Float, default=0)
    amount_due = Column(Float, default=0)

    present_complain = Column(String, nullable=True)
    previous_history = Column(String, nullable=True)
    others = Column(String, nullable=True)
    diagnosis = Column(String, nullable=True)
    review_on = Column(Date, nullable=True)

    created_by = Column(String, nullable=True)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)

    def __repr__(self):
        """String representation of the Prescription model"""
        return f"<Prescription(id={self.id}, receipt_no='{self.receipt_no}', patient_id='{self.patient_id}')>"
