"""
Patient Model - Registered patients of the clinic.
"""
from sqlalchemy import Column, String, Integer, Date, DateTime, JSON

from ..database import Base
from ..core.records import utcnow
from ..core.dates import clinic_today

class Patient(Base):
    """
    Patient Model - Registration record for a patient

    Fields:
    - id: Primary key (UUID string)
    - patient_id: Human readable patient number, unique
    - name: Patient's name
    - guardian: Guardian / relative name
    - dob: Date of birth
    - age: Age at registration
    - gender: Gender
    - phone: Contact number
    - address: Address
    - doctor_name, department, referred_by: Registration details
    - status: Free-form status
    - created_by: Staff member who registered the patient
    - date: Registration date
    - extra: Extension map for unknown fields
    - created_at, updated_at: Timestamps
    """
    __tablename__ = "patients"

    id = Column(String, primary_key=True, index=True)
    patient_id = Column(String, unique=True, nullable=False, index=True)
    name = Column(String, nullable=False, index=True)
    guardian = Column(String, nullable=True)
    dob = Column(Date, nullable=True)
    age = Column(Integer, nullable=True)
    gender = Column(String, nullable=True)
    phone = Column(String, nullable=True, index=True)
    address = Column(String, nullable=True)
    doctor_name = Column(String, nullable=True)
    department = Column(String, nullable=True)
    referred_by = Column(String, nullable=True)
    status = Column(String, nullable=True)
    created_by = Column(String, nullable=True)
    date = Column(Date, default=clinic_today, index=True)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        """String representation of the Patient model"""
        return f"<Patient(id={self.id}, patient_id='{self.patient_id}', name='{self.name}')>"
