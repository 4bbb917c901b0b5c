"""
Operation and In-Patient Models - Surgical procedures and admitted patients.

Both reference patients by patient number only; there is no enforced
foreign key so records survive edits to the patient registry.
"""
from sqlalchemy import Column, String, Float, Date, DateTime, JSON

from ..database import Base
from ..core.records import utcnow
from ..core.dates import clinic_today

class Operation(Base):
    """
    Operation Model - A surgical procedure and its bill

    Fields:
    - id: Primary key (UUID string)
    - patient_id, patient_name: Patient reference
    - date_of_admit, time_of_admit: Admission
    - date_of_operation, time_of_operation: Surgery
    - date_of_discharge, time_of_discharge: Discharge (empty while ongoing)
    - operation_details, operation_procedure, provision_diagnosis: Clinical notes
    - review_on: Review date after discharge
    - operated_by: Surgeon
    - total_amount: Bill total
    - bill_number: Bill number ("O0001"), allocated when not given
    - created_by: Staff member who created the record
    - extra: Extension map for unknown fields
    """
    __tablename__ = "operations"

    id = Column(String, primary_key=True, index=True)
    patient_id = Column(String, nullable=False, index=True)
    patient_name = Column(String, nullable=True)
    date_of_admit = Column(Date, nullable=True)
    time_of_admit = Column(String, nullable=True)
    date_of_operation = Column(Date, nullable=True, index=True)
    time_of_operation = Column(String, nullable=True)
    date_of_discharge = Column(Date, nullable=True)
    time_of_discharge = Column(String, nullable=True)
    operation_details = Column(String, nullable=True)
    operation_procedure = Column(String, nullable=True)
    provision_diagnosis = Column(String, nullable=True)
    review_on = Column(Date, nullable=True)
    operated_by = Column(String, nullable=True)
    total_amount = Column(Float, default=0)
    bill_number = Column(String, unique=True, nullable=True)
    created_by = Column(String, nullable=True)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Operation(id={self.id}, bill_number='{self.bill_number}', patient_id='{self.patient_id}')>"

    @property
    def is_discharged(self) -> bool:
        return self.date_of_discharge is not None


class InPatient(Base):
    """
    In-Patient Model - An admitted patient and the planned operation

    Fields:
    - id: Primary key (UUID string)
    - patient_id, name, age, gender, phone, address, dob, guardian_name: Patient snapshot
    - operation_name, operation_date: Planned operation
    - operation_details, operation_procedure, provision_diagnosis: Clinical notes
    - department: Admitting department
    - doctor_names: Treating doctors (JSON list)
    - on_duty_doctor: Doctor on duty at admission
    - prescriptions: Discharge prescriptions (JSON list)
    - date: Admission date
    - extra: Extension map for unknown fields
    """
    __tablename__ = "inpatients"

    id = Column(String, primary_key=True, index=True)
    patient_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=True)
    age = Column(String, nullable=True)
    gender = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    dob = Column(Date, nullable=True)
    guardian_name = Column(String, nullable=True)
    operation_name = Column(String, nullable=True)
    operation_date = Column(Date, nullable=True)
    operation_details = Column(String, nullable=True)
    operation_procedure = Column(String, nullable=True)
    provision_diagnosis = Column(String, nullable=True)
    department = Column(String, nullable=True)
    doctor_names = Column(JSON, nullable=True)
    on_duty_doctor = Column(String, nullable=True)
    prescriptions = Column(JSON, nullable=True)
    date = Column(Date, default=clinic_today, index=True)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<InPatient(id={self.id}, patient_id='{self.patient_id}', name='{self.name}')>"
