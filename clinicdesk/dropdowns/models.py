"""
Dropdown Option Model - User-extensible pick-list values.
"""
from sqlalchemy import Column, String, DateTime

from ..database import Base
from ..core.records import utcnow

# Pick-lists the forms offer
VALID_FIELDS = (
    "doctorName",
    "department",
    "referredBy",
    "medicineOptions",
    "presentComplainOptions",
    "previousHistoryOptions",
    "othersOptions",
    "others1Options",
    "operationDetailsOptions",
    "operationProcedureOptions",
    "provisionDiagnosisOptions",
    "labTestOptions",
)

class DropdownOption(Base):
    """
    Dropdown Option Model - One value of a pick-list

    Fields:
    - id: Primary key (UUID string)
    - field_name: Pick-list the value belongs to
    - option_value: The value, unique per pick-list ignoring case
    - created_at: When the value was added
    """
    __tablename__ = "dropdown_options"

    id = Column(String, primary_key=True, index=True)
    field_name = Column(String, nullable=False, index=True)
    option_value = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f"<DropdownOption(field_name='{self.field_name}', option_value='{self.option_value}')>"
