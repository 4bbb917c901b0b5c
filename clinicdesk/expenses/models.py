"""
Expense Model - Money paid out by the clinic.
"""
from sqlalchemy import Column, String, Float, Date, DateTime, JSON, Text

from ..database import Base
from ..core.records import utcnow
from ..core.dates import clinic_today

# Categories the expense form offers; others are accepted as typed
EXPENSE_CATEGORIES = (
    "Stationary",
    "House Keeping",
    "DR's & RMP's",
    "Lab",
    "Salaries",
    "Medicine",
    "Opticals",
    "Maintenance",
    "Other",
)

class Expense(Base):
    """
    Expense Model - One payment made by the clinic

    Fields:
    - id: Primary key (UUID string)
    - title: Short description
    - amount: Amount paid
    - category: Expense category, e.g. "Salaries"
    - reason: Optional free text
    - date: Day the expense was incurred
    - extra: Extension map for unknown fields
    - created_at, updated_at: Timestamps
    """
    __tablename__ = "expenses"

    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    amount = Column(Float, nullable=False, default=0)
    category = Column(String, nullable=False, index=True)
    reason = Column(Text, nullable=True)
    date = Column(Date, default=clinic_today, index=True)
    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Expense(id={self.id}, title='{self.title}', amount={self.amount})>"
