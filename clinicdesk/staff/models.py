"""
Staff Model - Clinic staff accounts and their module permissions.

Permissions are exposed as a nested map but stored flattened, one boolean
column per module.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Float, JSON
from typing import Dict

from ..database import Base
from ..core.permissions import MODULE_COLUMNS, is_administrator
from ..core.records import utcnow

class Staff(Base):
    """
    Staff Model - Stores login credentials and permission flags

    Fields:
    - id: Primary key (UUID string)
    - username: Login name, stored trimmed and lower-cased
    - password_hash: bcrypt hash of the password
    - full_name: Display name
    - position: Job title
    - salary: Monthly salary
    - phone, email: Contact details
    - is_admin: Administrator flag
    - perm_*: One flag per module
    - extra: Extension map for unknown fields
    - created_at, updated_at: Timestamps
    """
    __tablename__ = "staff"

    id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    position = Column(String, nullable=True)
    salary = Column(Float, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)

    perm_patients = Column(Boolean, default=False, nullable=False)
    perm_prescriptions = Column(Boolean, default=False, nullable=False)
    perm_medicines = Column(Boolean, default=False, nullable=False)
    perm_opticals = Column(Boolean, default=False, nullable=False)
    perm_receipts = Column(Boolean, default=False, nullable=False)
    perm_analytics = Column(Boolean, default=False, nullable=False)
    perm_staff = Column(Boolean, default=False, nullable=False)
    perm_operations = Column(Boolean, default=False, nullable=False)
    perm_reports = Column(Boolean, default=False, nullable=False)
    perm_dues_follow_up = Column(Boolean, default=False, nullable=False)
    perm_data = Column(Boolean, default=False, nullable=False)
    perm_certificates = Column(Boolean, default=False, nullable=False)
    perm_labs = Column(Boolean, default=False, nullable=False)

    extra = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        """String representation of the Staff model"""
        return f"<Staff(id={self.id}, username='{self.username}', is_admin={self.is_admin})>"

    @property
    def permissions(self) -> Dict[str, bool]:
        """Nested permission map rebuilt from the flat columns"""
        return {module: bool(getattr(self, column)) for module, column in MODULE_COLUMNS.items()}

    @permissions.setter
    def permissions(self, value: Dict[str, bool]) -> None:
        """Flatten a (possibly partial) permission map into the columns"""
        for module, granted in (value or {}).items():
            column = MODULE_COLUMNS.get(module)
            if column:
                setattr(self, column, bool(granted))

    @property
    def is_administrator(self) -> bool:
        """Whether this account counts towards the administrator minimum"""
        return is_administrator(self.is_admin, self.permissions)
