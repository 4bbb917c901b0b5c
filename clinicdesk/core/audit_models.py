from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON

from ..database import Base
from .records import utcnow

class AuditLog(Base):
    """
    Audit Log Model - Security relevant staff actions

    Fields:
    - id: Primary key
    - staff_id: Staff member who performed or was subject of the action
    - action: Action name, e.g. STAFF_LOGIN_SUCCESS
    - details: Additional context as JSON
    - ip_address: Client address, when known
    - timestamp: When the action happened
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(String, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    action = Column(String, nullable=False, index=True)
    details = Column(JSON, nullable=True)
    ip_address = Column(String, nullable=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, staff_id={self.staff_id}, action='{self.action}', timestamp='{self.timestamp}')>"
