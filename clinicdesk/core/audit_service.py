import logging
from sqlalchemy.orm import Session
from fastapi import Request
from typing import Optional, Dict, Any

from .audit_models import AuditLog

logger = logging.getLogger(__name__)


def _client_ip(request: Optional[Request]) -> Optional[str]:
    if request is None or request.client is None:
        return None
    return request.client.host


def create_audit_log(
    db: Session,
    action: str,
    staff_id: Optional[str] = None,
    request: Optional[Request] = None,
    details: Optional[Dict[str, Any]] = None
) -> Optional[AuditLog]:
    """
    Record a staff security event such as a login or a deleted account.

    The entry is committed on its own; if it cannot be stored the failure is
    logged and the caller carries on.

    Args:
        db: Database session
        action: Event name, e.g. "STAFF_LOGIN_FAILED"
        staff_id: Staff member the event concerns
        request: Incoming request, used for the client address
        details: Extra context stored as JSON

    Returns:
        The stored AuditLog, or None
    """
    entry = AuditLog(staff_id=staff_id, action=action, ip_address=_client_ip(request), details=details)
    try:
        db.add(entry)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Could not store audit event {action}: {str(e)}")
        return None
    db.refresh(entry)
    return entry
