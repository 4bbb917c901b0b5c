"""
FastAPI dependencies for staff sessions and module authorization.

The session is explicit: every protected operation resolves the bearer token
into the calling staff member instead of reading a stored "current user".
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import PermissionDeniedException
from ..core.permissions import Module, has_module_access
from ..core.security import decode_session_token
from .models import Staff

# OAuth2 scheme for JWT token authentication
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/staff/login")

def get_current_staff(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> Staff:
    """
    Get the staff member owning the session token.

    Args:
        token: JWT token from Authorization header
        db: Database session

    Returns:
        Staff: Current authenticated staff member

    Raises:
        HTTPException: If the token is invalid or the account no longer exists
    """
    payload = decode_session_token(token)
    if not payload or not payload.get("id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    staff = db.query(Staff).filter(Staff.id == payload["id"]).first()
    if not staff:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Staff member not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return staff

def require_module(module: Module):
    """
    Dependency factory requiring access to a module.

    Permissions are read from the database, so changes apply to open sessions.

    Args:
        module: Module the route belongs to

    Returns:
        Function that checks the current staff member's access
    """
    def module_checker(current_staff: Staff = Depends(get_current_staff)) -> Staff:
        if not has_module_access(current_staff.is_admin, current_staff.permissions, module.value):
            raise PermissionDeniedException(f"Access to {module.value} denied")
        return current_staff
    return module_checker
