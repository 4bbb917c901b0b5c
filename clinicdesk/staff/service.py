"""
Staff Service - Business logic for staff accounts, login and permissions.

This module provides service functions for staff CRUD operations, password
resets, session token issuing and module permission checks.
"""
from typing import List, Optional, Dict, Any
from sqlalchemy.orm import Session
from sqlalchemy import func
from fastapi import Request
import logging

from ..exceptions import (
    ValidationFailedException,
    RecordNotFoundException,
    ConflictException,
    InvalidCredentialsException,
)
from ..core.audit_service import create_audit_log
from ..core.permissions import has_module_access, MODULE_NAMES
from ..core.records import build_record, apply_payload, commit_or_raise, utcnow
from ..core.security import hash_password, verify_password, create_session_token, generate_reset_password
from .models import Staff
from .schemas import StaffCreate, StaffUpdate, StaffResponse

# Set up logging
logger = logging.getLogger(__name__)

def normalize_username(username: Optional[str]) -> str:
    """Usernames are matched trimmed and case-insensitively."""
    return (username or "").strip().lower()

def get_staff(db: Session, staff_id: str) -> Staff:
    """
    Get a staff member by ID.

    Args:
        db: Database session
        staff_id: ID of the staff member

    Returns:
        Staff: Staff member

    Raises:
        RecordNotFoundException: If the staff member does not exist
    """
    staff = db.query(Staff).filter(Staff.id == staff_id).first()
    if not staff:
        raise RecordNotFoundException("Staff member not found")
    return staff

def get_staff_list(db: Session) -> List[Staff]:
    """All staff members ordered by name."""
    return db.query(Staff).order_by(Staff.full_name.asc()).all()

def _ensure_username_free(db: Session, username: str, exclude_id: Optional[str] = None) -> None:
    query = db.query(Staff).filter(func.lower(Staff.username) == username)
    if exclude_id:
        query = query.filter(Staff.id != exclude_id)
    if query.first():
        raise ConflictException("Username already exists")

def add_staff(db: Session, staff_data: StaffCreate, request: Optional[Request] = None) -> Staff:
    """
    Create a staff account.

    Args:
        db: Database session
        staff_data: New staff member details including plain password
        request: Optional request for audit logging

    Returns:
        Staff: The created staff member

    Raises:
        ValidationFailedException: If username, password or name is blank
        ConflictException: If the username is taken
    """
    payload = staff_data.model_dump()
    password = payload.pop("password", None)
    permissions = payload.pop("permissions", None) or {}

    username = normalize_username(payload.get("username"))
    if not username or not password or not (payload.get("full_name") or "").strip():
        raise ValidationFailedException("Username, password and full name are required")
    _ensure_username_free(db, username)

    payload["username"] = username
    staff = build_record(Staff, payload, password_hash=hash_password(password))
    staff.permissions = permissions

    db.add(staff)
    commit_or_raise(db, "add staff member", staff)
    logger.info(f"Staff member {staff.id} ({staff.username}) created")
    create_audit_log(db, "STAFF_CREATED", staff_id=staff.id, request=request,
                     details={"username": staff.username, "is_admin": staff.is_admin})
    return staff

def update_staff(db: Session, staff_id: str, staff_data: StaffUpdate) -> Staff:
    """
    Update a staff account. Only fields that were sent are changed.

    Args:
        db: Database session
        staff_id: ID of the staff member
        staff_data: Partial update; a password is re-hashed, permissions are re-flattened

    Returns:
        Staff: Updated staff member

    Raises:
        RecordNotFoundException: If the staff member does not exist
        ConflictException: If the new username is taken
        ValidationFailedException: If the update would remove the last administrator
    """
    staff = get_staff(db, staff_id)
    sole_admin = staff.is_administrator and count_administrators(db) <= 1
    payload = staff_data.model_dump(exclude_unset=True)
    password = payload.pop("password", None)
    permissions = payload.pop("permissions", None)
    payload.pop("password_hash", None)

    if "username" in payload:
        username = normalize_username(payload["username"])
        if not username:
            raise ValidationFailedException("Username cannot be empty")
        _ensure_username_free(db, username, exclude_id=staff_id)
        payload["username"] = username

    apply_payload(staff, payload)
    if password:
        staff.password_hash = hash_password(password)
    if permissions is not None:
        staff.permissions = permissions

    if sole_admin and not staff.is_administrator:
        db.rollback()
        logger.warning(f"Refused to demote last administrator {staff_id}")
        raise ValidationFailedException("Cannot remove rights from the last administrator")

    staff.updated_at = utcnow()

    commit_or_raise(db, "update staff member", staff)
    logger.info(f"Staff member {staff_id} updated")
    return staff

def count_administrators(db: Session) -> int:
    """Number of accounts holding administrative rights."""
    return sum(1 for staff in db.query(Staff).all() if staff.is_administrator)

def delete_staff(db: Session, staff_id: str, request: Optional[Request] = None) -> str:
    """
    Delete a staff account.

    The last account with administrative rights can never be deleted.

    Args:
        db: Database session
        staff_id: ID of the staff member
        request: Optional request for audit logging

    Returns:
        str: ID of the deleted staff member

    Raises:
        RecordNotFoundException: If the staff member does not exist
        ValidationFailedException: If the account is the last administrator
    """
    staff = get_staff(db, staff_id)

    if staff.is_administrator and count_administrators(db) <= 1:
        logger.warning(f"Refused to delete last administrator {staff_id}")
        raise ValidationFailedException("Cannot delete the last administrator")

    username = staff.username
    db.delete(staff)
    commit_or_raise(db, "delete staff member")
    logger.info(f"Staff member {staff_id} ({username}) deleted")
    create_audit_log(db, "STAFF_DELETED", request=request, details={"id": staff_id, "username": username})
    return staff_id

def reset_staff_password(db: Session, staff_id: str, request: Optional[Request] = None) -> str:
    """
    Replace a staff member's password with a random one.

    Args:
        db: Database session
        staff_id: ID of the staff member
        request: Optional request for audit logging

    Returns:
        str: The new plain text password, returned only once

    Raises:
        RecordNotFoundException: If the staff member does not exist
    """
    staff = get_staff(db, staff_id)
    new_password = generate_reset_password()
    staff.password_hash = hash_password(new_password)
    staff.updated_at = utcnow()

    commit_or_raise(db, "reset staff password", staff)
    logger.info(f"Password reset for staff member {staff_id}")
    create_audit_log(db, "STAFF_PASSWORD_RESET", staff_id=staff_id, request=request)
    return new_password

def check_permission(db: Session, staff_id: str, module: str) -> Dict[str, Any]:
    """
    Check whether a staff member may use a module.

    Args:
        db: Database session
        staff_id: ID of the staff member
        module: Module key, e.g. "patients"

    Returns:
        Dict with has_access and module

    Raises:
        ValidationFailedException: If the module key is unknown
        RecordNotFoundException: If the staff member does not exist
    """
    if module not in MODULE_NAMES:
        raise ValidationFailedException(f"Unknown module: {module}")
    staff = get_staff(db, staff_id)
    return {"has_access": has_module_access(staff.is_admin, staff.permissions, module), "module": module}

def build_session_token(staff: Staff) -> str:
    """Sign a session token carrying the staff identity and permissions."""
    return create_session_token({
        "id": staff.id,
        "username": staff.username,
        "is_admin": staff.is_admin,
        "permissions": staff.permissions,
    })

def login(db: Session, username: str, password: str, request: Optional[Request] = None) -> Dict[str, Any]:
    """
    Authenticate a staff member and open a session.

    Args:
        db: Database session
        username: Login name (matched trimmed, case-insensitively)
        password: Plain text password
        request: Optional request for audit logging

    Returns:
        Dict with access_token, token_type and user

    Raises:
        InvalidCredentialsException: If the username or password is wrong
    """
    normalized = normalize_username(username)
    staff = db.query(Staff).filter(func.lower(Staff.username) == normalized).first() if normalized else None

    if not staff or not verify_password(password or "", staff.password_hash):
        logger.warning(f"Login failed: Invalid credentials for {normalized!r}")
        create_audit_log(db, "STAFF_LOGIN_FAILED", staff_id=staff.id if staff else None,
                         request=request, details={"username": normalized})
        raise InvalidCredentialsException()

    logger.info(f"Login successful: Staff {staff.id} ({staff.username})")
    create_audit_log(db, "STAFF_LOGIN_SUCCESS", staff_id=staff.id, request=request)

    return {
        "access_token": build_session_token(staff),
        "token_type": "bearer",
        "user": StaffResponse.model_validate(staff),
    }
