"""
Staff Router - API endpoints for login, staff accounts and permission checks.
"""
from typing import List
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.permissions import Module
from .dependencies import get_current_staff, require_module
from .models import Staff
from .schemas import (
    StaffCreate,
    StaffUpdate,
    StaffResponse,
    StaffLogin,
    LoginResponse,
    PasswordResetResponse,
    PermissionCheckResponse,
)
from . import service

router = APIRouter()

@router.post("/login", response_model=Envelope[LoginResponse], summary="Staff Login")
async def login_route(
    login_data: StaffLogin,
    request: Request,
    db: Session = Depends(get_db)
):
    """
    Verify credentials and open a session.

    The returned access token must be sent as ``Authorization: Bearer <token>``.
    """
    result = service.login(db, login_data.username, login_data.password, request=request)
    return ok(result, "Login successful")

@router.get("/me", response_model=Envelope[StaffResponse])
async def get_me(current_staff: Staff = Depends(get_current_staff)):
    """Get the staff member owning the current session."""
    return ok(current_staff)

@router.get("/", response_model=Envelope[List[StaffResponse]])
async def list_staff(
    db: Session = Depends(get_db),
    current_staff: Staff = Depends(require_module(Module.STAFF))
):
    """List all staff members (password hashes are never returned)."""
    return ok(service.get_staff_list(db))

@router.post("/", response_model=Envelope[StaffResponse], status_code=201)
async def add_staff_route(
    staff_data: StaffCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_staff: Staff = Depends(require_module(Module.STAFF))
):
    """Create a staff account."""
    return ok(service.add_staff(db, staff_data, request=request), "Staff member added successfully")

@router.put("/{staff_id}", response_model=Envelope[StaffResponse])
async def update_staff_route(
    staff_id: str,
    staff_data: StaffUpdate,
    db: Session = Depends(get_db),
    current_staff: Staff = Depends(require_module(Module.STAFF))
):
    """Update a staff account."""
    return ok(service.update_staff(db, staff_id, staff_data), "Staff member updated successfully")

@router.delete("/{staff_id}", response_model=Envelope[str])
async def delete_staff_route(
    staff_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_staff: Staff = Depends(require_module(Module.STAFF))
):
    """Delete a staff account. The last administrator cannot be deleted."""
    return ok(service.delete_staff(db, staff_id, request=request), "Staff member deleted successfully")

@router.post("/{staff_id}/reset-password", response_model=Envelope[PasswordResetResponse])
async def reset_password_route(
    staff_id: str,
    request: Request,
    db: Session = Depends(get_db),
    current_staff: Staff = Depends(require_module(Module.STAFF))
):
    """Generate a new random password for a staff member."""
    new_password = service.reset_staff_password(db, staff_id, request=request)
    return ok({"id": staff_id, "new_password": new_password}, "Password reset successfully")

@router.get("/{staff_id}/permissions/{module}", response_model=Envelope[PermissionCheckResponse])
async def check_permission_route(
    staff_id: str,
    module: str,
    db: Session = Depends(get_db),
    current_staff: Staff = Depends(get_current_staff)
):
    """Check whether a staff member may use a module."""
    return ok(service.check_permission(db, staff_id, module))
