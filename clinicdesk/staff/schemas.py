"""
Staff Schemas - Pydantic models for staff accounts, login and permission checks.
"""
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime

class StaffBase(BaseModel):
    """
    Base Staff Schema - Fields common to create and response schemas

    Fields:
    - username: Login name
    - full_name: Display name
    - position: Job title
    - salary: Monthly salary
    - phone: Contact number
    - email: Contact email
    - is_admin: Administrator flag
    """
    username: str
    full_name: str
    position: Optional[str] = None
    salary: Optional[float] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_admin: bool = False

class StaffCreate(StaffBase):
    """
    Staff Creation Schema

    Extends StaffBase with:
    - password: Plain text password (hashed before storage)
    - permissions: Module permission map, e.g. {"patients": true}
    """
    password: str = Field(..., min_length=1)
    permissions: Dict[str, bool] = Field(default_factory=dict)

    class Config:
        extra = "allow"

class StaffUpdate(BaseModel):
    """
    Staff Update Schema - All fields optional; a new password is re-hashed
    """
    username: Optional[str] = None
    full_name: Optional[str] = None
    position: Optional[str] = None
    salary: Optional[float] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_admin: Optional[bool] = None
    password: Optional[str] = None
    permissions: Optional[Dict[str, bool]] = None

    class Config:
        extra = "allow"

class StaffResponse(StaffBase):
    """
    Staff Response Schema - Never carries the password hash
    """
    id: str
    permissions: Dict[str, bool]
    extra: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model"""
        from_attributes = True

class StaffLogin(BaseModel):
    """Login credentials"""
    username: str
    password: str

class LoginResponse(BaseModel):
    """
    Login Response Schema

    Fields:
    - access_token: Signed session token to send as a bearer token
    - token_type: Always "bearer"
    - user: The authenticated staff member
    """
    access_token: str
    token_type: str = "bearer"
    user: StaffResponse

class PasswordResetResponse(BaseModel):
    """The freshly generated password, shown once"""
    id: str
    new_password: str

class PermissionCheckResponse(BaseModel):
    """Result of a module permission check"""
    has_access: bool
    module: str
