"""
Dropdown Router - API endpoints for pick-list values.

Any signed-in staff member may read and extend pick-lists since every form uses them.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..staff.dependencies import get_current_staff
from .schemas import DropdownValue, DropdownOptionResponse
from . import service

router = APIRouter(dependencies=[Depends(get_current_staff)])

@router.get("/{field_name}", response_model=Envelope[List[str]])
async def get_options(field_name: str, db: Session = Depends(get_db)):
    """Get the values of a pick-list in ascending order."""
    return ok(service.get_dropdown_options(db, field_name))

@router.post("/{field_name}", response_model=Envelope[DropdownOptionResponse])
async def add_option(field_name: str, body: DropdownValue, db: Session = Depends(get_db)):
    """Add a value to a pick-list; an existing value (ignoring case) is reported, not duplicated."""
    option, created = service.add_dropdown_option(db, field_name, body.value)
    message = service.OPTION_ADDED if created else service.OPTION_EXISTS
    return ok(
        {"field_name": option.field_name, "option_value": option.option_value, "created": created},
        message
    )

@router.delete("/{field_name}/{value}", response_model=Envelope[str])
async def delete_option(field_name: str, value: str, db: Session = Depends(get_db)):
    """Remove a value from a pick-list."""
    return ok(service.delete_dropdown_option(db, field_name, value), "Option deleted successfully")
