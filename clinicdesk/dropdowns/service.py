"""
Dropdown Service - Business logic for user-extensible pick-lists.
"""
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import func
import logging

from ..exceptions import ValidationFailedException, RecordNotFoundException
from ..core.records import new_id, commit_or_raise
from .models import DropdownOption, VALID_FIELDS

# Set up logging
logger = logging.getLogger(__name__)

OPTION_ADDED = "Option added successfully"
OPTION_EXISTS = "Value already exists"

def _validate_field(field_name: str) -> None:
    if field_name not in VALID_FIELDS:
        raise ValidationFailedException("Invalid field name")

def _find_option(db: Session, field_name: str, value: str) -> Optional[DropdownOption]:
    return (
        db.query(DropdownOption)
        .filter(
            DropdownOption.field_name == field_name,
            func.lower(DropdownOption.option_value) == value.lower(),
        )
        .first()
    )

def add_dropdown_option(db: Session, field_name: str, value: Optional[str]) -> Tuple[DropdownOption, bool]:
    """
    Add a value to a pick-list.

    Adding a value that already exists (ignoring case) is not an error; the
    stored option is returned and nothing is inserted.

    Args:
        db: Database session
        field_name: Pick-list name, e.g. "doctorName"
        value: Value to add (trimmed)

    Returns:
        Tuple of (option, created flag)

    Raises:
        ValidationFailedException: If the value is blank or the field is unknown
    """
    value = (value or "").strip()
    if not value:
        raise ValidationFailedException("Value cannot be empty")
    _validate_field(field_name)

    existing = _find_option(db, field_name, value)
    if existing:
        logger.info(f"Dropdown value {value!r} already present in {field_name}")
        return existing, False

    option = DropdownOption(id=new_id(), field_name=field_name, option_value=value)
    db.add(option)
    commit_or_raise(db, "add dropdown option", option)
    logger.info(f"Dropdown value {value!r} added to {field_name}")
    return option, True

def get_dropdown_options(db: Session, field_name: str) -> List[str]:
    """
    Values of a pick-list in ascending order.

    Raises:
        ValidationFailedException: If the field is unknown
    """
    _validate_field(field_name)
    rows = (
        db.query(DropdownOption.option_value)
        .filter(DropdownOption.field_name == field_name)
        .order_by(DropdownOption.option_value.asc())
        .all()
    )
    return [value for (value,) in rows]

def delete_dropdown_option(db: Session, field_name: str, value: Optional[str]) -> str:
    """
    Remove a value from a pick-list (matched ignoring case).

    Raises:
        ValidationFailedException: If the value is blank or the field is unknown
        RecordNotFoundException: If the value is not in the pick-list
    """
    value = (value or "").strip()
    if not value:
        raise ValidationFailedException("Value cannot be empty")
    _validate_field(field_name)

    option = _find_option(db, field_name, value)
    if not option:
        raise RecordNotFoundException(f"Value {value!r} not found in {field_name}")

    stored = option.option_value
    db.delete(option)
    commit_or_raise(db, "delete dropdown option")
    logger.info(f"Dropdown value {stored!r} removed from {field_name}")
    return stored
