"""
Dropdown Schemas - Pydantic models for pick-list values.
"""
from pydantic import BaseModel

class DropdownValue(BaseModel):
    """A value to add to a pick-list"""
    value: str

class DropdownOptionResponse(BaseModel):
    """
    Result of adding a pick-list value

    Fields:
    - field_name: Pick-list name
    - option_value: Stored value (the existing spelling when it was already present)
    - created: False when the value already existed
    """
    field_name: str
    option_value: str
    created: bool
