"""
Uniform response envelope returned by every API operation.
"""
from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")

class Envelope(BaseModel, Generic[T]):
    """
    Envelope wrapping the result of an operation.

    Attributes:
        success: Whether the operation succeeded
        data: Operation payload, None on failure
        message: Human readable status message
        error: Error kind on failure (validation, not_found, conflict, ...)
    """
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None
    error: Optional[str] = None


def ok(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Build a successful envelope."""
    return {"success": True, "data": data, "message": message, "error": None}


def fail(kind: str, message: str) -> Dict[str, Any]:
    """Build a failed envelope."""
    return {"success": False, "data": None, "message": message, "error": kind}
