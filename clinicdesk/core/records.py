"""
Helpers shared by the entity services.

Entities are explicit models with typed columns plus a reserved ``extra`` JSON
column. Incoming payloads may carry fields the model does not know about; those
land in ``extra`` instead of being dropped.
"""
import uuid
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Tuple, Type

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from ..exceptions import BackendException

logger = logging.getLogger(__name__)

# Columns callers may never write directly
PROTECTED_COLUMNS = {"id", "extra", "created_at", "updated_at"}


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Timezone-aware current UTC time, used as the default for timestamps."""
    return datetime.now(timezone.utc)


def column_names(model: Type) -> set:
    """Names of the mapped column attributes of a model class."""
    return {attr.key for attr in inspect(model).column_attrs}


def split_payload(
    model: Type,
    data: Dict[str, Any],
    protected: Iterable[str] = PROTECTED_COLUMNS
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Split an incoming payload into known column values and extension fields.

    Args:
        model: SQLAlchemy model class
        data: Payload as a plain dict
        protected: Column names that are silently ignored

    Returns:
        Tuple of (column values, extension fields)
    """
    known = column_names(model)
    protected = set(protected)
    columns: Dict[str, Any] = {}
    extra: Dict[str, Any] = dict(data.get("extra") or {})

    for key, value in data.items():
        if key == "extra" or key in protected:
            continue
        if key in known:
            columns[key] = value
        else:
            extra[key] = value

    return columns, extra


def apply_payload(record: Any, data: Dict[str, Any], protected: Iterable[str] = PROTECTED_COLUMNS) -> Any:
    """
    Apply a partial payload onto an existing record.

    Unknown fields are merged into the record's ``extra`` map.

    Args:
        record: Model instance to mutate
        data: Partial payload
        protected: Column names that may not be overwritten

    Returns:
        The mutated record
    """
    columns, extra = split_payload(type(record), data, protected)
    for field, value in columns.items():
        setattr(record, field, value)
    if extra:
        # Reassign so SQLAlchemy notices the JSON change
        record.extra = {**(record.extra or {}), **extra}
    return record


def build_record(model: Type, data: Dict[str, Any], **overrides) -> Any:
    """
    Create a new model instance from a payload, assigning a fresh id.

    Args:
        model: SQLAlchemy model class
        data: Payload as a plain dict
        **overrides: Column values that take precedence over the payload

    Returns:
        A transient model instance
    """
    columns, extra = split_payload(model, data)
    columns.update(overrides)
    columns.setdefault("id", new_id())
    # Log tables have no extension map
    if "extra" in column_names(model):
        columns["extra"] = extra or {}
    return model(**columns)


def commit_or_raise(db: Session, action: str, record: Any = None) -> None:
    """
    Commit the session, rolling back and raising BackendException on failure.

    Args:
        db: Database session
        action: Description used in the log line and error message
        record: Optional record to refresh after the commit
    """
    try:
        db.commit()
        if record is not None:
            db.refresh(record)
    except Exception as e:
        db.rollback()
        logger.error(f"Error while trying to {action}: {str(e)}")
        raise BackendException(f"An error occurred while trying to {action}")
