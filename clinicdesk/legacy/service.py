"""
Legacy Snapshot Service - Explicit export and import of spreadsheet snapshots.

Staff rows are not part of a snapshot since they carry password hashes.
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Type
from sqlalchemy import Boolean, Date, DateTime, Float, Integer, JSON, inspect
from sqlalchemy.orm import Session
import json
import logging
import re

from ..config import settings
from ..exceptions import ValidationFailedException
from ..core.records import build_record, commit_or_raise, utcnow
from ..patients.models import Patient
from ..prescriptions.models import Prescription
from ..operations.models import Operation, InPatient
from ..medicines.models import Medicine, MedicineDispenseRecord
from ..opticals.models import OpticalItem, OpticalDispenseRecord
from ..labs.models import LabRecord
from ..dropdowns.models import DropdownOption
from ..expenses.models import Expense
from .store import SheetStore

# Set up logging
logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

ENTITIES: Dict[str, Type] = {
    "patients": Patient,
    "prescriptions": Prescription,
    "operations": Operation,
    "inpatients": InPatient,
    "medicines": Medicine,
    "medicine_dispense_records": MedicineDispenseRecord,
    "opticals": OpticalItem,
    "optical_dispense_records": OpticalDispenseRecord,
    "labs": LabRecord,
    "dropdown_options": DropdownOption,
    "expenses": Expense,
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])([A-Z])")


def _snake(key: str) -> str:
    """Legacy sheets use camelCase headers; columns are snake_case."""
    return _CAMEL_BOUNDARY.sub(r"_\1", str(key).strip()).lower()


def _coerce(column_type, value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(column_type, DateTime):
        if isinstance(value, datetime):
            parsed = value
        else:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    if isinstance(column_type, Date):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        return date.fromisoformat(str(value)[:10])
    if isinstance(column_type, JSON):
        return json.loads(value) if isinstance(value, str) else value
    if isinstance(column_type, Boolean):
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1", "yes")
        return bool(value)
    if isinstance(column_type, Integer):
        return int(float(value))
    if isinstance(column_type, Float):
        return float(value)
    return str(value)


def _row_to_payload(model: Type, row: Dict[str, Any]) -> Dict[str, Any]:
    columns = {attr.key: attr.columns[0].type for attr in inspect(model).column_attrs}
    payload: Dict[str, Any] = {}
    for key, value in row.items():
        name = key if key in columns else _snake(key)
        if name in columns:
            payload[name] = _coerce(columns[name], value)
        elif value not in (None, ""):
            payload[key] = value
    return payload


def _record_to_row(record: Any) -> Dict[str, Any]:
    return {attr.key: getattr(record, attr.key) for attr in inspect(type(record)).column_attrs}


def _resolve_entity(entity: str) -> Type:
    model = ENTITIES.get(entity)
    if model is None:
        raise ValidationFailedException(f"Unknown entity: {entity}")
    return model


def export_snapshot(db: Session, directory: Optional[str] = None) -> Dict[str, Any]:
    """
    Write every entity table to its sheet plus a manifest.

    Args:
        db: Database session
        directory: Target directory (defaults to settings.legacy_dir)

    Returns:
        The manifest: version, exported_at and row counts per entity
    """
    store = SheetStore(directory or settings.legacy_dir)
    counts: Dict[str, int] = {}
    for entity, model in ENTITIES.items():
        headers = [attr.key for attr in inspect(model).column_attrs]
        rows = [_record_to_row(record) for record in db.query(model).all()]
        store.write_records(entity, rows, headers)
        counts[entity] = len(rows)

    manifest = {
        "version": SNAPSHOT_VERSION,
        "exported_at": utcnow().isoformat(),
        "counts": counts,
    }
    (store.directory / "manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    logger.info(f"Snapshot exported to {store.directory}: {sum(counts.values())} rows")
    return manifest


def import_snapshot(db: Session, entity: str, directory: Optional[str] = None) -> int:
    """
    Insert the rows of a legacy sheet whose id is not already stored.

    Args:
        db: Database session
        entity: Entity name, e.g. "patients"
        directory: Source directory (defaults to settings.legacy_dir)

    Returns:
        Number of rows inserted

    Raises:
        ValidationFailedException: If the entity is unknown or a row cannot be read
    """
    model = _resolve_entity(entity)
    store = SheetStore(directory or settings.legacy_dir)
    rows = store.read_records(entity)
    existing = {record_id for (record_id,) in db.query(model.id).all()}

    inserted = 0
    for index, row in enumerate(rows, start=2):
        try:
            payload = _row_to_payload(model, row)
        except (TypeError, ValueError) as e:
            raise ValidationFailedException(f"Row {index} of {entity} could not be read: {str(e)}")

        record_id = payload.get("id")
        if record_id is not None and record_id in existing:
            continue

        overrides = {
            key: payload[key]
            for key in ("id", "created_at", "updated_at")
            if payload.get(key) is not None
        }
        if not isinstance(payload.get("extra"), dict):
            payload.pop("extra", None)
        record = build_record(model, payload, **overrides)
        db.add(record)
        existing.add(record.id)
        inserted += 1

    commit_or_raise(db, f"import {entity} snapshot")
    logger.info(f"Imported {inserted} of {len(rows)} {entity} rows")
    return inserted
