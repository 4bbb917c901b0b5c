"""
Legacy Router - Spreadsheet snapshot jobs and app settings.
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.envelope import Envelope, ok
from ..core.permissions import Module
from ..staff.dependencies import get_current_staff, require_module
from .schemas import SnapshotManifest, ImportResult, AppSettingsUpdate
from .settings_store import get_app_settings, update_app_settings
from . import service

router = APIRouter()

@router.post(
    "/snapshot/export",
    response_model=Envelope[SnapshotManifest],
    dependencies=[Depends(require_module(Module.DATA))]
)
async def export_snapshot(db: Session = Depends(get_db)):
    """Write every entity table to the legacy directory."""
    return ok(service.export_snapshot(db), "Snapshot exported successfully")

@router.post(
    "/snapshot/import/{entity}",
    response_model=Envelope[ImportResult],
    dependencies=[Depends(require_module(Module.DATA))]
)
async def import_snapshot(entity: str, db: Session = Depends(get_db)):
    """Insert legacy rows of an entity that are not stored yet."""
    inserted = service.import_snapshot(db, entity)
    return ok({"entity": entity, "inserted": inserted}, f"Imported {inserted} {entity} records")

@router.get("/settings", response_model=Envelope[Dict[str, Any]], dependencies=[Depends(get_current_staff)])
async def read_settings():
    """Get app settings merged over the defaults."""
    return ok(get_app_settings())

@router.put("/settings", response_model=Envelope[Dict[str, Any]], dependencies=[Depends(get_current_staff)])
async def write_settings(body: AppSettingsUpdate):
    """Merge values into the stored app settings."""
    return ok(update_app_settings(dict(body.model_extra or {})), "Settings updated successfully")
