"""
Legacy Schemas - Snapshot manifests and app settings payloads.
"""
from typing import Dict
from pydantic import BaseModel

class SnapshotManifest(BaseModel):
    """
    Snapshot Manifest

    Fields:
    - version: Snapshot layout version
    - exported_at: ISO timestamp of the export (UTC)
    - counts: Rows written per entity
    """
    version: int
    exported_at: str
    counts: Dict[str, int]

class ImportResult(BaseModel):
    entity: str
    inserted: int

class AppSettingsUpdate(BaseModel):
    """Arbitrary flat key/value settings."""
    class Config:
        extra = "allow"
