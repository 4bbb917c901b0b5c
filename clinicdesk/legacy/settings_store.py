"""
App settings kept as a flat JSON key/value file.
"""
from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging

from ..config import settings

# Set up logging
logger = logging.getLogger(__name__)

DEFAULT_APP_SETTINGS = {
    "theme": "light",
    "language": "en",
}

def settings_path(directory: Optional[str] = None) -> Path:
    return Path(directory or settings.legacy_dir).expanduser() / "settings.json"

def _read_stored(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        stored = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Error reading settings from {path}: {str(e)}")
        return {}
    return stored if isinstance(stored, dict) else {}

def get_app_settings(directory: Optional[str] = None) -> Dict[str, Any]:
    """Defaults merged with the stored values."""
    return {**DEFAULT_APP_SETTINGS, **_read_stored(settings_path(directory))}

def update_app_settings(data: Dict[str, Any], directory: Optional[str] = None) -> Dict[str, Any]:
    """
    Merge values into the stored settings and save them.

    Args:
        data: Keys to set
        directory: Settings directory (defaults to settings.legacy_dir)

    Returns:
        The full settings after the update, defaults included
    """
    path = settings_path(directory)
    stored = {**_read_stored(path), **data}
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(stored), encoding="utf-8")
    logger.info(f"Settings updated: {', '.join(sorted(data))}")
    return {**DEFAULT_APP_SETTINGS, **stored}
