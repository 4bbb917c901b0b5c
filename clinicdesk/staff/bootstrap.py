"""
Bootstrap utilities for first administrator creation.
Creates the first admin account from environment variables when the staff table is empty.
"""
import logging
from sqlalchemy.orm import Session

from ..config import settings
from ..core.permissions import MODULE_NAMES
from ..core.records import new_id
from ..core.security import hash_password
from .models import Staff

logger = logging.getLogger(__name__)

def create_bootstrap_admin(db: Session) -> bool:
    """
    Create the first admin account from settings.

    Args:
        db: Database session

    Returns:
        bool: True if the admin was created, False otherwise
    """
    username = (settings.bootstrap_admin_username or "").strip().lower()
    if not username or not settings.bootstrap_admin_password:
        logger.warning("Bootstrap admin credentials not provided in environment variables")
        return False

    admin = Staff(
        id=new_id(),
        username=username,
        password_hash=hash_password(settings.bootstrap_admin_password),
        full_name=settings.bootstrap_admin_name,
        position="Administrator",
        is_admin=True,
        extra={},
    )
    admin.permissions = {module: True for module in MODULE_NAMES}

    try:
        db.add(admin)
        db.commit()
    except Exception as e:
        logger.error(f"Failed to create bootstrap admin: {str(e)}")
        db.rollback()
        return False

    logger.info(f"Bootstrap admin created: {admin.username} (ID: {admin.id})")
    return True

def bootstrap_admin_if_needed(db: Session) -> None:
    """
    Create the bootstrap admin if no staff account exists yet.
    Called during application startup.

    Args:
        db: Database session
    """
    staff_count = db.query(Staff).count()
    if staff_count:
        logger.info(f"Staff accounts found ({staff_count} total). Bootstrap not needed.")
        return

    logger.info("No staff accounts found. Attempting bootstrap admin creation...")
    if not create_bootstrap_admin(db):
        logger.info("To create the first admin, set BOOTSTRAP_ADMIN_USERNAME and BOOTSTRAP_ADMIN_PASSWORD in your .env file.")
