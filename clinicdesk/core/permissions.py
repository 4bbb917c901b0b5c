"""
Core permissions utilities for module-based access control.

A staff member may use a module when they are an administrator or when
their permission map has a truthy entry for that module.
"""
from enum import Enum
from typing import Dict, Optional

class Module(str, Enum):
    """
    Application modules a staff member can be granted access to.
    """
    PATIENTS = "patients"
    PRESCRIPTIONS = "prescriptions"
    MEDICINES = "medicines"
    OPTICALS = "opticals"
    RECEIPTS = "receipts"
    ANALYTICS = "analytics"
    STAFF = "staff"
    OPERATIONS = "operations"
    REPORTS = "reports"
    DUES_FOLLOW_UP = "duesFollowUp"
    DATA = "data"
    CERTIFICATES = "certificates"
    LABS = "labs"


MODULE_NAMES = [module.value for module in Module]

# Flat column on the staff table backing each module flag
MODULE_COLUMNS: Dict[str, str] = {
    Module.PATIENTS.value: "perm_patients",
    Module.PRESCRIPTIONS.value: "perm_prescriptions",
    Module.MEDICINES.value: "perm_medicines",
    Module.OPTICALS.value: "perm_opticals",
    Module.RECEIPTS.value: "perm_receipts",
    Module.ANALYTICS.value: "perm_analytics",
    Module.STAFF.value: "perm_staff",
    Module.OPERATIONS.value: "perm_operations",
    Module.REPORTS.value: "perm_reports",
    Module.DUES_FOLLOW_UP.value: "perm_dues_follow_up",
    Module.DATA.value: "perm_data",
    Module.CERTIFICATES.value: "perm_certificates",
    Module.LABS.value: "perm_labs",
}


def has_module_access(is_admin: bool, permissions: Optional[Dict[str, bool]], module: str) -> bool:
    """
    Check if a staff member may use a module.

    Args:
        is_admin: Administrator flag
        permissions: Nested permission map
        module: Module key

    Returns:
        bool: True if access is granted
    """
    if is_admin:
        return True
    return bool((permissions or {}).get(module))


def is_administrator(is_admin: bool, permissions: Optional[Dict[str, bool]]) -> bool:
    """
    Administrative rights: the admin flag, or permission to manage staff.

    Args:
        is_admin: Administrator flag
        permissions: Nested permission map

    Returns:
        bool: True if the account counts as an administrator
    """
    return bool(is_admin) or bool((permissions or {}).get(Module.STAFF.value))
