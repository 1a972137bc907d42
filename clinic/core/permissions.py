"""
Core permissions utilities for role-based access control.
"""
from enum import Enum
from typing import Dict, List, Set
from ..users.models import UserRole

class Permission(str, Enum):
    """
    Permission types for role-based access control.
    """
    # Patient permissions
    VIEW_PATIENTS = "view_patients"
    CREATE_PATIENT = "create_patient"

    # Appointment permissions
    VIEW_APPOINTMENTS = "view_appointments"
    CREATE_APPOINTMENT = "create_appointment"
    UPDATE_APPOINTMENT = "update_appointment"
    COMPLETE_CONSULTATION = "complete_consultation"

    # Calendar permissions
    MANAGE_BLOCKERS = "manage_blockers"

    # Follow-up permissions
    VIEW_FOLLOWUPS = "view_followups"
    MANAGE_FOLLOWUPS = "manage_followups"

    # Billing permissions
    VIEW_INVOICES = "view_invoices"
    RECORD_PAYMENT = "record_payment"


# Role-based permission mapping
ROLE_PERMISSIONS: Dict[UserRole, List[Permission]] = {
    UserRole.ADMIN: list(Permission),
    UserRole.DOCTOR: [
        Permission.VIEW_PATIENTS,
        Permission.CREATE_PATIENT,
        Permission.VIEW_APPOINTMENTS,
        Permission.CREATE_APPOINTMENT,
        Permission.UPDATE_APPOINTMENT,
        Permission.COMPLETE_CONSULTATION,
        Permission.MANAGE_BLOCKERS,
        Permission.VIEW_FOLLOWUPS,
        Permission.MANAGE_FOLLOWUPS,
        Permission.VIEW_INVOICES,
    ],
    UserRole.RECEPTIONIST: [
        # Front desk: intake, booking, check-in, follow-up calls and payments
        Permission.VIEW_PATIENTS,
        Permission.CREATE_PATIENT,
        Permission.VIEW_APPOINTMENTS,
        Permission.CREATE_APPOINTMENT,
        Permission.UPDATE_APPOINTMENT,
        Permission.VIEW_FOLLOWUPS,
        Permission.MANAGE_FOLLOWUPS,
        Permission.VIEW_INVOICES,
        Permission.RECORD_PAYMENT,
    ],
}


def get_permissions_for_role(role: UserRole) -> Set[Permission]:
    """
    Get permissions for a specific role.
    
    Args:
        role: User role
        
    Returns:
        Set[Permission]: Set of permissions for the role
    """
    return set(ROLE_PERMISSIONS.get(role, []))


def has_permission(role: UserRole, permission: Permission) -> bool:
    """
    Check if a role has a specific permission.
    
    Args:
        role: User role
        permission: Permission to check
        
    Returns:
        bool: True if the role has the permission
    """
    return permission in get_permissions_for_role(role)
