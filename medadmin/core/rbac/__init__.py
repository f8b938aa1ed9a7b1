"""RBAC (Role-Based Access Control) module for MedAdmin.

This module defines the permission model, role definitions, and access control utilities.
"""

from .permissions import Permission, Resource, Action
from .roles import SystemRole, ADMIN_ROLES, get_role_permissions
from .checker import PermissionChecker, has_permission, require_permission

__all__ = [
    "Permission",
    "Resource",
    "Action",
    "SystemRole",
    "ADMIN_ROLES",
    "get_role_permissions",
    "PermissionChecker",
    "has_permission",
    "require_permission",
]
