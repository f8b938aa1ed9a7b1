"""System role definitions for MedAdmin.

Roles inherit the permissions of the roles below them:
SUPER_ADMIN > ADMIN > USER.
"""

from enum import Enum
from typing import Dict, FrozenSet, List, NamedTuple

from .permissions import Permission


class SystemRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"


class RoleHierarchy(NamedTuple):
    role: SystemRole
    inherits: List[SystemRole]
    permissions: List[Permission]


SYSTEM_ROLE_HIERARCHIES: Dict[SystemRole, RoleHierarchy] = {
    SystemRole.SUPER_ADMIN: RoleHierarchy(
        SystemRole.SUPER_ADMIN,
        [SystemRole.ADMIN, SystemRole.USER],
        [
            Permission.MANAGE_PLATFORM,
            Permission.APPROVE_PROVIDERS,
            Permission.APPROVE_ORGANIZATIONS,
            Permission.ACCESS_ANY_ACCOUNT,
            Permission.MANAGE_ADMINS,
        ],
    ),
    SystemRole.ADMIN: RoleHierarchy(
        SystemRole.ADMIN,
        [SystemRole.USER],
        [
            Permission.APPROVE_PROVIDERS,
            Permission.APPROVE_ORGANIZATIONS,
            Permission.ACCESS_ANY_ACCOUNT,
        ],
    ),
    SystemRole.USER: RoleHierarchy(
        SystemRole.USER,
        [],
        [Permission.VIEW_PROFILE, Permission.EDIT_PROFILE],
    ),
}

# Accounts that can never be the target of an override session
ADMIN_ROLES: FrozenSet[SystemRole] = frozenset([SystemRole.ADMIN, SystemRole.SUPER_ADMIN])


def get_role_permissions(role) -> List[str]:
    """Get all permission strings for a role including inherited ones."""
    try:
        hierarchy = SYSTEM_ROLE_HIERARCHIES[SystemRole(role)]
    except ValueError:
        return []

    permissions = {str(p) for p in hierarchy.permissions}
    for inherited in hierarchy.inherits:
        permissions.update(get_role_permissions(inherited))
    return sorted(permissions)


def is_admin_role(role) -> bool:
    try:
        return SystemRole(role) in ADMIN_ROLES
    except ValueError:
        return False
