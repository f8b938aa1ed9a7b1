"""Permission checking utilities for MedAdmin.

A grant matches a required ``resource:action`` permission when it is the
permission itself, ``resource:*``, or the platform-wide ``*:*``.
"""

from typing import FrozenSet, Iterable, Optional, Union

from ..errors import PermissionDeniedError
from .permissions import Permission

PermissionLike = Union[str, Permission]

GLOBAL_WILDCARD = "*:*"


def _grants_for(permission: PermissionLike) -> FrozenSet[str]:
    """Every grant that satisfies ``permission``."""
    perm_str = str(permission)
    resource, sep, _ = perm_str.partition(":")
    if not sep:
        return frozenset({perm_str})
    return frozenset({perm_str, f"{resource}:*", GLOBAL_WILDCARD})


class PermissionChecker:
    """Answers permission questions for one set of granted permissions."""

    def __init__(self, user_permissions: Optional[Iterable[PermissionLike]]):
        self.permissions = frozenset(str(p) for p in user_permissions or ())

    def has_permission(self, permission: PermissionLike) -> bool:
        return not self.permissions.isdisjoint(_grants_for(permission))

    def has_any_permission(self, permissions: Iterable[PermissionLike]) -> bool:
        return any(map(self.has_permission, permissions))

    def has_all_permissions(self, permissions: Iterable[PermissionLike]) -> bool:
        return all(map(self.has_permission, permissions))


def has_permission(user, permission: PermissionLike) -> bool:
    """Whether ``user`` (a ``CurrentUser`` or ``None``) holds ``permission``."""
    if user is None:
        return False
    return PermissionChecker(user.permissions).has_permission(permission)


def require_permission(permissions: Iterable[str], required: PermissionLike) -> None:
    """Raise :class:`PermissionDeniedError` unless ``required`` is granted."""
    if not PermissionChecker(permissions).has_permission(required):
        raise PermissionDeniedError(str(required))
