"""Tests for RBAC permission system."""

import pytest

from medadmin.core.errors import PermissionDeniedError
from medadmin.core.identity import CurrentUser
from medadmin.core.rbac import (
    Action,
    Permission,
    PermissionChecker,
    Resource,
    SystemRole,
    get_role_permissions,
    has_permission,
    require_permission,
)
from medadmin.core.rbac.roles import is_admin_role


class TestPermissionModel:
    """Test permission definitions."""

    def test_permission_string_format(self):
        assert str(Permission.APPROVE_PROVIDERS) == "providers:approve"
        assert str(Permission.ACCESS_ANY_ACCOUNT) == "accounts:override"

    def test_permission_parts(self):
        perm = Permission.APPROVE_ORGANIZATIONS
        assert perm.resource == Resource.ORGANIZATIONS
        assert perm.action == Action.APPROVE


class TestPermissionChecker:
    """Test PermissionChecker class."""

    def test_has_permission_exact_match(self):
        checker = PermissionChecker(["providers:approve", "profile:read"])
        assert checker.has_permission("providers:approve")
        assert checker.has_permission(Permission.VIEW_PROFILE)
        assert not checker.has_permission("organizations:approve")

    def test_has_permission_resource_wildcard(self):
        checker = PermissionChecker(["providers:*"])
        assert checker.has_permission("providers:approve")
        assert checker.has_permission("providers:read")
        assert not checker.has_permission("accounts:override")

    def test_has_permission_global_wildcard(self):
        checker = PermissionChecker(["*:*"])
        assert checker.has_permission("accounts:override")
        assert checker.has_permission("admins:manage")

    def test_has_any_and_all(self):
        checker = PermissionChecker(["providers:approve"])
        assert checker.has_any_permission(["organizations:approve", "providers:approve"])
        assert not checker.has_all_permissions(["organizations:approve", "providers:approve"])

    def test_empty_permissions(self):
        assert not PermissionChecker([]).has_permission("profile:read")
        assert not PermissionChecker(None).has_permission("profile:read")


class TestHelpers:

    def test_has_permission_for_user(self):
        user = CurrentUser(id="u-1", permissions=frozenset({"providers:approve"}))
        assert has_permission(user, Permission.APPROVE_PROVIDERS)
        assert not has_permission(user, Permission.ACCESS_ANY_ACCOUNT)

    def test_has_permission_unauthenticated(self):
        assert not has_permission(None, Permission.VIEW_PROFILE)

    def test_require_permission(self):
        require_permission(["accounts:override"], Permission.ACCESS_ANY_ACCOUNT)
        with pytest.raises(PermissionDeniedError) as exc:
            require_permission(["profile:read"], Permission.ACCESS_ANY_ACCOUNT)
        assert exc.value.required_permission == Permission.ACCESS_ANY_ACCOUNT


class TestRoles:
    """Test the system role hierarchy."""

    def test_user_permissions(self):
        assert get_role_permissions(SystemRole.USER) == ["profile:read", "profile:update"]

    def test_admin_inherits_user(self):
        perms = get_role_permissions("ADMIN")
        assert "profile:read" in perms
        assert "providers:approve" in perms
        assert "organizations:approve" in perms
        assert "accounts:override" in perms
        assert "admins:manage" not in perms

    def test_super_admin_inherits_admin(self):
        admin = set(get_role_permissions("ADMIN"))
        super_admin = set(get_role_permissions("SUPER_ADMIN"))
        assert admin < super_admin
        assert {"admins:manage", "platform:manage"} <= super_admin

    def test_unknown_role(self):
        assert get_role_permissions("PATIENT") == []

    @pytest.mark.parametrize("role,expected", [
        ("ADMIN", True),
        ("SUPER_ADMIN", True),
        ("USER", False),
        ("SOMETHING", False),
        (None, False),
    ])
    def test_is_admin_role(self, role, expected):
        assert is_admin_role(role) is expected
