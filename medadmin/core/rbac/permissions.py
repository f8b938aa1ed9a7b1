"""Permission model for MedAdmin RBAC.

Permission string format: "resource:action"
Examples:
  - providers:approve
  - organizations:approve
  - accounts:override
"""

from enum import Enum


class Resource(str, Enum):
    """Resources that can be protected by permissions."""

    PROVIDERS = "providers"
    ORGANIZATIONS = "organizations"
    ACCOUNTS = "accounts"
    PROFILE = "profile"
    PLATFORM = "platform"
    ADMINS = "admins"


class Action(str, Enum):
    """Actions that can be performed on resources."""

    READ = "read"
    UPDATE = "update"
    APPROVE = "approve"
    OVERRIDE = "override"
    MANAGE = "manage"


class Permission(str, Enum):
    """Named platform permissions."""

    VIEW_PROFILE = "profile:read"
    EDIT_PROFILE = "profile:update"
    APPROVE_PROVIDERS = "providers:approve"
    APPROVE_ORGANIZATIONS = "organizations:approve"
    ACCESS_ANY_ACCOUNT = "accounts:override"
    MANAGE_PLATFORM = "platform:manage"
    MANAGE_ADMINS = "admins:manage"

    def __str__(self) -> str:
        return self.value

    @property
    def resource(self) -> Resource:
        return Resource(self.value.split(":")[0])

    @property
    def action(self) -> Action:
        return Action(self.value.split(":")[1])
