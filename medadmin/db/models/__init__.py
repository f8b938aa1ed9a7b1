"""Database models for MedAdmin."""

from medadmin.db.models.user import User
from medadmin.db.models.provider import Provider, ProviderType, ProviderTypeAssignment
from medadmin.db.models.organization import Organization, OrganizationMembership
from medadmin.db.models.requirement import RequirementType, RequirementSubmission
from medadmin.db.models.audit import AuditLog, AuditSeverity

__all__ = [
    "User",
    "Provider",
    "ProviderType",
    "ProviderTypeAssignment",
    "Organization",
    "OrganizationMembership",
    "RequirementType",
    "RequirementSubmission",
    "AuditLog",
    "AuditSeverity",
]
