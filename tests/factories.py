"""Record builders for the booking-platform tables used in tests.

Builders flush after adding so ids and server defaults are available to the
caller. Pass keyword arguments to override the generated defaults::

    user = create_user(db_session, email="dr.smith@example.com")
    provider = create_provider(db_session, user=user)
    assert provider.status == "PENDING_APPROVAL"
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from medadmin.core.identity import CurrentUser
from medadmin.core.rbac import get_role_permissions
from medadmin.db.models import (
    AuditLog,
    Organization,
    OrganizationMembership,
    Provider,
    ProviderType,
    ProviderTypeAssignment,
    RequirementSubmission,
    RequirementType,
    User,
)


_counter = 0


def _next_id() -> int:
    """Counter used to keep default emails and names unique."""
    global _counter
    _counter += 1
    return _counter


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


def create_user(
    session: Session,
    *,
    email: Optional[str] = None,
    name: Optional[str] = None,
    role: str = "USER",
    is_active: bool = True,
) -> User:
    n = _next_id()
    user = User(
        email=email or f"user{n}@medbookings.test",
        name=name or f"Test User {n}",
        role=role,
        is_active=is_active,
    )
    session.add(user)
    session.flush()
    return user


# ---------------------------------------------------------------------------
# Provider
# ---------------------------------------------------------------------------


def create_provider(
    session: Session,
    *,
    user: Optional[User] = None,
    name: Optional[str] = None,
    status: str = "PENDING_APPROVAL",
    created_at: Optional[datetime] = None,
) -> Provider:
    n = _next_id()
    user = user or create_user(session)
    provider = Provider(
        user_id=user.id,
        name=name or f"Dr Test {n}",
        email=user.email,
        status=status,
    )
    if created_at is not None:
        provider.created_at = created_at
    session.add(provider)
    session.flush()
    return provider


# ---------------------------------------------------------------------------
# Organization
# ---------------------------------------------------------------------------


def create_organization(
    session: Session,
    *,
    name: Optional[str] = None,
    status: str = "PENDING_APPROVAL",
) -> Organization:
    n = _next_id()
    org = Organization(
        name=name or f"Test Clinic {n}",
        email=f"clinic{n}@medbookings.test",
        status=status,
    )
    session.add(org)
    session.flush()
    return org


def create_membership(
    session: Session,
    *,
    organization: Organization,
    user: User,
    role: str = "STAFF",
) -> OrganizationMembership:
    membership = OrganizationMembership(
        organization_id=organization.id,
        user_id=user.id,
        role=role,
    )
    session.add(membership)
    session.flush()
    return membership


# ---------------------------------------------------------------------------
# Requirements
# ---------------------------------------------------------------------------


def create_provider_type(session: Session, *, name: Optional[str] = None) -> ProviderType:
    provider_type = ProviderType(name=name or f"Provider Type {_next_id()}")
    session.add(provider_type)
    session.flush()
    return provider_type


def assign_provider_type(
    session: Session, provider: Provider, provider_type: ProviderType
) -> ProviderTypeAssignment:
    assignment = ProviderTypeAssignment(provider_id=provider.id, provider_type_id=provider_type.id)
    session.add(assignment)
    session.flush()
    return assignment


def create_requirement_type(
    session: Session,
    *,
    name: Optional[str] = None,
    provider_type: Optional[ProviderType] = None,
    is_required: bool = True,
) -> RequirementType:
    n = _next_id()
    provider_type = provider_type or create_provider_type(session)
    requirement_type = RequirementType(
        name=name or f"Requirement {n}",
        provider_type_id=provider_type.id,
        is_required=is_required,
    )
    session.add(requirement_type)
    session.flush()
    return requirement_type


def create_submission(
    session: Session,
    *,
    provider: Provider,
    requirement_type: Optional[RequirementType] = None,
    status: str = "PENDING",
) -> RequirementSubmission:
    requirement_type = requirement_type or create_requirement_type(session)
    submission = RequirementSubmission(
        provider_id=provider.id,
        requirement_type_id=requirement_type.id,
        document_url="https://files.medbookings.test/doc.pdf",
        status=status,
    )
    session.add(submission)
    session.flush()
    return submission


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------


def audit_rows(session: Session, **filters) -> list:
    """All audit rows matching ``filters``, oldest first."""
    return session.query(AuditLog).filter_by(**filters).order_by(AuditLog.created_at).all()


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------


def make_actor(user_id: str, role: str = "ADMIN", email: str = "") -> CurrentUser:
    """A ``CurrentUser`` carrying the permissions of ``role``."""
    return CurrentUser(
        id=user_id,
        email=email or f"{user_id}@medbookings.test",
        role=role,
        permissions=frozenset(get_role_permissions(role)),
    )
