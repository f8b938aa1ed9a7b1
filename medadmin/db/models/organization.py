from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from medadmin.core.clock import utcnow
from medadmin.db.base import Base, new_id
from medadmin.db.models.approvable import ApprovableMixin


class Organization(ApprovableMixin, Base):
    """A practice or clinic group applying to list on the platform."""
    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    status = Column(String(50), nullable=False, default="PENDING_APPROVAL", index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    memberships = relationship(
        "OrganizationMembership", back_populates="organization", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Organization {self.name} [{self.status}]>"


class OrganizationMembership(Base):
    __tablename__ = "organization_memberships"

    id = Column(String(36), primary_key=True, default=new_id)
    organization_id = Column(String(36), ForeignKey("organizations.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default="STAFF")  # OWNER, ADMIN, MANAGER, STAFF
    created_at = Column(DateTime, default=utcnow)

    organization = relationship("Organization", back_populates="memberships")
    user = relationship("User", back_populates="memberships")
