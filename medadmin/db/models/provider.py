from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from medadmin.core.clock import utcnow
from medadmin.db.base import Base, new_id
from medadmin.db.models.approvable import ApprovableMixin


class ProviderType(Base):
    """A kind of practice (GP, physiotherapist, ...) carrying its own requirements."""
    __tablename__ = "provider_types"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, unique=True)

    requirements = relationship("RequirementType", back_populates="provider_type")
    assignments = relationship("ProviderTypeAssignment", back_populates="provider_type")

    def __repr__(self) -> str:
        return f"<ProviderType {self.name}>"


class Provider(ApprovableMixin, Base):
    """A healthcare service provider applying to list on the platform."""
    __tablename__ = "providers"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    status = Column(String(50), nullable=False, default="PENDING_APPROVAL", index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="provider", foreign_keys=[user_id])
    type_assignments = relationship(
        "ProviderTypeAssignment", back_populates="provider", cascade="all, delete-orphan"
    )
    requirement_submissions = relationship(
        "RequirementSubmission", back_populates="provider", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Provider {self.name} [{self.status}]>"


class ProviderTypeAssignment(Base):
    __tablename__ = "provider_type_assignments"
    __table_args__ = (UniqueConstraint("provider_id", "provider_type_id"),)

    id = Column(String(36), primary_key=True, default=new_id)
    provider_id = Column(String(36), ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_type_id = Column(String(36), ForeignKey("provider_types.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow)

    provider = relationship("Provider", back_populates="type_assignments")
    provider_type = relationship("ProviderType", back_populates="assignments")
