from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from medadmin.core.clock import utcnow
from medadmin.db.base import Base, new_id
from medadmin.db.models.approvable import ApprovableMixin


class RequirementType(Base):
    """A credential or document a provider type asks for (licence, insurance, ...)."""
    __tablename__ = "requirement_types"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    provider_type_id = Column(String(36), ForeignKey("provider_types.id"), nullable=False, index=True)
    is_required = Column(Boolean, nullable=False, default=True)

    provider_type = relationship("ProviderType", back_populates="requirements")
    submissions = relationship("RequirementSubmission", back_populates="requirement_type")


class RequirementSubmission(ApprovableMixin, Base):
    __tablename__ = "requirement_submissions"

    id = Column(String(36), primary_key=True, default=new_id)
    provider_id = Column(String(36), ForeignKey("providers.id", ondelete="CASCADE"), nullable=False, index=True)
    requirement_type_id = Column(String(36), ForeignKey("requirement_types.id"), nullable=False)
    document_url = Column(String(1024), nullable=True)
    status = Column(String(50), nullable=False, default="PENDING", index=True)
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    provider = relationship("Provider", back_populates="requirement_submissions")
    requirement_type = relationship("RequirementType", back_populates="submissions")

    def __repr__(self) -> str:
        return f"<RequirementSubmission {self.requirement_type_id} [{self.status}]>"
