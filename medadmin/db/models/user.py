from sqlalchemy import Column, String, DateTime, Boolean
from sqlalchemy.orm import relationship

from medadmin.core.clock import utcnow
from medadmin.db.base import Base, new_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255))
    role = Column(String(20), nullable=False, default="USER")  # USER, ADMIN, SUPER_ADMIN
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)

    # Relationships
    provider = relationship(
        "Provider", back_populates="user", uselist=False, foreign_keys="Provider.user_id"
    )
    memberships = relationship(
        "OrganizationMembership", back_populates="user", order_by="OrganizationMembership.created_at"
    )

    def __repr__(self) -> str:
        return f"<User {self.email} [{self.role}]>"
