"""Columns shared by every entity that goes through admin approval."""

from sqlalchemy import Column, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import declared_attr


class ApprovableMixin:
    """
    Decision columns; each model declares its own ``status`` default.

    ``approved_at``/``approved_by_id`` and ``rejected_at``/``rejection_reason``
    are mutually exclusive: the workflow clears one pair when it sets the other.
    """

    approved_at = Column(DateTime, nullable=True)
    rejected_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    @declared_attr
    def approved_by_id(cls):
        return Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
