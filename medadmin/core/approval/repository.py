"""Persistence for approvable entities.

``compare_and_swap_status`` is the only write path the workflow uses: the
row is updated only while it still holds the expected status, which is what
keeps two concurrent decisions on the same entity from both succeeding.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import and_, update
from sqlalchemy.orm import Session

from medadmin.db.models import (
    Organization,
    Provider,
    ProviderType,
    ProviderTypeAssignment,
    RequirementSubmission,
    RequirementType,
)

from ..clock import utcnow
from .states import ApprovalStatus, EntityKind, to_stored


MODELS = {
    EntityKind.PROVIDER: Provider,
    EntityKind.ORGANIZATION: Organization,
    EntityKind.REQUIREMENT_SUBMISSION: RequirementSubmission,
}


class ApprovableRepository:
    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def model_for(kind: EntityKind):
        return MODELS[kind]

    def get(self, kind: EntityKind, entity_id: str):
        """Fetch one entity by id, or ``None``."""
        model = self.model_for(kind)
        return self.db.query(model).filter(model.id == entity_id).first()

    def list_by_status(
        self,
        kind: EntityKind,
        status: Optional[ApprovalStatus] = None,
        *,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Any]:
        """List entities of ``kind`` newest first, optionally filtered by status."""
        model = self.model_for(kind)
        query = self.db.query(model)
        if status is not None:
            query = query.filter(model.status == to_stored(kind, status))
        return query.order_by(model.created_at.desc()).offset(offset).limit(limit).all()

    def compare_and_swap_status(
        self,
        kind: EntityKind,
        entity_id: str,
        expected: ApprovalStatus,
        new: ApprovalStatus,
        values: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Move ``entity_id`` from ``expected`` to ``new`` and apply ``values``.

        Returns:
            True if the row was in ``expected`` and has been updated, False if
            it no longer exists or another writer changed its status first.
        """
        model = self.model_for(kind)
        stmt = (
            update(model)
            .where(
                and_(
                    model.id == entity_id,
                    model.status == to_stored(kind, expected),
                )
            )
            .values(status=to_stored(kind, new), updated_at=utcnow(), **(values or {}))
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1

    def unapproved_required_requirements(self, provider_id: str) -> Dict[str, List[str]]:
        """
        Required requirements of the provider's assigned types that lack an
        approved submission, grouped by provider type name.

        A requirement the provider never submitted counts as unapproved.
        """
        approved = to_stored(EntityKind.REQUIREMENT_SUBMISSION, ApprovalStatus.APPROVED)
        rows = (
            self.db.query(ProviderType.name, RequirementType.name)
            .join(ProviderTypeAssignment, ProviderTypeAssignment.provider_type_id == ProviderType.id)
            .join(RequirementType, RequirementType.provider_type_id == ProviderType.id)
            .outerjoin(
                RequirementSubmission,
                and_(
                    RequirementSubmission.requirement_type_id == RequirementType.id,
                    RequirementSubmission.provider_id == provider_id,
                    RequirementSubmission.status == approved,
                ),
            )
            .filter(
                and_(
                    ProviderTypeAssignment.provider_id == provider_id,
                    RequirementType.is_required.is_(True),
                    RequirementSubmission.id.is_(None),
                )
            )
            .order_by(ProviderType.name, RequirementType.name)
            .all()
        )
        pending: Dict[str, List[str]] = {}
        for type_name, requirement_name in rows:
            pending.setdefault(type_name, []).append(requirement_name)
        return pending
