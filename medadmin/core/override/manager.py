"""Admin override sessions for accessing any account.

Lets an administrator temporarily act on behalf of a non-admin user for
support and dispute resolution. Every start and end is audited.
"""

from datetime import timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from medadmin.db.models import User

from ..audit import AuditAction, AuditEntry, AuditSeverity, AuditSink, DatabaseAuditSink
from ..clock import utcnow
from ..config import Settings, get_settings
from ..errors import PermissionDeniedError
from ..events import ChangeNotifier
from ..identity import CurrentUser
from ..logger import get_logger
from ..rbac.checker import require_permission
from ..rbac.permissions import Permission
from ..rbac.roles import is_admin_role
from ..results import ActionResult, FailureReason
from .session import OverrideSession
from .store import Clock, SessionStore


logger = get_logger(__name__)


class OverrideSessionManager:
    """
    Grants, ends and looks up override sessions.

    The session store is shared across requests; the database session is
    only used to resolve the target account and write audit entries.
    """

    def __init__(
        self,
        db: Session,
        store: SessionStore,
        *,
        audit: Optional[AuditSink] = None,
        notifier: Optional[ChangeNotifier] = None,
        settings: Optional[Settings] = None,
        clock: Clock = utcnow,
    ):
        self.db = db
        self.store = store
        self.audit = audit or DatabaseAuditSink(db)
        self.notifier = notifier
        self.settings = settings or get_settings()
        self.clock = clock

    def initiate(
        self,
        admin: Optional[CurrentUser],
        target_email: str,
        reason: str,
        duration_minutes: Optional[int] = None,
    ) -> ActionResult[OverrideSession]:
        """Start an override session on the account registered to ``target_email``."""
        if admin is None:
            return ActionResult.fail(FailureReason.NOT_AUTHENTICATED, "Not authenticated")

        try:
            require_permission(admin.permissions, Permission.ACCESS_ANY_ACCOUNT)
        except PermissionDeniedError as e:
            logger.warning("Override attempt by %s without permission", admin.id)
            return ActionResult.fail(FailureReason.PERMISSION_DENIED, str(e))

        reason = (reason or "").strip()
        if not reason:
            return ActionResult.fail(FailureReason.MISSING_REASON, "Override reason is required")

        if duration_minutes is None:
            duration_minutes = self.settings.override_default_minutes
        low, high = self.settings.override_min_minutes, self.settings.override_max_minutes
        if not low <= duration_minutes <= high:
            return ActionResult.fail(
                FailureReason.DURATION_OUT_OF_RANGE,
                f"Duration must be between {low} and {high} minutes",
            )

        session = None
        stored = False
        try:
            target = (
                self.db.query(User)
                .filter(func.lower(User.email) == (target_email or "").strip().lower())
                .first()
            )
            if target is None:
                return ActionResult.fail(FailureReason.TARGET_NOT_FOUND, "Target user not found")

            if is_admin_role(target.role):
                return ActionResult.fail(
                    FailureReason.TARGET_IS_ADMIN, "Cannot override administrator accounts"
                )

            if self.get_active(admin.id) is not None:
                return self._already_active()

            started_at = self.clock()
            session = OverrideSession(
                original_admin_id=admin.id,
                target_user_id=target.id,
                target_user_email=target.email,
                reason=reason,
                started_at=started_at,
                expires_at=started_at + timedelta(minutes=duration_minutes),
            )
            stored = self.store.set_if_absent(admin.id, session)
            if not stored:
                # Another request for the same admin won
                return self._already_active()

            self.audit.record(
                AuditEntry(
                    actor_id=admin.id,
                    action=AuditAction.INITIATE_OVERRIDE,
                    entity_type="user",
                    entity_id=target.id,
                    reason=reason,
                    metadata={
                        "target_user_email": target.email,
                        "duration_minutes": duration_minutes,
                        "expires_at": session.expires_at.isoformat(),
                    },
                    severity=AuditSeverity.WARNING,
                    timestamp=started_at,
                )
            )
            self.db.commit()
            redirect_url = self._redirect_for(target)
        except Exception as e:
            self.db.rollback()
            if stored:
                self.store.delete(admin.id, expected=session)
            logger.exception("Error initiating account override for admin %s", admin.id)
            return ActionResult.fail(
                FailureReason.STORAGE_FAILURE,
                "Failed to initiate account override",
                details={"exception": type(e).__name__},
            )

        logger.warning(
            "Admin %s started override of %s for %d minutes: %s",
            admin.id, session.target_user_email, duration_minutes, reason,
        )
        self._notify(admin)
        return ActionResult.ok(
            f"Override session started for {session.target_user_email}",
            data=session,
            redirect_url=redirect_url,
        )

    def end(self, admin: Optional[CurrentUser]) -> ActionResult[OverrideSession]:
        """End the admin's active override session."""
        if admin is None:
            return ActionResult.fail(FailureReason.NOT_AUTHENTICATED, "Not authenticated")

        try:
            session = self.get_active(admin.id)
            if session is None or not self.store.delete(admin.id, expected=session):
                return ActionResult.fail(
                    FailureReason.NO_ACTIVE_SESSION, "No active override session found"
                )

            ended_at = self.clock()
            self.audit.record(
                AuditEntry(
                    actor_id=admin.id,
                    action=AuditAction.END_OVERRIDE,
                    entity_type="user",
                    entity_id=session.target_user_id,
                    metadata={
                        "target_user_email": session.target_user_email,
                        "duration_seconds": int((ended_at - session.started_at).total_seconds()),
                    },
                    severity=AuditSeverity.WARNING,
                    timestamp=ended_at,
                )
            )
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.exception("Error ending account override for admin %s", admin.id)
            return ActionResult.fail(
                FailureReason.STORAGE_FAILURE,
                "Failed to end account override",
                details={"exception": type(e).__name__},
            )

        logger.warning("Admin %s ended override of %s", admin.id, session.target_user_email)
        self._notify(admin)
        return ActionResult.ok("Override session ended", data=session, redirect_url="/admin")

    def get_active(self, admin_id: str) -> Optional[OverrideSession]:
        """Return the admin's live session; an expired one is evicted and ignored."""
        session = self.store.get(admin_id)
        if session is None:
            return None
        if session.is_expired(self.clock()):
            self.store.delete(admin_id, expected=session)
            return None
        return session

    def get_session_for_target(self, user_id: str) -> Optional[OverrideSession]:
        """Return the live session acting as ``user_id``, if any."""
        for session in self.store.values():
            if session.target_user_id != user_id:
                continue
            if session.is_expired(self.clock()):
                self.store.delete(session.original_admin_id, expected=session)
                continue
            return session
        return None

    def _already_active(self) -> ActionResult[OverrideSession]:
        return ActionResult.fail(
            FailureReason.SESSION_ALREADY_ACTIVE,
            "You already have an active account override session",
        )

    @staticmethod
    def _redirect_for(target: User) -> str:
        if target.provider is not None:
            return f"/providers/{target.provider.id}"
        if target.memberships:
            return f"/organizations/{target.memberships[0].organization_id}"
        return "/profile"

    def _notify(self, admin: CurrentUser) -> None:
        # Forces the admin's cached permissions to reload
        if self.notifier is not None:
            self.notifier.notify("user", admin.id)
