from functools import lru_cache
from typing import Generator, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from medadmin.db.session import SessionLocal
from medadmin.db.models import User
from medadmin.core.approval import ApprovalService
from medadmin.core.events import ChangeNotifier
from medadmin.core.identity import CurrentUser
from medadmin.core.override import OverrideSessionManager, SessionStore, build_session_store
from medadmin.core.rbac import get_role_permissions
from medadmin.core.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db() -> Generator:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    db: Session = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
) -> Optional[CurrentUser]:
    """Resolve the bearer token to the acting user, or ``None`` if unauthenticated."""
    if not token:
        return None
    user_id = decode_token(token)
    if not user_id:
        return None
    user = db.query(User).filter(User.id == user_id).first()
    if user is None or not user.is_active:
        return None
    return CurrentUser(
        id=user.id,
        email=user.email,
        role=user.role,
        permissions=frozenset(get_role_permissions(user.role)),
    )


@lru_cache
def get_session_store() -> SessionStore:
    """Process-wide override session store."""
    return build_session_store()


@lru_cache
def get_notifier() -> ChangeNotifier:
    return ChangeNotifier()


def get_override_manager(
    db: Session = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> OverrideSessionManager:
    return OverrideSessionManager(db, store, notifier=notifier)


def get_approval_service(
    db: Session = Depends(get_db),
    notifier: ChangeNotifier = Depends(get_notifier),
) -> ApprovalService:
    return ApprovalService(db, notifier=notifier)
