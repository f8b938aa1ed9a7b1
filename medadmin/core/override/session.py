import json
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Any, Dict


@dataclass(frozen=True)
class OverrideSession:
    """A grant letting ``original_admin_id`` act as ``target_user_id`` until ``expires_at``."""

    original_admin_id: str
    target_user_id: str
    target_user_email: str
    reason: str
    started_at: datetime
    expires_at: datetime

    @property
    def duration(self) -> timedelta:
        return self.expires_at - self.started_at

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        data["expires_at"] = self.expires_at.isoformat()
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), sort_keys=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OverrideSession":
        return cls(
            original_admin_id=data["original_admin_id"],
            target_user_id=data["target_user_id"],
            target_user_email=data["target_user_email"],
            reason=data["reason"],
            started_at=datetime.fromisoformat(data["started_at"]),
            expires_at=datetime.fromisoformat(data["expires_at"]),
        )

    @classmethod
    def from_json(cls, raw: str) -> "OverrideSession":
        return cls.from_dict(json.loads(raw))
