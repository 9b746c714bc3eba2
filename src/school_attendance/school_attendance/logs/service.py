from __future__ import annotations

from typing import Any, Optional

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LOG_LIMIT
from .model import LogEntry
from .repository import LogRepository


class AuditLogService:
    """Use case: append and read the audit trail."""

    def __init__(self, logs: LogRepository):
        self._logs = logs

    def append(
        self,
        action: str,
        *,
        user_id: Optional[int] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        before: Any = None,
        after: Any = None,
    ) -> int:
        return self._logs.append(
            action=action,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            before=before,
            after=after,
        )

    def record_client_event(self, *, user_id: Optional[int], action: Any, details: Any) -> int:
        """Free-form entry posted by the UI (e.g. "Dashboard Access")."""
        action = require_non_empty(action, "Action")
        details = require_non_empty(details, "Details")
        return self.append(action, user_id=user_id, after={"details": details})

    def recent(self, limit: int = DEFAULT_LOG_LIMIT) -> list[LogEntry]:
        return list(self._logs.list_recent(max(1, min(int(limit), DEFAULT_LOG_LIMIT))))
