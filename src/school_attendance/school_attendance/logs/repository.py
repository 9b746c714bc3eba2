from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import LogEntry


class LogRepository(Protocol):
    """Append-only store for audit entries."""

    def append(
        self,
        *,
        action: str,
        user_id: Optional[int] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[int] = None,
        before: Any = None,
        after: Any = None,
    ) -> int:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[LogEntry]:
        raise NotImplementedError

    def list_by_user(self, user_id: int, *, action_prefix: Optional[str] = None) -> Sequence[LogEntry]:
        raise NotImplementedError
