"""
Audit logging for write operations.

Keeps a bounded in-memory log of recent writes and mirrors each entry to
the ``factorial_hr_sdk.audit`` logger.
"""

import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional, TypeVar

from ..observability.logging import StructuredLogger

T = TypeVar('T')

logger = StructuredLogger("audit")


class AuditAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    TERMINATE = "TERMINATE"
    ARCHIVE = "ARCHIVE"
    UNARCHIVE = "UNARCHIVE"
    ASSIGN = "ASSIGN"
    UNASSIGN = "UNASSIGN"
    CANCEL = "CANCEL"


@dataclass
class AuditEntry:
    timestamp: str
    action: AuditAction
    entity_type: str
    success: bool
    duration_ms: int
    entity_id: Optional[int] = None
    changes: Optional[Dict[str, Dict[str, Any]]] = None
    error: Optional[str] = None
    idempotency_key: Optional[str] = None


class AuditLogger:
    """In-memory log of the most recent write operations."""

    def __init__(self, max_entries: int = 1000):
        self.max_entries = max_entries
        self._logs: Deque[AuditEntry] = deque(maxlen=max_entries)

    def log(self, entry: AuditEntry) -> None:
        self._logs.append(entry)

        status = "SUCCESS" if entry.success else "FAILED"
        entity_ref = f" #{entry.entity_id}" if entry.entity_id is not None else ""
        logger.debug(
            f"[AUDIT] {status} {entry.action.value} {entry.entity_type}{entity_ref} ({entry.duration_ms}ms)",
            error=entry.error,
            idempotency_key=entry.idempotency_key
        )

    def get_recent_logs(self, limit: int = 100) -> List[AuditEntry]:
        if limit <= 0:
            return []
        return list(self._logs)[-limit:]

    def get_logs_by_entity_type(self, entity_type: str) -> List[AuditEntry]:
        return [log for log in self._logs if log.entity_type == entity_type]

    def get_logs_by_entity(self, entity_type: str, entity_id: int) -> List[AuditEntry]:
        return [
            log for log in self._logs
            if log.entity_type == entity_type and log.entity_id == entity_id
        ]

    def clear(self) -> None:
        self._logs.clear()

    async def audited_operation(
        self,
        action: AuditAction,
        entity_type: str,
        entity_id: Optional[int],
        operation: Callable[[], Awaitable[T]],
        changes: Optional[Dict[str, Dict[str, Any]]] = None,
        idempotency_key: Optional[str] = None
    ) -> T:
        """
        Run a write operation and record its outcome.

        The operation's exception, if any, is logged and re-raised.
        """
        start = time.time()

        def record(success: bool, error: Optional[str] = None) -> None:
            self.log(AuditEntry(
                timestamp=datetime.now(timezone.utc).isoformat(),
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                changes=changes,
                success=success,
                error=error,
                duration_ms=int((time.time() - start) * 1000),
                idempotency_key=idempotency_key,
            ))

        try:
            result = await operation()
        except Exception as e:
            record(False, str(e) or type(e).__name__)
            raise

        record(True)
        return result
