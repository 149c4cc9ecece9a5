"""
Confirmation token management for high-risk operations.

Two-phase flow:
1. Create a preview and a single-use confirmation token
2. Execute by presenting the token before it expires
"""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..config.constants import CONFIRMATION_TOKEN_TTL_SECONDS
from ..errors import ConfirmationExpiredError
from ..observability.logging import StructuredLogger

logger = StructuredLogger("confirmation")

PreviewOperation = Literal["create", "update", "delete", "terminate", "approve", "reject", "archive"]

# 16 bytes from the OS CSPRNG, hex encoded
TOKEN_BYTES = 16


class FieldChange(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_value: Optional[Any] = Field(default=None, alias="from")
    to: Any


class OperationPreview(BaseModel):
    """Preview information shown to the user before confirming."""

    model_config = ConfigDict(frozen=True)

    operation: PreviewOperation
    entity_type: str
    entity_id: Optional[int] = None
    entity_name: Optional[str] = None
    changes: Optional[Dict[str, FieldChange]] = None
    warnings: List[str] = Field(default_factory=list)
    confirmation_token: str
    expires_at: str = Field(..., description="ISO-8601 expiry timestamp")


@dataclass
class PendingOperation:
    """An operation awaiting confirmation."""
    token: str
    operation: str
    payload: Dict[str, Any]
    preview: OperationPreview
    created_at: float
    expires_at: float


class ConfirmationManager:
    """
    Manages pending operations that require user confirmation.

    Tokens are single-use and expire after ``token_ttl`` seconds. Expired
    entries are evicted whenever they are looked up, and swept on every
    new confirmation.
    """

    def __init__(self, token_ttl: float = CONFIRMATION_TOKEN_TTL_SECONDS):
        self.token_ttl = token_ttl
        self._pending: Dict[str, PendingOperation] = {}

    def create_confirmation(
        self,
        operation: str,
        payload: Dict[str, Any],
        preview: Dict[str, Any]
    ) -> str:
        """
        Create a confirmation request for an operation.

        Args:
            operation: Name of the operation (e.g. "terminate_employee")
            payload: The deferred operation payload
            preview: Preview fields without ``confirmation_token``/``expires_at``

        Returns:
            The confirmation token
        """
        self._cleanup()

        token = secrets.token_hex(TOKEN_BYTES)
        now = time.time()
        expires_at = now + self.token_ttl

        self._pending[token] = PendingOperation(
            token=token,
            operation=operation,
            payload=payload,
            preview=OperationPreview(
                **preview,
                confirmation_token=token,
                expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc).isoformat(),
            ),
            created_at=now,
            expires_at=expires_at,
        )
        logger.debug("Confirmation created", operation=operation)
        return token

    def _get_live(self, token: str) -> Optional[PendingOperation]:
        pending = self._pending.get(token)
        if pending is None:
            return None
        if time.time() > pending.expires_at:
            self._pending.pop(token, None)
            logger.debug("Confirmation expired", operation=pending.operation)
            return None
        return pending

    def is_valid(self, token: str) -> bool:
        """Check if a token is valid without consuming it."""
        return self._get_live(token) is not None

    def confirm(self, token: str, operation: Optional[str] = None) -> PendingOperation:
        """
        Confirm and consume a pending operation.

        When ``operation`` is given, a token issued for a different
        operation is rejected and left pending.

        Raises:
            ConfirmationExpiredError: If the token is unknown, expired, already
                used or bound to another operation
        """
        pending = self._get_live(token)
        if pending is None:
            raise ConfirmationExpiredError()
        if operation is not None and pending.operation != operation:
            logger.debug("Confirmation operation mismatch", operation=operation, pending=pending.operation)
            raise ConfirmationExpiredError()

        del self._pending[token]
        logger.debug("Confirmation consumed", operation=pending.operation)
        return pending

    def cancel(self, token: str, operation: Optional[str] = None) -> bool:
        """Drop a pending operation. Tokens bound to another operation are kept."""
        pending = self._pending.get(token)
        if pending is None or (operation is not None and pending.operation != operation):
            return False
        del self._pending[token]
        return True

    def get_preview(self, token: str) -> Optional[OperationPreview]:
        pending = self._get_live(token)
        return pending.preview if pending else None

    def _cleanup(self) -> None:
        now = time.time()
        expired = [t for t, p in self._pending.items() if now > p.expires_at]
        for t in expired:
            self._pending.pop(t, None)

    def clear(self) -> None:
        self._pending.clear()

    def get_pending_count(self) -> int:
        self._cleanup()
        return len(self._pending)

    def request_confirmation(
        self,
        operation: PreviewOperation,
        entity_type: str,
        entity_id: Optional[int] = None,
        entity_name: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None,
        warnings: Optional[List[str]] = None,
        changes: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> Tuple[str, OperationPreview]:
        """
        Create a confirmation and return its token together with the preview.

        The pending operation is recorded as ``{operation}_{entity_type}``.
        """
        token = self.create_confirmation(
            f"{operation}_{entity_type}",
            payload or {},
            {
                "operation": operation,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "entity_name": entity_name,
                "changes": changes,
                "warnings": warnings or [],
            },
        )
        return token, self._pending[token].preview
