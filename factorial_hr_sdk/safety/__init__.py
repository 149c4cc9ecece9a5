"""Write-safety layer: risk policies, confirmation tokens and audit log."""

from .audit import AuditAction, AuditEntry, AuditLogger
from .confirmation import (
    ConfirmationManager,
    FieldChange,
    OperationPreview,
    PendingOperation,
)
from .policies import (
    DEFAULT_POLICY,
    OPERATION_POLICIES,
    OperationPolicy,
    OperationRisk,
    get_operation_policy,
    get_warning_message,
    requires_confirmation,
    validate_policies,
)

__all__ = [
    "AuditAction",
    "AuditEntry",
    "AuditLogger",
    "ConfirmationManager",
    "FieldChange",
    "OperationPreview",
    "PendingOperation",
    "DEFAULT_POLICY",
    "OPERATION_POLICIES",
    "OperationPolicy",
    "OperationRisk",
    "get_operation_policy",
    "get_warning_message",
    "requires_confirmation",
    "validate_policies",
]
