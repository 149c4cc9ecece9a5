"""Unit tests for the audit log."""

import logging

import pytest
from unittest.mock import AsyncMock

from factorial_hr_sdk.errors import ServerError
from factorial_hr_sdk.safety.audit import AuditAction, AuditEntry, AuditLogger


def make_entry(**overrides) -> AuditEntry:
    fields = dict(
        timestamp="2026-01-01T00:00:00+00:00",
        action=AuditAction.CREATE,
        entity_type="employees",
        success=True,
        duration_ms=5,
    )
    fields.update(overrides)
    return AuditEntry(**fields)


class TestAuditLogger:
    """Test the bounded in-memory log."""

    def test_log_and_recent(self):
        audit = AuditLogger()
        audit.log(make_entry(entity_id=1))
        audit.log(make_entry(entity_id=2))

        recent = audit.get_recent_logs()
        assert [e.entity_id for e in recent] == [1, 2]
        assert [e.entity_id for e in audit.get_recent_logs(limit=1)] == [2]
        assert audit.get_recent_logs(limit=0) == []

    def test_bounded(self):
        audit = AuditLogger(max_entries=3)
        for i in range(5):
            audit.log(make_entry(entity_id=i))

        assert [e.entity_id for e in audit.get_recent_logs()] == [2, 3, 4]

    def test_filters(self):
        audit = AuditLogger()
        audit.log(make_entry(entity_type="employees", entity_id=1))
        audit.log(make_entry(entity_type="teams", entity_id=1))
        audit.log(make_entry(entity_type="teams", entity_id=2))

        assert len(audit.get_logs_by_entity_type("teams")) == 2
        assert len(audit.get_logs_by_entity("teams", 1)) == 1
        assert audit.get_logs_by_entity("locations", 1) == []

    def test_clear(self):
        audit = AuditLogger()
        audit.log(make_entry())
        audit.clear()
        assert audit.get_recent_logs() == []

    def test_entries_are_logged(self, caplog):
        audit = AuditLogger()
        with caplog.at_level(logging.DEBUG, logger="factorial_hr_sdk"):
            audit.log(make_entry(action=AuditAction.DELETE, entity_type="teams", entity_id=9, success=False))

        assert "[AUDIT] FAILED DELETE teams #9" in caplog.text


class TestAuditedOperation:
    """Test the audit wrapper around write operations."""

    @pytest.mark.asyncio
    async def test_records_success(self):
        audit = AuditLogger()
        operation = AsyncMock(return_value={"id": 1})

        result = await audit.audited_operation(
            AuditAction.CREATE,
            "teams",
            None,
            operation,
            changes={"name": {"to": "Ops"}},
            idempotency_key="k-1",
        )

        assert result == {"id": 1}
        entry = audit.get_recent_logs()[0]
        assert entry.success is True
        assert entry.error is None
        assert entry.action == AuditAction.CREATE
        assert entry.changes == {"name": {"to": "Ops"}}
        assert entry.idempotency_key == "k-1"
        assert entry.duration_ms >= 0

    @pytest.mark.asyncio
    async def test_records_failure_and_reraises(self):
        audit = AuditLogger()
        operation = AsyncMock(side_effect=ServerError(500, "/teams/teams"))

        with pytest.raises(ServerError):
            await audit.audited_operation(AuditAction.DELETE, "teams", 5, operation)

        entry = audit.get_recent_logs()[0]
        assert entry.success is False
        assert entry.entity_id == 5
        assert entry.error == "Server error (500). Please try again later."
