"""Audit session models."""

from __future__ import annotations

from pydantic import Field

from yardaudit.models._base import AuditBaseModel, AuditEnum, Timestamp, utcnow


class UnitStatus(AuditEnum):
    PENDING = "PENDING"
    PRESENT = "PRESENT"
    MISSING = "MISSING"
    DAMAGED = "DAMAGED"


class AuditRecord(AuditBaseModel):
    """Latest known status of one unit within a session.

    Records are overwritten on every update; no history is kept.
    """

    unit_id: str
    status: UnitStatus
    timestamp: Timestamp = Field(default_factory=utcnow)
    notes: str | None = None


class StatusUpdate(AuditBaseModel):
    """One entry of a bulk update."""

    unit_id: str
    status: UnitStatus


class AuditSession(AuditBaseModel):
    """A single audit run at one yard.

    Parameters
    ----------
    id : str
        Session identifier.
    yard : str
        Yard name being audited.
    start_time : datetime
        When the session was started (UTC).
    records : dict[str, AuditRecord]
        Unit id to latest record.
    completed : bool
        Set once the audit is finished.
    """

    id: str
    yard: str
    start_time: Timestamp = Field(default_factory=utcnow)
    records: dict[str, AuditRecord] = Field(default_factory=dict)
    completed: bool = False

    def record_for(self, unit_id: str) -> AuditRecord | None:
        return self.records.get(unit_id)
