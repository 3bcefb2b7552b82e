"""Audit summaries and report text."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from yardaudit.models.audit import AuditSession, UnitStatus
from yardaudit.models.unit import Unit
from yardaudit.roster import UNITS, roster_index

UNKNOWN_CATEGORY = "Unknown"


@dataclass(frozen=True, slots=True)
class MissingUnit:
    unit_id: str
    category: str
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class AuditSummary:
    """Counts and missing-unit list for one session."""

    yard: str
    checked: int
    present: int
    missing: int
    damaged: int
    total_units: int
    missing_units: tuple[MissingUnit, ...] = field(default_factory=tuple)

    @property
    def pending(self) -> int:
        return max(self.total_units - self.checked, 0)


def summarize(session: AuditSession, units: Iterable[Unit] = UNITS) -> AuditSummary:
    """Summarize *session*; missing units not in the roster get category ``Unknown``."""
    index = roster_index(units)
    records = list(session.records.values())

    def _count(status: UnitStatus) -> int:
        return sum(1 for record in records if record.status == status)

    missing_units = tuple(
        MissingUnit(
            unit_id=record.unit_id,
            category=index[record.unit_id].category if record.unit_id in index else UNKNOWN_CATEGORY,
            notes=record.notes,
        )
        for record in records
        if record.status == UnitStatus.MISSING
    )
    return AuditSummary(
        yard=session.yard,
        checked=len(records),
        present=_count(UnitStatus.PRESENT),
        missing=_count(UnitStatus.MISSING),
        damaged=_count(UnitStatus.DAMAGED),
        total_units=len(index),
        missing_units=missing_units,
    )


def _missing_lines(summary: AuditSummary) -> str:
    return "\n".join(f"- {unit.unit_id} ({unit.category})" for unit in summary.missing_units)


def build_report_prompt(summary: AuditSummary, session: AuditSession) -> str:
    """Prompt asking the AI model for an executive summary of the audit."""
    return (
        f"Audit Summary for {summary.yard} Yard.\n"
        f"Date: {session.start_time.date().isoformat()}\n"
        f"Found: {summary.present}\n"
        f"Missing: {summary.missing}\n"
        "\n"
        "Missing Units List:\n"
        f"{_missing_lines(summary)}\n"
        "\n"
        "Write a brief executive summary and action plan. Format as Markdown."
    )


def render_text_report(summary: AuditSummary) -> str:
    """Plain-text report that needs no AI service."""
    lines = [
        f"{summary.yard} yard audit",
        f"Checked: {summary.checked} / {summary.total_units}",
        f"Present: {summary.present}",
        f"Missing: {summary.missing}",
        f"Damaged: {summary.damaged}",
    ]
    if summary.missing_units:
        lines.append("")
        lines.append("Missing units:")
        lines.append(_missing_lines(summary))
    return "\n".join(lines)
