"""Audit session state transitions.

Sessions are immutable; every function here returns a new
:class:`~yardaudit.models.audit.AuditSession` and leaves its input
untouched.  Callers replace their reference with the result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from yardaudit.models._base import AuditEnum, utcnow
from yardaudit.models.audit import AuditRecord, AuditSession, StatusUpdate, UnitStatus
from yardaudit.models.unit import Unit
from yardaudit.roster import UNITS

_logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


class StatusFilter(AuditEnum):
    ALL = "All"
    PENDING = "Pending"
    DONE = "Done"


@dataclass(frozen=True, slots=True)
class AuditProgress:
    audited: int
    total: int

    @property
    def percent(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.audited / self.total * 100)


def start_session(yard: str, *, now: datetime | None = None) -> AuditSession:
    """Create an empty session for *yard*.  The id is the start time in epoch ms."""
    started = now or utcnow()
    session = AuditSession(
        id=str(int(started.timestamp() * 1000)),
        yard=str(yard),
        start_time=started,
    )
    _logger.debug("Started audit session %s at %s", session.id, session.yard)
    return session


def _write_records(
    session: AuditSession,
    updates: Iterable[StatusUpdate],
    now: datetime,
    notes: str | None = None,
) -> AuditSession:
    records = dict(session.records)
    for update in updates:
        records[update.unit_id] = AuditRecord(
            unit_id=update.unit_id,
            status=update.status,
            timestamp=now,
            notes=notes,
        )
    return session.model_copy(update={"records": records})


def update_record(
    session: AuditSession,
    unit_id: str,
    status: UnitStatus | str,
    *,
    notes: str | None = None,
    now: datetime | None = None,
) -> AuditSession:
    """Overwrite the record of one unit (last write wins)."""
    update = StatusUpdate(unit_id=unit_id, status=UnitStatus(status))
    return _write_records(session, [update], now or utcnow(), notes)


def bulk_update_records(
    session: AuditSession,
    updates: Iterable[StatusUpdate],
    *,
    now: datetime | None = None,
) -> AuditSession:
    """Write every update with one shared timestamp.

    Later entries for the same unit overwrite earlier ones.
    """
    return _write_records(session, updates, now or utcnow())


def apply_present(
    session: AuditSession,
    unit_ids: Iterable[str],
    units: Iterable[Unit] = UNITS,
    *,
    now: datetime | None = None,
) -> tuple[AuditSession, int]:
    """Mark every known unit in *unit_ids* as present.

    Ids not in the roster are dropped.  Repeated ids are applied once,
    so any match marks the unit present regardless of how many vehicles
    reported it.

    Returns
    -------
    tuple[AuditSession, int]
        The updated session and the number of distinct units marked.
    """
    known = {unit.id for unit in units}
    accepted: dict[str, None] = {}
    dropped = 0
    for unit_id in unit_ids:
        if unit_id in known:
            accepted.setdefault(unit_id, None)
        else:
            dropped += 1

    if dropped:
        _logger.debug("Dropped %d id(s) not in the roster", dropped)
    if not accepted:
        return session, 0

    updates = [StatusUpdate(unit_id=unit_id, status=UnitStatus.PRESENT) for unit_id in accepted]
    return bulk_update_records(session, updates, now=now), len(updates)


def complete_session(session: AuditSession) -> AuditSession:
    return session.model_copy(update={"completed": True})


def status_of(session: AuditSession, unit_id: str) -> UnitStatus:
    """Current status of *unit_id*; units without a record are pending."""
    record = session.records.get(unit_id)
    return record.status if record is not None else UnitStatus.PENDING


def _status_matcher(status_filter: StatusFilter) -> Callable[[UnitStatus], bool]:
    if status_filter == StatusFilter.PENDING:
        return lambda status: status == UnitStatus.PENDING
    if status_filter == StatusFilter.DONE:
        return lambda status: status != UnitStatus.PENDING
    return lambda _status: True


def filter_units(
    session: AuditSession,
    units: Iterable[Unit] = UNITS,
    *,
    search: str = "",
    category: str | None = None,
    status_filter: StatusFilter | str = StatusFilter.ALL,
) -> list[Unit]:
    """Roster units matching a search term, category and audit status.

    The search is a case-insensitive substring match on the unit id or
    category.  ``None`` or ``"All"`` as *category* matches every unit.
    """
    term = search.strip().lower()
    matches_status = _status_matcher(StatusFilter(status_filter))
    result: list[Unit] = []
    for unit in units:
        if term and term not in unit.id.lower() and term not in unit.category.lower():
            continue
        if category not in (None, ALL_CATEGORIES) and unit.category != category:
            continue
        if not matches_status(status_of(session, unit.id)):
            continue
        result.append(unit)
    return result


def progress(session: AuditSession, units: Iterable[Unit] = UNITS) -> AuditProgress:
    """How many roster units have a record in *session*.

    Records for ids outside the roster are not counted.
    """
    roster_ids = {unit.id for unit in units}
    audited = sum(1 for unit_id in session.records if unit_id in roster_ids)
    return AuditProgress(audited=audited, total=len(roster_ids))
