"""High-level async client for running a yard audit."""

from __future__ import annotations

import contextlib
import logging
import random
from collections.abc import AsyncIterator, Iterable, Mapping
from typing import Any

import aiohttp

from yardaudit import workflows
from yardaudit._transport import HttpTransport
from yardaudit.ai import AuditAiClient, create_ai_client
from yardaudit.audit import (
    AuditProgress,
    StatusFilter,
    complete_session,
    filter_units,
    progress,
    start_session,
    update_record,
)
from yardaudit.config import AuditConfig
from yardaudit.exceptions import AuditBusyError, NoActiveSessionError, YardAuditError
from yardaudit.locations import LocationProvider, build_location_provider, is_simulation_token
from yardaudit.models.audit import AuditSession, UnitStatus
from yardaudit.models.unit import Unit
from yardaudit.models.yard import Yard
from yardaudit.report import AuditSummary, render_text_report, summarize
from yardaudit.roster import UNITS, YARD_GEOFENCES
from yardaudit.tasks import TaskList

_logger = logging.getLogger(__name__)

_UNSET: Any = object()


class YardAuditClient:
    """Async client holding one audit session at a time.

    Usage::

        async with YardAuditClient(config) as client:
            client.start_audit("Davenport")
            outcome = await client.sync_locations()
            print(outcome.message)

    Parameters
    ----------
    config : AuditConfig
        Client configuration.
    session : aiohttp.ClientSession or None
        HTTP session to reuse.  When omitted one is created on enter and
        closed on exit.
    units : iterable of Unit
        Unit roster.  Defaults to the built-in roster.
    yards : mapping of str to Yard
        Yard geofence table.  Defaults to the built-in yards.
    rng : random.Random or None
        Random source for the location simulator.  Defaults to one
        seeded with ``config.simulation_seed``.
    ai_client : AuditAiClient or None
        AI client.  When omitted it is built from *config*; pass ``None``
        explicitly to disable AI features.
    """

    def __init__(
        self,
        config: AuditConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        units: Iterable[Unit] = UNITS,
        yards: Mapping[str, Yard] = YARD_GEOFENCES,
        rng: random.Random | None = None,
        ai_client: AuditAiClient | None = _UNSET,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: HttpTransport | None = None
        self._units = tuple(units)
        self._unit_ids = frozenset(unit.id for unit in self._units)
        self._yards = yards
        self._rng = rng if rng is not None else random.Random(config.simulation_seed)
        self._ai_client = create_ai_client(config) if ai_client is _UNSET else ai_client
        self._audit: AuditSession | None = None
        self._busy = False
        self.tasks = TaskList.with_defaults()

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> YardAuditClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config.location_base_url, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def units(self) -> tuple[Unit, ...]:
        return self._units

    @property
    def audit(self) -> AuditSession | None:
        """The current audit session, if any."""
        return self._audit

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def ai_available(self) -> bool:
        return self._ai_client is not None

    def _require_transport(self) -> HttpTransport:
        if self._transport is None:
            raise YardAuditError("Client not initialized. Use 'async with YardAuditClient(...) as client:'")
        return self._transport

    def _require_audit(self) -> AuditSession:
        if self._audit is None:
            raise NoActiveSessionError("No audit in progress. Call start_audit() first.")
        return self._audit

    def _store_outcome(self, before: AuditSession, outcome: workflows.WorkflowOutcome) -> None:
        """Merge a workflow result into the current session.

        Records changed while the call was suspended are kept; a session
        that was reset or replaced in the meantime discards the result.
        """
        current = self._audit
        if current is before:
            self._audit = outcome.session
            return
        if current is None or current.id != before.id:
            _logger.debug("Audit session replaced during the call, dropping %d update(s)", outcome.applied)
            return
        changed = {
            unit_id: record
            for unit_id, record in outcome.session.records.items()
            if before.records.get(unit_id) is not record
        }
        self._audit = current.model_copy(update={"records": {**current.records, **changed}})

    @contextlib.asynccontextmanager
    async def _busy_guard(self) -> AsyncIterator[None]:
        if self._busy:
            raise AuditBusyError("Another sync, upload or report is still running")
        self._busy = True
        try:
            yield
        finally:
            self._busy = False

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start_audit(self, yard: str) -> AuditSession:
        """Replace any current session with a fresh one for *yard*.

        Raises
        ------
        YardAuditError
            If *yard* is not in the yard table.
        """
        if yard not in self._yards:
            raise YardAuditError(f"Unknown yard {yard!r}; expected one of {sorted(self._yards)}")
        self._audit = start_session(yard)
        return self._audit

    def update_record(self, unit_id: str, status: UnitStatus | str, *, notes: str | None = None) -> AuditSession:
        """Set the status of one roster unit.

        Raises
        ------
        YardAuditError
            If *unit_id* is not in the roster.
        """
        audit = self._require_audit()
        if unit_id not in self._unit_ids:
            raise YardAuditError(f"Unknown unit {unit_id!r}")
        self._audit = update_record(audit, unit_id, status, notes=notes)
        return self._audit

    def complete_audit(self) -> AuditSession:
        self._audit = complete_session(self._require_audit())
        return self._audit

    def reset(self) -> None:
        self._audit = None

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def filter_units(
        self,
        *,
        search: str = "",
        category: str | None = None,
        status_filter: StatusFilter | str = StatusFilter.ALL,
    ) -> list[Unit]:
        return filter_units(
            self._require_audit(),
            self._units,
            search=search,
            category=category,
            status_filter=status_filter,
        )

    def progress(self) -> AuditProgress:
        return progress(self._require_audit(), self._units)

    def summary(self) -> AuditSummary:
        return summarize(self._require_audit(), self._units)

    def text_report(self) -> str:
        return render_text_report(self.summary())

    # ------------------------------------------------------------------
    # External calls
    # ------------------------------------------------------------------

    def location_provider(self, token: str | None = None) -> LocationProvider:
        """Provider for *token*, falling back to ``config.location_token``."""
        effective = token if token is not None else self._config.location_token
        transport = None if is_simulation_token(effective) else self._require_transport()
        return build_location_provider(
            effective,
            transport=transport,
            units=self._units,
            yards=self._yards,
            rng=self._rng,
            delay=self._config.simulation_delay,
        )

    async def sync_locations(self, token: str | None = None) -> workflows.WorkflowOutcome:
        """Mark units whose vehicles are inside the yard geofence as present."""
        audit = self._require_audit()
        provider = self.location_provider(token)
        async with self._busy_guard():
            outcome = await workflows.sync_locations(audit, provider, self._units, yards=self._yards)
        self._store_outcome(audit, outcome)
        return outcome

    async def autofill_from_document(self, data: bytes, mime_type: str) -> workflows.WorkflowOutcome:
        """Mark units an uploaded document lists at this yard as present."""
        audit = self._require_audit()
        async with self._busy_guard():
            outcome = await workflows.autofill_from_document(audit, self._ai_client, data, mime_type, self._units)
        self._store_outcome(audit, outcome)
        return outcome

    async def generate_report(self) -> workflows.ReportOutcome:
        audit = self._require_audit()
        async with self._busy_guard():
            return await workflows.generate_report(audit, self._ai_client, self._units)
