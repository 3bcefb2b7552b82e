"""User-facing audit workflows.

Each workflow turns the failures of an external call into a message
and leaves the audit session exactly as it was.  Nothing here raises
for a failed sync, extraction or report.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from yardaudit.ai import AuditAiClient
from yardaudit.audit import apply_present
from yardaudit.exceptions import AiServiceError, EmptyReportError, LocationSyncError
from yardaudit.geofence import resolve_units_in_yard
from yardaudit.locations import LocationProvider
from yardaudit.models.audit import AuditSession
from yardaudit.models.location import VehicleLocation
from yardaudit.models.unit import Unit
from yardaudit.models.yard import Yard
from yardaudit.report import build_report_prompt, summarize
from yardaudit.roster import UNITS, YARD_GEOFENCES

_logger = logging.getLogger(__name__)

SYNC_FAILED_MESSAGE = "Failed to sync. Check your API token and internet connection."
DOCUMENT_FAILED_MESSAGE = "Failed to process file."
AI_UNAVAILABLE_MESSAGE = "API key is missing. Please configure your environment variables."
REPORT_FAILED_MESSAGE = "Error generating AI report."
REPORT_EMPTY_MESSAGE = "Unable to generate report."


@dataclass(frozen=True, slots=True)
class WorkflowOutcome:
    """Result of a workflow that may update the session.

    ``ok`` is ``False`` only when the external call failed; zero
    applied updates after a successful call is still ``ok``.
    ``vehicles`` holds the locations a sync resolved against.
    """

    session: AuditSession
    applied: int
    message: str
    ok: bool = True
    vehicles: tuple[VehicleLocation, ...] = ()


@dataclass(frozen=True, slots=True)
class ReportOutcome:
    text: str
    ok: bool = True


async def sync_locations(
    session: AuditSession,
    provider: LocationProvider,
    units: Iterable[Unit] = UNITS,
    *,
    yards: Mapping[str, Yard] = YARD_GEOFENCES,
) -> WorkflowOutcome:
    """Mark every unit whose vehicle is inside the session's yard as present."""
    try:
        vehicles = await provider.fetch_locations()
    except LocationSyncError:
        _logger.warning("Location sync failed", exc_info=True)
        return WorkflowOutcome(session=session, applied=0, message=SYNC_FAILED_MESSAGE, ok=False)

    found = resolve_units_in_yard(vehicles, session.yard, yards=yards)
    updated, applied = apply_present(session, found, units)
    if applied == 0:
        message = "Synced vehicle locations, but no matching units were found in this geofence."
    else:
        message = f"Successfully synced {applied} units from GPS data."
    _logger.debug("Location sync: %d vehicle(s), %d in yard, %d applied", len(vehicles), len(found), applied)
    return WorkflowOutcome(session=updated, applied=applied, message=message, vehicles=tuple(vehicles))


async def autofill_from_document(
    session: AuditSession,
    ai_client: AuditAiClient | None,
    data: bytes,
    mime_type: str,
    units: Iterable[Unit] = UNITS,
) -> WorkflowOutcome:
    """Mark the units an uploaded document lists at the session's yard as present."""
    if ai_client is None:
        return WorkflowOutcome(session=session, applied=0, message=AI_UNAVAILABLE_MESSAGE, ok=False)

    try:
        found = await ai_client.extract_present_unit_ids(data, mime_type, session.yard)
    except AiServiceError:
        _logger.warning("Document extraction failed", exc_info=True)
        return WorkflowOutcome(session=session, applied=0, message=DOCUMENT_FAILED_MESSAGE, ok=False)

    updated, applied = apply_present(session, found, units)
    if applied == 0:
        message = "No matching units found for this yard in the document."
    else:
        message = f"Auto-filled {applied} units as PRESENT based on the uploaded file."
    return WorkflowOutcome(session=updated, applied=applied, message=message)


async def generate_report(
    session: AuditSession,
    ai_client: AuditAiClient | None,
    units: Iterable[Unit] = UNITS,
) -> ReportOutcome:
    """AI-written executive summary of *session*."""
    if ai_client is None:
        return ReportOutcome(text=AI_UNAVAILABLE_MESSAGE, ok=False)

    prompt = build_report_prompt(summarize(session, units), session)
    try:
        text = await ai_client.generate_report(prompt)
    except EmptyReportError:
        _logger.warning("Model returned an empty report")
        return ReportOutcome(text=REPORT_EMPTY_MESSAGE, ok=False)
    except AiServiceError:
        _logger.warning("Report generation failed", exc_info=True)
        return ReportOutcome(text=REPORT_FAILED_MESSAGE, ok=False)
    return ReportOutcome(text=text)
