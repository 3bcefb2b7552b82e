"""Roster unit model."""

from __future__ import annotations

from yardaudit.models._base import AuditBaseModel


class Unit(AuditBaseModel):
    """A unit in the static fleet roster.

    Parameters
    ----------
    id : str
        Unit identifier, e.g. ``"GST 01-01"``.
    category : str
        Equipment category, e.g. ``"5th Wheel"``.
    description : str or None
        Free-text description.
    expected_location : str or None
        Location label from the fleet spreadsheet.
    """

    id: str
    category: str
    description: str | None = None
    expected_location: str | None = None
