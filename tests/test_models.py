"""Tests for pydantic model parsing."""

from __future__ import annotations

import math
from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from yardaudit.models import (
    AuditRecord,
    AuditSession,
    Task,
    TaskPriority,
    UnitStatus,
    VehicleLocation,
    Yard,
    YardName,
    parse_timestamp,
)

_T = datetime(2026, 1, 1, tzinfo=UTC)


class TestParseTimestamp:
    def test_epoch_seconds(self) -> None:
        assert parse_timestamp(1767225600) == _T

    def test_epoch_milliseconds(self) -> None:
        assert parse_timestamp(1767225600000) == _T

    def test_iso_with_z(self) -> None:
        assert parse_timestamp("2026-01-01T00:00:00Z") == _T

    def test_naive_is_utc(self) -> None:
        assert parse_timestamp(datetime(2026, 1, 1)) == _T
        assert parse_timestamp("2026-01-01T00:00:00") == _T

    def test_offset_preserved(self) -> None:
        value = parse_timestamp("2026-01-01T01:00:00+01:00")
        assert value == _T
        assert value is not None and value.utcoffset() == timedelta(hours=1)

    def test_none(self) -> None:
        assert parse_timestamp(None) is None

    def test_unsupported(self) -> None:
        with pytest.raises(ValueError):
            parse_timestamp(["2026"])


class TestEnums:
    def test_status_case_insensitive(self) -> None:
        assert UnitStatus("present") == UnitStatus.PRESENT
        assert UnitStatus(" Damaged ") == UnitStatus.DAMAGED

    def test_unknown_status_rejected(self) -> None:
        with pytest.raises(ValueError):
            UnitStatus("LOST")

    def test_yard_names(self) -> None:
        assert [yard.value for yard in YardName] == ["Davenport", "Movie Ranch"]
        assert YardName("movie ranch") == YardName.MOVIE_RANCH

    def test_task_priority(self) -> None:
        assert TaskPriority("HIGH") == TaskPriority.HIGH


class TestVehicleLocation:
    def test_flat_payload(self) -> None:
        location = VehicleLocation.model_validate(
            {"id": "v1", "name": "GST 01-01", "latitude": 37.0, "longitude": -122.0, "time": _T}
        )
        assert location.position == (37.0, -122.0)

    def test_nested_payload_with_lon_alias(self) -> None:
        location = VehicleLocation.model_validate(
            {"id": "v1", "name": "GST 01-01", "location": {"lat": 37.0, "lon": -122.0, "time": 1767225600}}
        )
        assert location.position == (37.0, -122.0)
        assert location.time == _T

    def test_nan_coordinates_are_accepted(self) -> None:
        location = VehicleLocation(id="v1", name="X", latitude=float("nan"), longitude=-122.0, time=_T)
        assert math.isnan(location.latitude)

    def test_out_of_range_coordinates_are_accepted(self) -> None:
        location = VehicleLocation(id="v1", name="X", latitude=123.0, longitude=-500.0, time=_T)
        assert location.position == (123.0, -500.0)

    def test_missing_coordinate_rejected(self) -> None:
        with pytest.raises(ValidationError):
            VehicleLocation.model_validate({"id": "v1", "name": "X", "location": {"lat": 37.0, "time": _T}})

    def test_frozen(self) -> None:
        location = VehicleLocation(id="v1", name="X", latitude=1.0, longitude=2.0, time=_T)
        with pytest.raises(ValidationError):
            location.latitude = 3.0  # type: ignore[misc]


class TestYard:
    def test_radius_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            Yard(name="Bad", latitude=0.0, longitude=0.0, radius_meters=0)


class TestAuditModels:
    def test_record_defaults_timestamp(self) -> None:
        record = AuditRecord(unit_id="GST 01-01", status="PRESENT")
        assert record.status == UnitStatus.PRESENT
        assert record.timestamp.tzinfo is not None
        assert record.notes is None

    def test_session_defaults(self) -> None:
        session = AuditSession(id="1", yard="Davenport", start_time=1767225600000)
        assert session.start_time == _T
        assert session.records == {}
        assert session.completed is False
        assert session.record_for("GST 01-01") is None

    def test_session_json_dump(self) -> None:
        session = AuditSession(
            id="1",
            yard="Davenport",
            start_time=_T,
            records={"GST 01-01": AuditRecord(unit_id="GST 01-01", status=UnitStatus.MISSING, timestamp=_T)},
        )
        dumped = session.model_dump(mode="json")
        assert dumped["records"]["GST 01-01"]["status"] == "MISSING"
        assert dumped["start_time"].startswith("2026-01-01T00:00:00")

    def test_task_defaults(self) -> None:
        task = Task(id="1", text="Check tires", created_at=datetime(2026, 1, 1, tzinfo=timezone.utc))
        assert task.priority == TaskPriority.NORMAL
        assert task.completed is False
