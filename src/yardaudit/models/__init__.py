"""Data models for yardaudit."""

from yardaudit.models._base import AuditBaseModel, AuditEnum, Timestamp, parse_timestamp, utcnow
from yardaudit.models.audit import AuditRecord, AuditSession, StatusUpdate, UnitStatus
from yardaudit.models.location import VehicleLocation
from yardaudit.models.task import Task, TaskPriority
from yardaudit.models.unit import Unit
from yardaudit.models.yard import Yard, YardName

__all__ = [
    "AuditBaseModel",
    "AuditEnum",
    "AuditRecord",
    "AuditSession",
    "StatusUpdate",
    "Task",
    "TaskPriority",
    "Timestamp",
    "Unit",
    "UnitStatus",
    "VehicleLocation",
    "Yard",
    "YardName",
    "parse_timestamp",
    "utcnow",
]
