"""yardaudit - Async fleet yard audit toolkit with GPS geofence sync."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("yardaudit")
except PackageNotFoundError:
    __version__ = "0+local"
from yardaudit.ai import AuditAiClient, create_ai_client
from yardaudit.audit import AuditProgress, StatusFilter
from yardaudit.client import YardAuditClient
from yardaudit.config import AuditConfig
from yardaudit.exceptions import (
    AiServiceError,
    AuditBusyError,
    AuditConfigError,
    AuditStateError,
    DocumentProcessingError,
    EmptyReportError,
    LocationSyncError,
    NoActiveSessionError,
    ReportGenerationError,
    TransportError,
    YardAuditError,
)
from yardaudit.geofence import GeofenceResolver, haversine_m, resolve_units_in_yard
from yardaudit.locations import (
    FleetLocationProvider,
    LocationProvider,
    SimulatedLocationProvider,
    build_location_provider,
)
from yardaudit.models import (
    AuditRecord,
    AuditSession,
    StatusUpdate,
    Task,
    TaskPriority,
    Unit,
    UnitStatus,
    VehicleLocation,
    Yard,
    YardName,
)
from yardaudit.workflows import ReportOutcome, WorkflowOutcome

__all__ = [
    "__version__",
    "AiServiceError",
    "AuditAiClient",
    "AuditBusyError",
    "AuditConfig",
    "AuditConfigError",
    "AuditProgress",
    "AuditRecord",
    "AuditSession",
    "AuditStateError",
    "DocumentProcessingError",
    "EmptyReportError",
    "FleetLocationProvider",
    "GeofenceResolver",
    "LocationProvider",
    "LocationSyncError",
    "NoActiveSessionError",
    "ReportGenerationError",
    "ReportOutcome",
    "SimulatedLocationProvider",
    "StatusFilter",
    "StatusUpdate",
    "Task",
    "TaskPriority",
    "TransportError",
    "Unit",
    "UnitStatus",
    "VehicleLocation",
    "WorkflowOutcome",
    "Yard",
    "YardAuditClient",
    "YardAuditError",
    "YardName",
    "build_location_provider",
    "create_ai_client",
    "haversine_m",
    "resolve_units_in_yard",
]
