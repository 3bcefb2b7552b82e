"""Custom exception hierarchy for yardaudit."""

from __future__ import annotations


class YardAuditError(Exception):
    """Base exception for all yardaudit errors."""


class AuditConfigError(YardAuditError):
    """Invalid or missing configuration."""


class TransportError(YardAuditError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class LocationSyncError(YardAuditError):
    """Fetching vehicle locations failed as a whole.

    Raised for transport failures and for response bodies that do not
    have the expected shape.  No partial result is ever returned.
    """


class AiServiceError(YardAuditError):
    """Generative AI call failed or returned unusable output."""


class DocumentProcessingError(AiServiceError):
    """Unit ids could not be extracted from an uploaded document."""


class ReportGenerationError(AiServiceError):
    """The AI report could not be generated."""


class EmptyReportError(ReportGenerationError):
    """The AI call succeeded but returned no report text."""


class AuditStateError(YardAuditError):
    """Operation is not valid in the current audit state."""


class NoActiveSessionError(AuditStateError):
    """No audit session has been started."""


class AuditBusyError(AuditStateError):
    """A sync, document or report call is already in progress."""
