"""Error kinds raised at component boundaries and recorded in session state."""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "ValidationError"
    EXTRACTION = "ExtractionError"
    PROVIDER_UNAVAILABLE = "ProviderUnavailable"
    FETCH = "FetchError"
    MODEL_UNAVAILABLE = "ModelUnavailable"
    RESUME_MISSING = "ResumeMissing"
    GENERATION = "GenerationError"


class JobMatchError(Exception):
    """Base class; every subclass names the ErrorKind it reports."""

    kind: ErrorKind

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind.value)
        self.message = message or self.kind.value


class ValidationError(JobMatchError):
    """Upload rejected (type or size) before any extraction work."""

    kind = ErrorKind.VALIDATION


class ExtractionError(JobMatchError):
    """Document is corrupt, unreadable or has no text."""

    kind = ErrorKind.EXTRACTION


class ProviderUnavailable(JobMatchError):
    """Embedding provider not initialized yet."""

    kind = ErrorKind.PROVIDER_UNAVAILABLE


class FetchError(JobMatchError):
    kind = ErrorKind.FETCH


class ModelUnavailable(JobMatchError):
    kind = ErrorKind.MODEL_UNAVAILABLE


class ResumeMissing(JobMatchError):
    kind = ErrorKind.RESUME_MISSING


class GenerationError(JobMatchError):
    kind = ErrorKind.GENERATION
