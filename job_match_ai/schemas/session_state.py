"""Read-only snapshots of search session state."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from job_match_ai.errors import ErrorKind, JobMatchError
from job_match_ai.schemas.job_posting import JobPosting


class ErrorInfo(BaseModel):
    """Error recorded in a state field instead of being raised further."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str = ""

    @classmethod
    def from_exception(cls, exc: JobMatchError) -> "ErrorInfo":
        return cls(kind=exc.kind, message=exc.message)


class SearchPhase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    TERMINAL = "terminal"
    ERRORED = "errored"


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = ""
    accumulated_jobs: Tuple[JobPosting, ...] = ()
    current_page: int = Field(default=1, ge=1)
    has_more: bool = True
    loading: bool = False
    error: Optional[ErrorInfo] = None
    fetched: bool = Field(default=False, description="True once a page for the current query landed")

    @property
    def phase(self) -> SearchPhase:
        if self.loading:
            return SearchPhase.LOADING
        if self.error is not None:
            return SearchPhase.ERRORED
        if not self.fetched:
            return SearchPhase.IDLE
        return SearchPhase.LOADED if self.has_more else SearchPhase.TERMINAL
