"""Schema exports."""

from .chat import ChatMessage
from .job_posting import JobPosting
from .resume_profile import FeatureVector, ResumeProfile, ResumeUpload
from .session_state import ErrorInfo, SearchPhase, SessionState

__all__ = [
    "ChatMessage",
    "JobPosting",
    "FeatureVector",
    "ResumeProfile",
    "ResumeUpload",
    "ErrorInfo",
    "SearchPhase",
    "SessionState",
]
