"""Session layer: search pagination, chat turns and their composition."""

from .chat_session import ChatSession
from .debounce import Debouncer
from .job_search_session import JobSearchSession
from .search_session import SearchSessionController

__all__ = ["ChatSession", "Debouncer", "JobSearchSession", "SearchSessionController"]
