"""Service exports."""

from .job_index import AdzunaJobIndexClient, JobIndexClient
from .keyword_store import KeywordStore
from .text_generation import (
    GenerationParams,
    TextGenerationService,
    get_text_generation_service,
)

__all__ = [
    "AdzunaJobIndexClient",
    "JobIndexClient",
    "KeywordStore",
    "GenerationParams",
    "TextGenerationService",
    "get_text_generation_service",
]
