"""Agent exports."""

from .advisor_agent import FALLBACK_ADVICE, ConversationalAdvisor

__all__ = ["ConversationalAdvisor", "FALLBACK_ADVICE"]
