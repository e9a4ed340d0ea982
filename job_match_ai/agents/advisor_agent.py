"""Advisor Agent: score a chat message against the resume embedding and generate job-search advice."""

from typing import List, Optional

from job_match_ai.embeddings.embedding_service import EmbeddingService
from job_match_ai.errors import GenerationError, ModelUnavailable, ResumeMissing
from job_match_ai.schemas.chat import ChatMessage
from job_match_ai.schemas.session_state import ErrorInfo
from job_match_ai.services.text_generation import GenerationParams, TextGenerationService
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)

TERMINAL_PUNCTUATION = (".", "!", "?")
TRUNCATION_MARKER = "..."

FALLBACK_ADVICE = (
    "I apologize, but I'm having trouble generating a complete response right now. "
    "Here are some general tips:\n\n"
    "1. Tailor your resume and cover letter to each job application.\n"
    "2. Highlight your relevant skills and experiences.\n"
    "3. Network and use professional platforms like LinkedIn.\n"
    "4. Prepare well for interviews by researching the company.\n"
    "5. Follow up after applications and interviews.\n\n"
    "Is there a specific aspect of your job search you'd like more advice on?"
)

ADVICE_PROMPT_TEMPLATE = (
    "Based on the user's resume and their input: \"{message}\", provide relevant job search advice. "
    "The similarity score between the input and the resume is {similarity:.2f}. "
    "Respond in a helpful and friendly manner."
)


def build_advice_prompt(message: str, similarity: float) -> str:
    return ADVICE_PROMPT_TEMPLATE.format(message=message, similarity=similarity)


def finish_response(text: str) -> str:
    """Trim; generation is length-capped, so mark a cut-off sentence with an ellipsis."""
    processed = (text or "").strip()
    if processed and not processed.endswith(TERMINAL_PUNCTUATION):
        processed += TRUNCATION_MARKER
    return processed


class ConversationalAdvisor:
    """
    Answers one chat message. Precondition failures raise; provider failures
    return FALLBACK_ADVICE and are reported through last_error.
    """

    def __init__(
        self,
        generator: TextGenerationService,
        params: Optional[GenerationParams] = None,
    ) -> None:
        self._generator = generator
        self._params = params or GenerationParams()
        self.last_similarity: Optional[float] = None
        self.last_error: Optional[ErrorInfo] = None

    async def _generate(self, message: str, model: EmbeddingService, resume_embedding: List[float]) -> str:
        message_embedding = await model.embed(message)
        similarity = model.similarity(resume_embedding, message_embedding)
        self.last_similarity = similarity
        logger.info("Chat message similarity to resume: %.3f", similarity)

        text = await self._generator.generate(build_advice_prompt(message, similarity), self._params)
        processed = finish_response(text)
        if not processed:
            raise GenerationError("Text generation returned only whitespace")
        return processed

    async def respond(
        self,
        user_message: str,
        model: Optional[EmbeddingService],
        resume_embedding: Optional[List[float]],
    ) -> ChatMessage:
        if model is None:
            raise ModelUnavailable("The language model is still loading. Please wait a moment and try again.")
        if resume_embedding is None:
            raise ResumeMissing("Please upload your resume before asking for advice.")

        self.last_error = None
        self.last_similarity = None
        try:
            content = await self._generate(user_message, model, resume_embedding)
        except GenerationError as e:
            logger.warning("Generation failed, using fallback advice: %s", e)
            self.last_error = ErrorInfo.from_exception(e)
            content = FALLBACK_ADVICE
        except Exception as e:
            logger.exception("Advice provider failed, using fallback advice: %s", e)
            self.last_error = ErrorInfo.from_exception(GenerationError(f"Failed to generate response: {e}"))
            content = FALLBACK_ADVICE
        return ChatMessage(role="assistant", content=content)
