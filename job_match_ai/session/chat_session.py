"""Chat transcript controller: one turn at a time, append-only messages."""

from typing import List, Optional, Tuple

from job_match_ai.agents.advisor_agent import ConversationalAdvisor
from job_match_ai.embeddings.embedding_service import EmbeddingService
from job_match_ai.errors import ModelUnavailable, ResumeMissing
from job_match_ai.schemas.chat import ChatMessage
from job_match_ai.schemas.session_state import ErrorInfo
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)


class ChatSession:
    def __init__(self, advisor: ConversationalAdvisor) -> None:
        self._advisor = advisor
        self._messages: List[ChatMessage] = []
        self.is_loading = False
        self.error: Optional[ErrorInfo] = None

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def last_similarity(self) -> Optional[float]:
        return self._advisor.last_similarity

    def post_assistant(self, content: str) -> ChatMessage:
        """Append a status message on behalf of the owning session."""
        message = ChatMessage(role="assistant", content=content)
        self._messages.append(message)
        return message

    async def submit(
        self,
        text: str,
        model: Optional[EmbeddingService],
        resume_embedding: Optional[List[float]],
    ) -> Optional[ChatMessage]:
        """
        Run one chat turn. Returns the assistant message, or None when the input is blank,
        a turn is already in flight, or a precondition (model, resume) is not met.
        """
        user_message = (text or "").strip()
        if not user_message:
            return None
        if self.is_loading:
            logger.warning("Chat submit ignored: previous turn still in flight")
            return None

        self._messages.append(ChatMessage(role="user", content=user_message))
        self.is_loading = True
        self.error = None
        try:
            reply = await self._advisor.respond(user_message, model, resume_embedding)
        except (ModelUnavailable, ResumeMissing) as e:
            logger.info("Chat precondition not met: %s", e)
            self.error = ErrorInfo.from_exception(e)
            return None
        finally:
            self.is_loading = False

        self._messages.append(reply)
        self.error = self._advisor.last_error
        return reply
