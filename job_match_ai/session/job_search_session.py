"""Caller-owned session: resume analysis feeding job search and chat advice."""

from typing import Optional

from job_match_ai.agents.advisor_agent import ConversationalAdvisor
from job_match_ai.config import SEARCH_DEBOUNCE_SECONDS
from job_match_ai.cv_pipeline.feature_pipeline import FeatureExtractionPipeline
from job_match_ai.embeddings.embedding_service import EmbeddingService
from job_match_ai.errors import ExtractionError, JobMatchError, ProviderUnavailable
from job_match_ai.schemas.chat import ChatMessage
from job_match_ai.schemas.resume_profile import ResumeProfile, ResumeUpload
from job_match_ai.schemas.session_state import ErrorInfo
from job_match_ai.services.job_index import JobIndexClient
from job_match_ai.services.keyword_store import KeywordStore
from job_match_ai.services.text_generation import TextGenerationService
from job_match_ai.session.chat_session import ChatSession
from job_match_ai.session.debounce import Debouncer
from job_match_ai.session.search_session import SearchSessionController
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)

RESUME_ERROR_MESSAGE = "Sorry, I encountered an error processing your resume. Please try again."


def resume_analyzed_message(profile: ResumeProfile) -> str:
    return (
        "Resume analyzed. I've updated the job listings based on your skills and experience. "
        f"Here are some keywords I found: {', '.join(profile.keywords)}. "
        "Let me know if you have any questions about the job listings or your job search!"
    )


class JobSearchSession:
    """
    One instance per active user session. Owns the resume profile and composes
    the search controller, chat transcript and persisted keyword slot.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        job_index: JobIndexClient,
        generator: TextGenerationService,
        keyword_store: Optional[KeywordStore] = None,
        pipeline: Optional[FeatureExtractionPipeline] = None,
        debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self._embedding = embedding_service
        self._store = keyword_store or KeywordStore()
        self.pipeline = pipeline or FeatureExtractionPipeline(embedding_service, self._store)
        self.search = SearchSessionController(job_index)
        self.chat = ChatSession(ConversationalAdvisor(generator))
        self._debounced_query = Debouncer(self.search.set_query, debounce_seconds)

        self.profile: Optional[ResumeProfile] = None
        self.is_analyzing = False
        self.analysis_error: Optional[ErrorInfo] = None
        self.model_error: Optional[ErrorInfo] = None
        self._started = False

    @property
    def model_handle(self) -> Optional[EmbeddingService]:
        """Loaded embedding model, or None while it is still loading."""
        return self._embedding if self._embedding.is_ready else None

    async def start(self) -> None:
        """Seed the query from persisted keywords (read once per session)."""
        if self._started:
            return
        self._started = True
        keywords = self._store.load()
        if keywords:
            logger.info("Seeding search from %s persisted keywords", len(keywords))
            await self.search.set_query(" ".join(keywords))

    async def load_model(self) -> bool:
        """Initialize the embedding provider once; failure is recorded, not raised."""
        try:
            await self._embedding.load()
        except Exception as e:
            logger.exception("Embedding model failed to load: %s", e)
            self.model_error = ErrorInfo.from_exception(
                ProviderUnavailable(f"Failed to load the embedding model: {e}")
            )
            return False
        self.model_error = None
        return True

    async def upload_resume(self, upload: ResumeUpload) -> Optional[ResumeProfile]:
        """
        Analyze an upload and point search and chat at it.
        ValidationError is raised to the caller before any state changes; other
        failures land in analysis_error and return None.
        """
        if self.is_analyzing:
            logger.warning("Resume upload ignored: analysis already in progress")
            return None
        self.pipeline.validate(upload)

        self.is_analyzing = True
        self.analysis_error = None
        try:
            profile = await self.pipeline.analyze(upload)
        except ProviderUnavailable as e:
            logger.warning("Resume analysis deferred: %s", e)
            self.analysis_error = ErrorInfo.from_exception(e)
            return None
        except JobMatchError as e:
            logger.warning("Resume analysis failed: %s", e)
            self.analysis_error = ErrorInfo.from_exception(e)
            self.chat.post_assistant(RESUME_ERROR_MESSAGE)
            return None
        except Exception as e:
            logger.exception("Unexpected error analyzing resume: %s", e)
            self.analysis_error = ErrorInfo.from_exception(
                ExtractionError(f"Failed to process resume: {e}")
            )
            self.chat.post_assistant(RESUME_ERROR_MESSAGE)
            return None
        finally:
            self.is_analyzing = False

        self.profile = profile
        self.chat.post_assistant(resume_analyzed_message(profile))
        await self.search.set_query(profile.query)
        return profile

    def search_input(self, term: str) -> None:
        """Typed search box input; coalesced before reaching set_query."""
        self._debounced_query(term)

    async def flush_search_input(self) -> None:
        await self._debounced_query.flush()

    async def ask(self, text: str) -> Optional[ChatMessage]:
        embedding = self.profile.embedding if self.profile else None
        return await self.chat.submit(text, self.model_handle, embedding)
