"""Resume analysis pipeline: validate -> extract text -> keywords + embedding -> ResumeProfile."""

from typing import Awaitable, Callable, Optional

from job_match_ai.config import ALLOWED_CONTENT_TYPES, MAX_KEYWORDS, MAX_UPLOAD_BYTES
from job_match_ai.cv_pipeline.keyword_extractor import extract_keywords
from job_match_ai.cv_pipeline.text_extractor import extract_text_async
from job_match_ai.embeddings.embedding_service import EmbeddingService
from job_match_ai.errors import ProviderUnavailable, ValidationError
from job_match_ai.schemas.resume_profile import ResumeProfile, ResumeUpload
from job_match_ai.services.keyword_store import KeywordStore
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)

TextExtractor = Callable[[ResumeUpload], Awaitable[str]]


class FeatureExtractionPipeline:
    """
    Turns an uploaded resume into a ResumeProfile.
    Extraction is not retried; an unready embedding provider fails fast with ProviderUnavailable.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        keyword_store: Optional[KeywordStore] = None,
        text_extractor: TextExtractor = extract_text_async,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
        allowed_content_types: frozenset = ALLOWED_CONTENT_TYPES,
        max_keywords: int = MAX_KEYWORDS,
    ) -> None:
        self._embedding = embedding_service
        self._store = keyword_store
        self._extract = text_extractor
        self._max_bytes = max_upload_bytes
        self._allowed = allowed_content_types
        self._max_keywords = max_keywords

    def validate(self, upload: ResumeUpload) -> None:
        """Reject unsupported types and oversized files. Synchronous, no I/O."""
        if upload.content_type not in self._allowed:
            raise ValidationError(
                f"Unsupported file type {upload.content_type!r}; please upload a .txt or .pdf file"
            )
        if upload.size > self._max_bytes:
            raise ValidationError(
                f"File is {upload.size} bytes; the limit is {self._max_bytes} bytes"
            )

    async def analyze(self, upload: ResumeUpload) -> ResumeProfile:
        self.validate(upload)

        text = await self._extract(upload)
        keywords = extract_keywords(text, self._max_keywords)

        if not self._embedding.is_ready:
            raise ProviderUnavailable("Embedding model is still loading; try again once it is ready")
        embedding = await self._embedding.embed(text)

        profile = ResumeProfile(raw_text=text, keywords=tuple(keywords), embedding=embedding)
        if self._store is not None:
            try:
                self._store.save(profile.keywords)
            except OSError as e:
                logger.warning("Could not persist resume keywords: %s", e)
        logger.info(
            "Analyzed resume %s: chars=%s keywords=%s dim=%s",
            upload.filename or "<upload>",
            len(text),
            len(keywords),
            len(embedding),
        )
        return profile
