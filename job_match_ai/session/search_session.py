"""
Search session controller: query-scoped, paginated job results.

Query changes race with in-flight page fetches. Every fetch captures the
query and a generation number at dispatch; a result that lands after the
query changed is discarded, so only the live query ever writes state.
"""

import asyncio
from typing import Dict, List, Optional

from job_match_ai.config import PAGE_SIZE
from job_match_ai.errors import FetchError
from job_match_ai.schemas.job_posting import JobPosting
from job_match_ai.schemas.session_state import ErrorInfo, SessionState
from job_match_ai.services.job_index import JobIndexClient
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)


class SearchSessionController:
    """
    Owns query, accumulated jobs, page cursor and loading/error state.
    At most one fetch is outstanding for the live query; callers debounce set_query.
    """

    def __init__(
        self,
        client: JobIndexClient,
        page_size: int = PAGE_SIZE,
        location: Optional[str] = None,
    ) -> None:
        self._client = client
        self._page_size = page_size
        self._location = location

        self._query = ""
        self._jobs: Dict[str, JobPosting] = {}  # insertion-ordered, keyed by posting id
        self._page = 1
        self._has_more = True
        self._loading = False
        self._error: Optional[ErrorInfo] = None
        self._fetched = False
        self._generation = 0

    @property
    def state(self) -> SessionState:
        """Read-only snapshot."""
        return SessionState(
            query=self._query,
            accumulated_jobs=tuple(self._jobs.values()),
            current_page=self._page,
            has_more=self._has_more,
            loading=self._loading,
            error=self._error,
            fetched=self._fetched,
        )

    @property
    def query(self) -> str:
        return self._query

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def has_more(self) -> bool:
        return self._has_more

    def _is_live(self, query: str, generation: int) -> bool:
        return query == self._query and generation == self._generation

    async def set_query(self, term: str) -> None:
        """Replace the query, clear results and fetch page 1. A blank term returns to idle."""
        query = (term or "").strip()
        if query and query == self._query and self._loading and not self._fetched:
            logger.debug("Page 1 for '%s' already in flight", query[:50])
            return
        self._generation += 1
        self._query = query
        self._jobs = {}
        self._page = 1
        self._error = None
        self._fetched = False

        if not query:
            self._has_more = False
            self._loading = False
            logger.info("Query cleared; search session idle")
            return

        self._has_more = True
        logger.info("Query changed to '%s'", query[:80])
        await self._fetch(1)

    async def load_more(self) -> None:
        """Fetch the next page for the live query; no-op while loading or after the last page."""
        if self._loading or not self._has_more or not self._query:
            return
        # Page 1 is retried until a page has landed for this query
        await self._fetch(self._page + 1 if self._fetched else 1)

    async def on_near_end_of_list(self) -> None:
        """Visibility trigger from the presentation layer."""
        await self.load_more()

    async def _fetch(self, page: int) -> None:
        query = self._query
        generation = self._generation
        self._loading = True
        self._error = None
        try:
            postings = await self._client.search(query, page, self._page_size, self._location)
        except asyncio.CancelledError:
            if self._is_live(query, generation):
                self._loading = False
            raise
        except Exception as e:
            if not self._is_live(query, generation):
                logger.warning("Ignoring failure of stale fetch for '%s' page %s: %s", query[:50], page, e)
                return
            if isinstance(e, FetchError):
                logger.warning("Fetch failed for '%s' page %s: %s", query[:50], page, e)
                err = e
            else:
                logger.exception("Unexpected error fetching '%s' page %s", query[:50], page)
                err = FetchError(f"Error fetching jobs. Please try again. ({e})")
            # Previously accumulated jobs stay visible alongside the error
            self._error = ErrorInfo.from_exception(err)
            self._loading = False
            return

        if not self._is_live(query, generation):
            logger.warning(
                "Discarding stale page %s for '%s' (live query '%s')",
                page,
                query[:50],
                self._query[:50],
            )
            return
        self._apply_page(page, postings)
        self._loading = False

    def _apply_page(self, page: int, postings: List[JobPosting]) -> None:
        if page == 1:
            self._jobs = {}
        before = len(self._jobs)
        for posting in postings:
            # Upstream pages can overlap; the latest copy of an id wins
            self._jobs[posting.id] = posting
        duplicates = len(postings) - (len(self._jobs) - before)
        if duplicates:
            logger.warning("Page %s repeated %s posting id(s) already shown", page, duplicates)

        self._page = page
        self._has_more = len(postings) >= self._page_size
        self._fetched = True
        logger.info(
            "Loaded page %s for '%s': %s postings, %s total, has_more=%s",
            page,
            self._query[:50],
            len(postings),
            len(self._jobs),
            self._has_more,
        )
