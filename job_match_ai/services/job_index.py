"""Job index client: one page of postings per (query, page) from the Adzuna search API."""

import asyncio
import hashlib
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError as SchemaValidationError

from job_match_ai.config import (
    ADZUNA_API_BASE,
    ADZUNA_APP_ID,
    ADZUNA_APP_KEY,
    ADZUNA_COUNTRY,
    HTTP_MAX_RETRIES,
    HTTP_TIMEOUT_SECONDS,
    JOB_SEARCH_LOCATION,
    PAGE_SIZE,
)
from job_match_ai.errors import FetchError
from job_match_ai.schemas.job_posting import JobPosting
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)


class JobIndexClient(ABC):
    """Abstract job index. Failures surface as FetchError."""

    @abstractmethod
    async def search(
        self,
        query: str,
        page: int,
        results_per_page: int = PAGE_SIZE,
        location: Optional[str] = None,
    ) -> List[JobPosting]:
        ...


def _posting_id(hit: dict[str, Any]) -> str:
    raw_id = hit.get("id")
    if raw_id not in (None, ""):
        return str(raw_id)
    company = (hit.get("company") or {}).get("display_name", "")
    loc = (hit.get("location") or {}).get("display_name", "")
    seed = f"{hit.get('title', '')}{company}{loc}{hit.get('redirect_url', '')}"
    return hashlib.sha256(seed.encode()).hexdigest()[:12]


def _parse_hit(hit: dict[str, Any]) -> Optional[JobPosting]:
    """Map Adzuna's nested result onto the flat JobPosting shape."""
    try:
        return JobPosting(
            id=_posting_id(hit),
            title=hit.get("title") or "",
            company=(hit.get("company") or {}).get("display_name") or "",
            location=(hit.get("location") or {}).get("display_name") or "",
            description=hit.get("description") or "",
            apply_url=hit.get("redirect_url") or "",
            salary_min=hit.get("salary_min"),
            salary_max=hit.get("salary_max"),
        )
    except (SchemaValidationError, AttributeError, TypeError) as e:
        logger.warning("Skipping malformed job hit: %s", e)
        return None


class AdzunaJobIndexClient(JobIndexClient):
    """Adzuna /search/{page} endpoint. Retries transient failures, never 4xx."""

    def __init__(
        self,
        app_id: str = ADZUNA_APP_ID,
        app_key: str = ADZUNA_APP_KEY,
        country: str = ADZUNA_COUNTRY,
        default_location: str = JOB_SEARCH_LOCATION,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        max_retries: int = HTTP_MAX_RETRIES,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._app_id = app_id
        self._app_key = app_key
        self._base_url = f"{ADZUNA_API_BASE}/{country}/search"
        self._default_location = default_location
        self._timeout = timeout
        self._max_retries = max(1, max_retries)
        self._transport = transport

    def _params(self, query: str, results_per_page: int, location: Optional[str]) -> dict[str, Any]:
        params: dict[str, Any] = {
            "app_id": self._app_id,
            "app_key": self._app_key,
            "what": query,
            "results_per_page": results_per_page,
            "content-type": "application/json",
        }
        where = location if location is not None else self._default_location
        if where:
            params["where"] = where
        return params

    async def _get_json(self, url: str, params: dict[str, Any]) -> dict[str, Any]:
        last_error: Optional[Exception] = None
        for attempt in range(self._max_retries):
            try:
                async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                    response = await client.get(url, params=params)
                    response.raise_for_status()
                    return response.json()
            except httpx.HTTPStatusError as e:
                last_error = e
                logger.warning("Adzuna HTTP error %s: %s", e.response.status_code, e.response.text[:200])
                if 400 <= e.response.status_code < 500:
                    break  # Don't retry client errors
            except (httpx.TimeoutException, httpx.TransportError) as e:
                last_error = e
                logger.warning("Adzuna request failed (attempt %s): %s", attempt + 1, e)
            except ValueError as e:
                last_error = e
                logger.warning("Adzuna returned a non-JSON body: %s", e)
                break
            if attempt + 1 < self._max_retries:
                await asyncio.sleep(1.0 * (attempt + 1))  # Backoff
        raise FetchError(f"Job search failed: {last_error}") from last_error

    async def search(
        self,
        query: str,
        page: int,
        results_per_page: int = PAGE_SIZE,
        location: Optional[str] = None,
    ) -> List[JobPosting]:
        if not self._app_id or not self._app_key:
            raise FetchError("ADZUNA_APP_ID / ADZUNA_APP_KEY are not set")
        if page < 1:
            raise ValueError("page numbers start at 1")

        url = f"{self._base_url}/{page}"
        data = await self._get_json(url, self._params(query, results_per_page, location))
        if not isinstance(data, dict):
            raise FetchError("Unexpected job search response shape")

        postings: List[JobPosting] = []
        for hit in data.get("results") or []:
            if not isinstance(hit, dict):
                continue
            posting = _parse_hit(hit)
            if posting:
                postings.append(posting)
        logger.info("Adzuna query '%s' page %s returned %s postings", query[:50], page, len(postings))
        return postings
