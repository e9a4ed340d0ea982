"""Shared fakes for the job index, embedding model and text generator.

The fakes let a test park any call on an ``asyncio.Event`` so the order in
which fetches resolve can be forced, which is what the query/pagination race
tests rely on.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Tuple, Union

import pytest

from job_match_ai.embeddings.embedding_service import EmbeddingService
from job_match_ai.errors import ProviderUnavailable
from job_match_ai.schemas.job_posting import JobPosting
from job_match_ai.services.keyword_store import KeywordStore
from job_match_ai.services.text_generation import GenerationParams, TextGenerationService


def make_postings(prefix: str, count: int, start: int = 0) -> List[JobPosting]:
    return [
        JobPosting(
            id=f"{prefix}{i}",
            title=f"{prefix} job {i}",
            company="Acme",
            location="Remote",
            description="Build things.",
            apply_url=f"https://example.com/{prefix}/{i}",
        )
        for i in range(start, start + count)
    ]


PageResult = Union[List[JobPosting], Exception]


class FakeJobIndex:
    """Job index returning canned pages; unknown (query, page) pairs return an empty page."""

    def __init__(self, pages: Optional[Dict[Tuple[str, int], PageResult]] = None) -> None:
        self.pages: Dict[Tuple[str, int], PageResult] = dict(pages or {})
        self.calls: List[Tuple[str, int]] = []
        self._gates: Dict[Tuple[str, int], asyncio.Event] = {}

    def hold(self, query: str, page: int) -> asyncio.Event:
        """Park the matching search call until the returned event is set."""
        gate = asyncio.Event()
        self._gates[(query, page)] = gate
        return gate

    async def search(self, query, page, results_per_page=10, location=None):
        self.calls.append((query, page))
        gate = self._gates.get((query, page))
        if gate is not None:
            await gate.wait()
        result = self.pages.get((query, page), [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class FakeEmbedding(EmbeddingService):
    def __init__(
        self,
        ready: bool = True,
        vectors: Optional[Dict[str, List[float]]] = None,
        default: Optional[List[float]] = None,
        fail_with: Optional[Exception] = None,
    ) -> None:
        self._ready = ready
        self.vectors = dict(vectors or {})
        self.default = default or [1.0, 0.0, 0.0]
        self.fail_with = fail_with
        self.embedded: List[str] = []

    @property
    def is_ready(self) -> bool:
        return self._ready

    async def load(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self._ready = True

    async def embed(self, text: str) -> List[float]:
        if not self._ready:
            raise ProviderUnavailable("not loaded")
        self.embedded.append(text)
        return self.vectors.get(text, self.default)


class FakeGenerator(TextGenerationService):
    def __init__(self, reply: str = "Focus on backend roles.", fail_with: Optional[Exception] = None) -> None:
        self.reply = reply
        self.fail_with = fail_with
        self.prompts: List[str] = []
        self.params: List[GenerationParams] = []
        self.gate: Optional[asyncio.Event] = None

    async def generate(self, prompt: str, params: GenerationParams) -> str:
        self.prompts.append(prompt)
        self.params.append(params)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with
        return self.reply


@pytest.fixture
def keyword_store(tmp_path) -> KeywordStore:
    return KeywordStore(tmp_path / "store.json")
