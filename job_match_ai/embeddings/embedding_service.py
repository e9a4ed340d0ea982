"""Embedding service: load once, embed text, score similarity via SentenceTransformers or OpenAI."""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from job_match_ai.config import (
    EMBEDDING_PROVIDER,
    OPENAI_API_KEY,
    OPENAI_EMBEDDING_MODEL,
    SENTENCE_TRANSFORMERS_MODEL,
)
from job_match_ai.errors import ProviderUnavailable
from job_match_ai.utils.logger import get_logger

logger = get_logger(__name__)


def inner_product(a: List[float], b: List[float]) -> float:
    """Similarity between two feature vectors of the same embedding space."""
    va = np.asarray(a, dtype=np.float32)
    vb = np.asarray(b, dtype=np.float32)
    if va.shape != vb.shape:
        raise ValueError(f"Embedding dimensions differ: {va.shape} vs {vb.shape}")
    return float(np.dot(va, vb))


class EmbeddingService(ABC):
    """
    Abstract embedding provider.
    load() is awaited once per session; afterwards the service is shared read-only.
    """

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """True once load() has completed."""
        ...

    @abstractmethod
    async def load(self) -> None:
        """Initialize the underlying model or client."""
        ...

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Embed a single text. Raises ProviderUnavailable before load()."""
        ...

    def similarity(self, a: List[float], b: List[float]) -> float:
        return inner_product(a, b)

    def _require_ready(self) -> None:
        if not self.is_ready:
            raise ProviderUnavailable("Embedding model is not loaded yet")


class SentenceTransformersEmbeddingService(EmbeddingService):
    """Local embeddings via SentenceTransformers (e.g. all-MiniLM-L6-v2)."""

    def __init__(self, model_name: str = SENTENCE_TRANSFORMERS_MODEL) -> None:
        self._model_name = model_name
        self._model = None
        self._lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._model is not None

    async def load(self) -> None:
        async with self._lock:
            if self._model is not None:
                return
            from sentence_transformers import SentenceTransformer

            self._model = await asyncio.to_thread(SentenceTransformer, self._model_name)
            logger.info("Loaded SentenceTransformer model: %s", self._model_name)

    @property
    def dimension(self) -> int:
        self._require_ready()
        return self._model.get_sentence_embedding_dimension()

    def _encode(self, text: str) -> List[float]:
        t = (text or "").strip() or " "
        # Unit-length vectors so the inner product is a cosine score
        vec = self._model.encode(t, convert_to_numpy=True, normalize_embeddings=True)
        return vec.tolist()

    async def embed(self, text: str) -> List[float]:
        self._require_ready()
        return await asyncio.to_thread(self._encode, text)


class OpenAIEmbeddingService(EmbeddingService):
    """OpenAI embeddings API (e.g. text-embedding-3-small)."""

    def __init__(
        self,
        api_key: str = OPENAI_API_KEY,
        model: str = OPENAI_EMBEDDING_MODEL,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    def _get_client(self):
        from openai import AsyncOpenAI
        return AsyncOpenAI(api_key=self._api_key)

    async def load(self) -> None:
        if not self._api_key:
            raise ProviderUnavailable("OPENAI_API_KEY is not set")
        self._ready = True
        logger.info("OpenAI embedding provider ready: %s", self._model)

    async def embed(self, text: str) -> List[float]:
        self._require_ready()
        t = (text or "").strip() or " "
        async with self._get_client() as client:
            resp = await client.embeddings.create(model=self._model, input=[t])
        return resp.data[0].embedding


def get_embedding_service(provider: Optional[str] = None) -> EmbeddingService:
    """
    Return the configured embedding service (dependency injection).
    provider: override config; None uses EMBEDDING_PROVIDER.
    """
    p = (provider or EMBEDDING_PROVIDER).strip().lower()
    if p == "openai":
        if not OPENAI_API_KEY:
            logger.warning("OPENAI_API_KEY not set; falling back to sentence_transformers")
            return SentenceTransformersEmbeddingService()
        return OpenAIEmbeddingService()
    return SentenceTransformersEmbeddingService()
