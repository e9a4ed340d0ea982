"""Embedding layer: SentenceTransformers or OpenAI (config-based)."""

from .embedding_service import EmbeddingService, get_embedding_service, inner_product

__all__ = ["EmbeddingService", "get_embedding_service", "inner_product"]
