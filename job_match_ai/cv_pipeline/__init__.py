"""Resume upload pipeline: text extraction (TXT/PDF), keywords, embedding."""

from .feature_pipeline import FeatureExtractionPipeline
from .keyword_extractor import extract_keywords
from .text_extractor import extract_text, extract_text_async

__all__ = ["FeatureExtractionPipeline", "extract_keywords", "extract_text", "extract_text_async"]
