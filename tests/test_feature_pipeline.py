"""Tests for resume validation, text extraction and profile assembly."""

from __future__ import annotations

import asyncio

import pytest

from job_match_ai.cv_pipeline.feature_pipeline import FeatureExtractionPipeline
from job_match_ai.cv_pipeline.text_extractor import extract_text
from job_match_ai.errors import ExtractionError, ProviderUnavailable, ValidationError
from job_match_ai.schemas.resume_profile import ResumeUpload
from job_match_ai.services.keyword_store import KeywordStore

from conftest import FakeEmbedding

RESUME_TEXT = "Senior Go Engineer with Kubernetes and gRPC experience. Kubernetes operator author."


class RecordingExtractor:
    def __init__(self, text: str = RESUME_TEXT, fail_with: Exception | None = None) -> None:
        self.text = text
        self.fail_with = fail_with
        self.calls = 0

    async def __call__(self, upload: ResumeUpload) -> str:
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        return self.text


def _txt(data: bytes) -> ResumeUpload:
    return ResumeUpload(filename="resume.txt", content_type="text/plain", data=data)


def test_oversized_text_file_rejected_before_extraction(keyword_store) -> None:
    extractor = RecordingExtractor()
    pipeline = FeatureExtractionPipeline(FakeEmbedding(), keyword_store, text_extractor=extractor)
    upload = _txt(b"x" * (2 * 1024 * 1024))

    with pytest.raises(ValidationError):
        asyncio.run(pipeline.analyze(upload))
    assert extractor.calls == 0
    assert keyword_store.load() == []


def test_unsupported_type_rejected_synchronously() -> None:
    pipeline = FeatureExtractionPipeline(FakeEmbedding(), text_extractor=RecordingExtractor())
    upload = ResumeUpload(filename="resume.docx", content_type="application/msword", data=b"abc")
    with pytest.raises(ValidationError):
        pipeline.validate(upload)


def test_file_at_size_limit_is_accepted() -> None:
    pipeline = FeatureExtractionPipeline(FakeEmbedding(), text_extractor=RecordingExtractor())
    pipeline.validate(_txt(b"x" * (1024 * 1024)))


def test_extraction_error_propagates_without_retry(keyword_store) -> None:
    extractor = RecordingExtractor(fail_with=ExtractionError("corrupt"))
    pipeline = FeatureExtractionPipeline(FakeEmbedding(), keyword_store, text_extractor=extractor)

    with pytest.raises(ExtractionError):
        asyncio.run(pipeline.analyze(_txt(b"ignored")))
    assert extractor.calls == 1
    assert keyword_store.load() == []


def test_unready_provider_fails_fast(keyword_store) -> None:
    pipeline = FeatureExtractionPipeline(
        FakeEmbedding(ready=False), keyword_store, text_extractor=RecordingExtractor()
    )
    with pytest.raises(ProviderUnavailable):
        asyncio.run(pipeline.analyze(_txt(b"ignored")))
    assert keyword_store.load() == []


def test_successful_analysis_builds_profile_and_persists_keywords(keyword_store) -> None:
    embedding = FakeEmbedding(vectors={RESUME_TEXT: [0.6, 0.8, 0.0]})
    pipeline = FeatureExtractionPipeline(embedding, keyword_store, text_extractor=RecordingExtractor())

    profile = asyncio.run(pipeline.analyze(_txt(b"ignored")))

    assert profile.raw_text == RESUME_TEXT
    assert profile.keywords[0] == "kubernetes"
    assert {"engineer", "grpc", "senior"} <= set(profile.keywords)
    assert profile.embedding == [0.6, 0.8, 0.0]
    assert keyword_store.load() == list(profile.keywords)
    assert profile.query == " ".join(profile.keywords)


def test_extract_plain_text_normalizes_whitespace() -> None:
    text = extract_text(_txt("\ufeffJane   Doe\n\n\n\nPython\tengineer ".encode("utf-8")))
    assert text == "Jane Doe\n\nPython engineer"


def test_extract_plain_text_rejects_invalid_utf8() -> None:
    with pytest.raises(ExtractionError):
        extract_text(_txt(b"\xff\xfe\xfa binary"))


def test_extract_empty_document_fails() -> None:
    with pytest.raises(ExtractionError):
        extract_text(_txt(b"   \n  "))


def test_extract_corrupt_pdf_fails() -> None:
    upload = ResumeUpload(filename="resume.pdf", content_type="application/pdf", data=b"not really a pdf")
    with pytest.raises(ExtractionError):
        extract_text(upload)


class UnwritableStore(KeywordStore):
    def save(self, keywords) -> None:
        raise OSError("read-only file system")


def test_keyword_persist_failure_does_not_fail_analysis(tmp_path) -> None:
    pipeline = FeatureExtractionPipeline(
        FakeEmbedding(), UnwritableStore(tmp_path / "store.json"), text_extractor=RecordingExtractor()
    )
    profile = asyncio.run(pipeline.analyze(_txt(b"ignored")))
    assert profile.keywords[0] == "kubernetes"
