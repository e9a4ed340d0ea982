"""Resume upload and the profile derived from it."""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Fixed-length embedding; similarity is the inner product.
FeatureVector = List[float]


class ResumeUpload(BaseModel):
    """Uploaded document as received from the file picker (in-memory only)."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(default="", description="Original file name")
    content_type: str = Field(..., description="MIME type reported for the upload")
    data: bytes = Field(default=b"", description="Raw file content")

    @property
    def size(self) -> int:
        return len(self.data)


class ResumeProfile(BaseModel):
    """Keywords + embedding derived from one successful upload. Replaced wholesale on re-upload."""

    model_config = ConfigDict(frozen=True)

    raw_text: str = Field(..., description="Text extracted from the document")
    keywords: Tuple[str, ...] = Field(default=(), description="Frequency-ranked keywords, stopwords removed")
    embedding: Optional[FeatureVector] = Field(default=None, description="Resume feature vector")

    @property
    def query(self) -> str:
        """Search query derived from the keywords (space-joined)."""
        return " ".join(self.keywords)
