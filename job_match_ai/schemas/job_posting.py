"""Job posting schema as returned by the job index."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class JobPosting(BaseModel):
    """One job posting; immutable once fetched."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique within a result set; used as de-dup/display key")
    title: str = Field(default="", description="Job title")
    company: str = Field(default="", description="Company or employer name")
    location: str = Field(default="", description="Job location")
    description: str = Field(default="", description="Description snippet from the index")
    apply_url: str = Field(default="", description="Redirect URL to apply")
    salary_min: Optional[float] = Field(default=None, description="Lower salary bound if listed")
    salary_max: Optional[float] = Field(default=None, description="Upper salary bound if listed")
