from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PageMetadata(BaseModel):
    """Descriptive data derived from a page's content and the provider response."""

    model_config = ConfigDict(frozen=True)

    scraped_at: datetime
    source_url: str
    description: Optional[str] = None
    word_count: int = Field(ge=0)
    language: Optional[str] = None
    status_code: Optional[int] = None
    extra: Dict[str, Any] = Field(default_factory=dict)
    """Provider metadata outside the fields above (e.g. ``ogImage``, ``screenshot``)."""


class ExtractedPage(BaseModel):
    """One successfully extracted page."""

    model_config = ConfigDict(frozen=True)

    title: str
    content: str
    url: str  # normalized form of metadata.source_url
    metadata: PageMetadata


class FailedExtraction(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    error: str
    status_code: Optional[int] = None
