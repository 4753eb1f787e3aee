"""Typed view of the records returned by the scrape provider."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentMetadata(BaseModel):
    """Provider metadata with a known core and an open extension bag.

    Keys outside the declared fields are kept and exposed through
    :attr:`extra_fields`.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    language: Optional[str] = None
    source_url: Optional[str] = Field(default=None, alias="sourceURL")
    status_code: Optional[int] = Field(default=None, alias="statusCode")
    error: Optional[str] = None

    @property
    def extra_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class ScrapedDocument(BaseModel):
    """One page as returned by the provider's scrape or crawl endpoint."""

    model_config = ConfigDict(extra="ignore")

    markdown: Optional[str] = None
    html: Optional[str] = None
    text: Optional[str] = None
    content: Optional[str] = None
    url: Optional[str] = None
    excerpt: Optional[str] = None
    screenshot: Optional[str] = None
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)

    def payload(self, format: str) -> str:
        """Return the body for *format*, falling back to ``content`` then ``""``."""
        if format not in ("markdown", "html", "text"):
            format = "markdown"
        return getattr(self, format) or self.content or ""
