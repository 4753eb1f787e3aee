from re import Pattern
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

OutputFormat = Literal["markdown", "html", "text"]


class NormalizeUrlOptions(BaseModel):
    """Switches controlling :func:`normalize_url`."""

    model_config = ConfigDict(frozen=True)

    lowercase: bool = True
    remove_fragment: bool = True
    remove_trailing_slash: bool = True
    sort_query_params: bool = True
    remove_query_params: bool = False


class ExtractPageOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    only_main_content: bool = True
    format: OutputFormat = "markdown"
    include_screenshot: bool = False
    wait_for: Optional[int] = Field(
        default=None,
        ge=0,
        description="Milliseconds the provider waits before capturing the page.",
    )


class ExtractWebsiteOptions(ExtractPageOptions):
    max_pages: int = Field(
        default=10,
        ge=1,
        description="Maximum number of pages to crawl. Values above 100 are clamped to 100.",
    )
    max_depth: int = Field(
        default=3,
        ge=1,
        description="Maximum link depth from the seed URL.",
    )
    include_subdomains: bool = False
    follow_external_links: bool = False
    title_prefix: Optional[str] = None
    include_patterns: List[Pattern] = Field(default_factory=list)
    exclude_patterns: List[Pattern] = Field(default_factory=list)
