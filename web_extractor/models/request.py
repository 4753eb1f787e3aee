from pydantic import Field

from web_extractor.models.options import ExtractPageOptions


class ScrapeRequest(ExtractPageOptions):
    url: str = Field(..., description="Absolute http(s) URL of the page to extract.")
