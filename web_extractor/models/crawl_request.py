from pydantic import Field

from web_extractor.models.options import ExtractWebsiteOptions


class CrawlRequest(ExtractWebsiteOptions):
    url: str = Field(..., description="Absolute http(s) seed URL of the crawl.")

    def options(self) -> ExtractWebsiteOptions:
        """Return the crawl options without the seed URL."""
        return ExtractWebsiteOptions(
            **{name: getattr(self, name) for name in ExtractWebsiteOptions.model_fields}
        )
