"""Exception types raised by the extractor and its scrape provider."""

from typing import Optional


class WebExtractorError(Exception):
    """Base class for every error raised by this package."""


class InvalidUrlError(WebExtractorError, ValueError):
    """Raised when a URL cannot be parsed or does not use http/https.

    Always detected before any request is sent to the scrape provider, so it
    is safe to retry once the input has been corrected.
    """

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL: {url} - {reason}")


class ScrapeProviderError(WebExtractorError):
    """Raised by a scrape provider when the remote call itself fails."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ExtractionFailedError(WebExtractorError):
    """Raised when the provider call behind an extraction fails.

    The original exception is kept on ``cause`` (and chained as
    ``__cause__``).  Nothing is persisted on failure, so callers may retry.
    """

    def __init__(self, url: str, cause: BaseException) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Failed to extract {url}: {cause}")
