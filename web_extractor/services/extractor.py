"""Extraction orchestrator: one provider call, then URL and content post-processing."""

import logging
import time
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from web_extractor.config import ExtractorConfig
from web_extractor.errors import ExtractionFailedError, InvalidUrlError, ScrapeProviderError
from web_extractor.models.document import ScrapedDocument
from web_extractor.models.options import ExtractPageOptions, ExtractWebsiteOptions
from web_extractor.models.page import ExtractedPage, FailedExtraction, PageMetadata
from web_extractor.models.result import ExtractionResult, ExtractionStats
from web_extractor.services import url_normalizer
from web_extractor.services.content_cleaner import (
    clean_content,
    count_words,
    detect_language,
    generate_excerpt,
)
from web_extractor.services.firecrawl import FirecrawlClient, ScrapeProvider
from web_extractor.services.url_normalizer import (
    deduplicate_urls,
    filter_urls_by_pattern,
    is_valid_url,
    normalize_url,
    validate_url,
)

logger = logging.getLogger(__name__)

# Hard ceiling on pages per crawl, whatever the caller asks for
MAX_PAGES_HARD_LIMIT = 100

PageOutcome = Union[ExtractedPage, FailedExtraction]
# A crawl record as decoded JSON, or one already validated
PageRecord = Union[ScrapedDocument, Mapping[str, Any]]


def _formats(options: ExtractPageOptions) -> List[str]:
    formats = [options.format]
    if options.include_screenshot:
        formats.append("screenshot")
    return formats


def _source_url(record: PageRecord, seed_url: str) -> str:
    if isinstance(record, ScrapedDocument):
        return record.metadata.source_url or record.url or seed_url
    if not isinstance(record, Mapping):
        return seed_url
    metadata = record.get("metadata")
    candidates = [record.get("url")]
    if isinstance(metadata, Mapping):
        candidates.insert(0, metadata.get("sourceURL"))
    for candidate in candidates:
        if isinstance(candidate, str) and candidate:
            return candidate
    return seed_url


def _build_metadata(document: ScrapedDocument, source_url: str, content: str) -> PageMetadata:
    meta = document.metadata
    extra = meta.extra_fields
    if document.screenshot:
        extra["screenshot"] = document.screenshot

    description = meta.description or document.excerpt
    if not description and content:
        description = generate_excerpt(content)

    return PageMetadata(
        scraped_at=datetime.now(timezone.utc),
        source_url=source_url,
        description=description or None,
        word_count=count_words(content),
        language=meta.language or detect_language(content),
        status_code=meta.status_code,
        extra=extra,
    )


def _http_error(document: ScrapedDocument) -> Optional[str]:
    """Return an error message when the provider reports an HTTP error status."""
    status = document.metadata.status_code
    if status is None or status < 400:
        return None
    return document.metadata.error or f"HTTP {status}"


def build_page_outcome(
    record: PageRecord,
    source_url: str,
    options: ExtractWebsiteOptions,
) -> PageOutcome:
    """Turn one crawled record into an :class:`ExtractedPage` or a :class:`FailedExtraction`.

    Never raises: a record that does not validate, an unparseable URL or an
    HTTP error status reported by the provider yields a failure record so the
    rest of the crawl is unaffected.
    """
    try:
        document = ScrapedDocument.model_validate(record)
    except ValidationError as exc:
        return FailedExtraction(url=source_url, error=f"Malformed page record: {exc}")

    status = document.metadata.status_code
    error = _http_error(document)
    if error:
        return FailedExtraction(url=source_url, error=error, status_code=status)

    try:
        page_url = normalize_url(source_url)
        content = clean_content(document.payload(options.format))
        title = document.metadata.title or validate_url(source_url).path or "/"
        if options.title_prefix:
            title = f"{options.title_prefix} - {title}"
        return ExtractedPage(
            title=title,
            content=content,
            url=page_url,
            metadata=_build_metadata(document, source_url, content),
        )
    except (InvalidUrlError, ValidationError) as exc:
        return FailedExtraction(url=source_url, error=str(exc), status_code=status)


def select_records(
    records: Sequence[PageRecord],
    seed_url: str,
    options: ExtractWebsiteOptions,
) -> List[Tuple[str, PageRecord]]:
    """Pick the records to process after URL dedup and pattern filtering.

    Each original-form URL is processed at most once.  Records whose URL does
    not parse are kept (unless a pattern excludes them) so they surface as
    failures instead of disappearing in dedup.
    """
    source_urls = [_source_url(record, seed_url) for record in records]
    unique = set(deduplicate_urls(source_urls))
    if options.include_patterns or options.exclude_patterns:
        allowed = set(
            filter_urls_by_pattern(source_urls, options.include_patterns, options.exclude_patterns)
        )
    else:
        allowed = set(source_urls)

    selected: List[Tuple[str, PageRecord]] = []
    claimed: set = set()
    for url, record in zip(source_urls, records):
        if url in claimed or url not in allowed:
            continue
        if url not in unique and is_valid_url(url):
            # Normalizes to the same key as an earlier URL
            continue
        claimed.add(url)
        selected.append((url, record))
    return selected


def compute_stats(
    pages: Sequence[ExtractedPage],
    failed: Sequence[FailedExtraction],
    duration_seconds: float,
) -> ExtractionStats:
    total = len(pages) + len(failed)
    total_words = sum(page.metadata.word_count for page in pages)
    return ExtractionStats(
        duration_seconds=duration_seconds,
        success_rate=(100 * len(pages) / total) if total else 0.0,
        total_words=total_words,
        avg_words_per_page=(total_words / len(pages)) if pages else 0.0,
    )


class WebExtractor:
    """Extract single pages or whole sites through a scrape provider.

    Instances hold only read-only configuration, so one extractor can serve
    concurrent calls.  The URL helpers below are plain functions exposed on
    the class for convenience.
    """

    normalize_url = staticmethod(url_normalizer.normalize_url)
    validate_url = staticmethod(url_normalizer.validate_url)
    is_valid_url = staticmethod(url_normalizer.is_valid_url)

    def __init__(self, config: ExtractorConfig, provider: Optional[ScrapeProvider] = None):
        self._config = config
        self._provider: ScrapeProvider = provider or FirecrawlClient(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
        )
        # debug=True promotes progress messages so they show at the default level
        self._log_level = logging.INFO if config.debug else logging.DEBUG
        self._log("WebExtractor initialized (base_url=%s)", config.base_url)

    @property
    def config(self) -> ExtractorConfig:
        return self._config

    def _log(self, message: str, *args) -> None:
        logger.log(self._log_level, message, *args)

    async def extract_page(
        self,
        url: str,
        options: Optional[ExtractPageOptions] = None,
    ) -> ExtractedPage:
        """Scrape a single *url* and return the cleaned page.

        Raises:
            InvalidUrlError: if *url* is not an absolute http(s) URL (no
                request is made).
            ExtractionFailedError: if the provider call fails or reports an
                HTTP error status for the page.
        """
        options = options or ExtractPageOptions()
        normalized_url = normalize_url(url)
        self._log("Extracting page: %s", normalized_url)

        try:
            document = await self._provider.scrape(
                url,
                formats=_formats(options),
                only_main_content=options.only_main_content,
                wait_for=options.wait_for,
            )
            error = _http_error(document)
            if error:
                raise ScrapeProviderError(error, status_code=document.metadata.status_code)
        except ScrapeProviderError as exc:
            logger.warning("Failed to extract page %s: %s", url, exc)
            raise ExtractionFailedError(url, exc) from exc

        content = clean_content(document.payload(options.format))
        return ExtractedPage(
            title=document.metadata.title or validate_url(url).hostname or url,
            content=content,
            url=normalized_url,
            metadata=_build_metadata(document, url, content),
        )

    async def extract_website(
        self,
        url: str,
        options: Optional[ExtractWebsiteOptions] = None,
    ) -> ExtractionResult:
        """Crawl from *url* and return every page that survived dedup and filtering.

        Per-page problems end up in ``result.failed``; only a failure of the
        crawl call itself is raised.

        Raises:
            InvalidUrlError: if *url* is not an absolute http(s) URL.
            ExtractionFailedError: if the provider crawl fails.
        """
        options = options or ExtractWebsiteOptions()
        normalized_url = normalize_url(url)

        limit = min(options.max_pages, MAX_PAGES_HARD_LIMIT)
        if limit < options.max_pages:
            logger.warning(
                "max_pages=%d exceeds the hard limit, crawling at most %d pages",
                options.max_pages,
                limit,
            )
        self._log("Starting website extraction: %s (max %d pages)", normalized_url, limit)

        started = time.perf_counter()
        try:
            records = await self._provider.crawl(
                url,
                limit=limit,
                max_depth=options.max_depth,
                allow_subdomains=options.include_subdomains,
                allow_external_links=options.follow_external_links,
                formats=_formats(options),
                only_main_content=options.only_main_content,
            )
        except ScrapeProviderError as exc:
            logger.warning("Failed to extract website %s: %s", url, exc)
            raise ExtractionFailedError(url, exc) from exc

        self._log("Crawl completed, processing %d pages", len(records))

        pages: List[ExtractedPage] = []
        failed: List[FailedExtraction] = []
        for source_url, record in select_records(records, url, options):
            outcome = build_page_outcome(record, source_url, options)
            if isinstance(outcome, FailedExtraction):
                self._log("Failed to process page %s: %s", outcome.url, outcome.error)
                failed.append(outcome)
            else:
                pages.append(outcome)

        stats = compute_stats(pages, failed, time.perf_counter() - started)
        self._log(
            "Extraction completed: %d pages, %d failed in %.2fs",
            len(pages),
            len(failed),
            stats.duration_seconds,
        )
        return ExtractionResult(
            pages=pages,
            failed=failed,
            total_pages=len(pages) + len(failed),
            stats=stats,
            effective_max_pages=limit,
        )
