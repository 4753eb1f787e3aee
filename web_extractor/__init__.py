"""Web content extraction through a scrape provider, with URL and content utilities."""

from web_extractor.config import ExtractorConfig
from web_extractor.errors import (
    ExtractionFailedError,
    InvalidUrlError,
    ScrapeProviderError,
    WebExtractorError,
)
from web_extractor.models.options import (
    ExtractPageOptions,
    ExtractWebsiteOptions,
    NormalizeUrlOptions,
)
from web_extractor.models.page import ExtractedPage, FailedExtraction, PageMetadata
from web_extractor.models.result import ExtractionResult, ExtractionStats
from web_extractor.services.content_cleaner import (
    calculate_similarity,
    clean_content,
    count_words,
    detect_language,
    generate_excerpt,
    strip_html,
    truncate,
)
from web_extractor.services.extractor import MAX_PAGES_HARD_LIMIT, WebExtractor
from web_extractor.services.firecrawl import FirecrawlClient, ScrapeProvider
from web_extractor.services.url_normalizer import (
    build_absolute_url,
    deduplicate_urls,
    extract_domain,
    extract_root_domain,
    filter_urls_by_pattern,
    get_url_depth,
    is_same_domain,
    is_same_root_domain,
    is_subdomain,
    is_valid_url,
    normalize_url,
    validate_url,
)

__all__ = [
    "ExtractorConfig",
    "ExtractionFailedError",
    "InvalidUrlError",
    "ScrapeProviderError",
    "WebExtractorError",
    "ExtractPageOptions",
    "ExtractWebsiteOptions",
    "NormalizeUrlOptions",
    "ExtractedPage",
    "FailedExtraction",
    "PageMetadata",
    "ExtractionResult",
    "ExtractionStats",
    "calculate_similarity",
    "clean_content",
    "count_words",
    "detect_language",
    "generate_excerpt",
    "strip_html",
    "truncate",
    "MAX_PAGES_HARD_LIMIT",
    "WebExtractor",
    "FirecrawlClient",
    "ScrapeProvider",
    "build_absolute_url",
    "deduplicate_urls",
    "extract_domain",
    "extract_root_domain",
    "filter_urls_by_pattern",
    "get_url_depth",
    "is_same_domain",
    "is_same_root_domain",
    "is_subdomain",
    "is_valid_url",
    "normalize_url",
    "validate_url",
]
