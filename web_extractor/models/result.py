from typing import List

from pydantic import BaseModel

from web_extractor.models.page import ExtractedPage, FailedExtraction


class ExtractionStats(BaseModel):
    duration_seconds: float
    success_rate: float
    """Percentage of processed pages that were extracted (0 when nothing was processed)."""
    total_words: int
    avg_words_per_page: float


class ExtractionResult(BaseModel):
    """Outcome of a website crawl.

    ``total_pages`` always equals ``len(pages) + len(failed)``.  Records that
    were dropped as duplicates or by URL patterns are not counted.
    """

    pages: List[ExtractedPage]
    failed: List[FailedExtraction]
    total_pages: int
    stats: ExtractionStats
    effective_max_pages: int
    """Page ceiling actually sent to the provider after clamping."""
