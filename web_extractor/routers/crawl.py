import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from web_extractor.dependencies import get_extractor
from web_extractor.errors import ExtractionFailedError, InvalidUrlError
from web_extractor.models.crawl_request import CrawlRequest
from web_extractor.models.result import ExtractionResult
from web_extractor.rate_limit import limiter
from web_extractor.services.extractor import WebExtractor

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/crawl",
    response_model=ExtractionResult,
    summary="Crawl a website and extract its pages",
    description=(
        "Asks the scrape provider to crawl from *url* (at most `max_pages`, "
        "capped at 100, and `max_depth` links deep), then deduplicates the "
        "returned URLs, applies the include/exclude patterns, and returns the "
        "extracted pages together with the failures and aggregate statistics."
    ),
)
@limiter.limit("5/minute")
async def crawl_endpoint(
    request: Request,
    body: CrawlRequest,
    extractor: WebExtractor = Depends(get_extractor),
) -> ExtractionResult:
    logger.info(
        "Crawl request received",
        extra={"url": body.url, "max_pages": body.max_pages, "max_depth": body.max_depth},
    )

    try:
        result = await extractor.extract_website(body.url, body.options())
    except InvalidUrlError as exc:
        logger.warning("Invalid URL: %s - %s", body.url, exc.reason)
        raise HTTPException(status_code=400, detail=str(exc))
    except ExtractionFailedError as exc:
        logger.error("Error crawling URL %s: %s", body.url, exc.cause)
        raise HTTPException(status_code=502, detail=str(exc))

    logger.info(
        "Crawl finished",
        extra={"url": body.url, "pages": len(result.pages), "failed": len(result.failed)},
    )
    return result
