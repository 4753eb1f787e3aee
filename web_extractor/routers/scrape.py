import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from web_extractor.dependencies import get_extractor
from web_extractor.errors import ExtractionFailedError, InvalidUrlError
from web_extractor.models.options import ExtractPageOptions
from web_extractor.models.page import ExtractedPage
from web_extractor.models.request import ScrapeRequest
from web_extractor.rate_limit import limiter
from web_extractor.services.extractor import WebExtractor

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/scrape", response_model=ExtractedPage, summary="Extract a single web page")
@limiter.limit("10/minute")
async def scrape(
    request: Request,
    body: ScrapeRequest,
    extractor: WebExtractor = Depends(get_extractor),
) -> ExtractedPage:
    """Scrape *url* through the provider and return the cleaned, annotated page."""
    logger.info("Scrape request received", extra={"url": body.url, "format": body.format})

    options = ExtractPageOptions(
        **{name: getattr(body, name) for name in ExtractPageOptions.model_fields}
    )
    try:
        return await extractor.extract_page(body.url, options)
    except InvalidUrlError as exc:
        logger.warning("Invalid URL: %s - %s", body.url, exc.reason)
        raise HTTPException(status_code=400, detail=str(exc))
    except ExtractionFailedError as exc:
        logger.error("Error extracting URL %s: %s", body.url, exc.cause)
        raise HTTPException(status_code=502, detail=str(exc))
