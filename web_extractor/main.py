import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from web_extractor.config import LoggingSettings
from web_extractor.rate_limit import limiter
from web_extractor.routers.crawl import router as crawl_router
from web_extractor.routers.scrape import router as scrape_router


def configure_logging(level: str) -> None:
    """Send every log record to stderr as one JSON line, at *level* and above."""
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
            },
            "root": {"level": level.upper(), "handlers": ["console"]},
        }
    )


configure_logging(LoggingSettings().log_level)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Web Extractor",
    description=(
        "Extracts single pages or whole sites through Firecrawl and returns "
        "normalized URLs, cleaned content and per-page metadata."
    ),
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(scrape_router)
app.include_router(crawl_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from Web Extractor"}
