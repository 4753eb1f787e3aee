"""Extractor configuration and environment-backed service settings."""

from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.firecrawl.dev"
DEFAULT_TIMEOUT_SECONDS = 30.0


class ExtractorConfig(BaseModel):
    """Read-only configuration fixed when a :class:`WebExtractor` is built."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., min_length=1, description="Firecrawl API key")
    base_url: str = DEFAULT_BASE_URL
    timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Per-request timeout in seconds, passed through to the provider.",
    )
    debug: bool = False


class LoggingSettings(BaseSettings):
    """Logging settings, readable before an API key is configured."""

    model_config = SettingsConfigDict(
        env_prefix="WEB_EXTRACTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = "INFO"


class Settings(LoggingSettings):
    """Settings for the HTTP service, loaded from ``WEB_EXTRACTOR_*`` variables."""

    firecrawl_api_key: str = Field(..., description="Firecrawl API key")
    firecrawl_base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    debug: bool = False

    def extractor_config(self) -> ExtractorConfig:
        return ExtractorConfig(
            api_key=self.firecrawl_api_key,
            base_url=self.firecrawl_base_url,
            timeout=self.timeout,
            debug=self.debug,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
