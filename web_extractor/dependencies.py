from fastapi import Depends

from web_extractor.config import Settings, get_settings
from web_extractor.services.extractor import WebExtractor


def get_extractor(settings: Settings = Depends(get_settings)) -> WebExtractor:
    """Build a :class:`WebExtractor` from the service settings."""
    return WebExtractor(settings.extractor_config())
