"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_QUERY = "plumbers in Los Angeles"
DEFAULT_OUTPUT_FILE = "businesses.csv"

_TRUTHY = {"1", "true", "yes"}


class ConfigurationError(RuntimeError):
    """Raised when arguments or environment values cannot be used."""


@dataclass(frozen=True)
class Settings:
    places_api_key: str
    pagespeed_api_key: str = ""
    search_query: str = DEFAULT_SEARCH_QUERY
    output_file: str = DEFAULT_OUTPUT_FILE
    max_results: Optional[int] = None
    use_double_queue: bool = False
    enable_audit: bool = False


def parse_max_results(raw: Optional[str], source: str = "MAX_RESULTS") -> Optional[int]:
    """Parse a result cap; blank means unbounded."""
    if raw is None or not str(raw).strip():
        return None
    try:
        value = int(str(raw).strip())
    except ValueError as exc:
        raise ConfigurationError(f"{source} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{source} must be positive, got {value}")
    return value


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").strip().lower() in _TRUTHY


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    places_api_key = os.getenv("GCP_PLACES_KEY", "")
    pagespeed_api_key = os.getenv("PAGESPEED_API_KEY", "")
    search_query = os.getenv("SEARCH_QUERY") or DEFAULT_SEARCH_QUERY
    output_file = os.getenv("OUTPUT_FILE") or DEFAULT_OUTPUT_FILE
    max_results = parse_max_results(os.getenv("MAX_RESULTS"))
    use_double_queue = _env_flag("USE_DOUBLE_QUEUE")
    enable_audit = _env_flag("ENABLE_AUDIT")

    if not places_api_key:
        logger.warning("GCP_PLACES_KEY is not configured; Google Places requests will fail.")
    if enable_audit and not pagespeed_api_key:
        logger.warning("PAGESPEED_API_KEY is not configured; audits run unauthenticated and may be throttled.")

    return Settings(
        places_api_key=places_api_key,
        pagespeed_api_key=pagespeed_api_key,
        search_query=search_query,
        output_file=output_file,
        max_results=max_results,
        use_double_queue=use_double_queue,
        enable_audit=enable_audit,
    )
