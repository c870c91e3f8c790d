import sys
from pathlib import Path

import pytest

# Ensure `places_export` is importable when running pytest from the repo root without installing.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from places_export.core import config  # noqa: E402

_ENV_VARS = (
    "GCP_PLACES_KEY",
    "PAGESPEED_API_KEY",
    "SEARCH_QUERY",
    "OUTPUT_FILE",
    "MAX_RESULTS",
    "USE_DOUBLE_QUEUE",
    "ENABLE_AUDIT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()
