"""Client utilities for the PageSpeed Insights API."""

import logging
from typing import Any, Dict, Optional

import requests

from places_export.models import NOT_AVAILABLE, AuditScores, Score

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
_TIMEOUT = 60

CATEGORIES = ("performance", "best-practices", "seo")


class AuditError(RuntimeError):
    """Raised when a website audit cannot be completed."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


def run_pagespeed(url: str, api_key: str = "", strategy: str = "mobile") -> Dict[str, Any]:
    params = [("url", url), ("strategy", strategy)]
    params.extend(("category", category) for category in CATEGORIES)
    if api_key:
        params.append(("key", api_key))
    response = _SESSION.get(_BASE_URL, params=params, timeout=_TIMEOUT)
    if not response.ok:
        try:
            body = response.json()
        except ValueError:
            body = response.text
        raise AuditError(f"PageSpeed returned HTTP {response.status_code} for {url}", response.status_code, body)
    return response.json()


def _category_score(categories: Dict[str, Any], name: str) -> Score:
    score = (categories.get(name) or {}).get("score")
    if score is None:
        return NOT_AVAILABLE
    try:
        return round(float(score) * 100)
    except (TypeError, ValueError):
        logger.debug("Ignoring non-numeric %s score: %r", name, score)
        return NOT_AVAILABLE


def extract_scores(payload: Dict[str, Any]) -> AuditScores:
    """Scale lighthouse category scores (0-1) to percentages."""
    categories = (payload.get("lighthouseResult") or {}).get("categories") or {}
    return AuditScores(
        performance=_category_score(categories, "performance"),
        best_practices=_category_score(categories, "best-practices"),
        seo=_category_score(categories, "seo"),
    )
