"""Search providers used by the export job.

``BasicSearchProvider`` talks to the Places API (New) searchText endpoint.
``AuditSearchProvider`` uses the legacy textsearch/details endpoints and runs a
PageSpeed audit for every accepted website.
"""

import dataclasses
import logging
from abc import ABC, abstractmethod
from typing import Optional

from places_export.etl.transform import (
    extract_next_page_token,
    legacy_to_business_record,
    legacy_to_discovered_places,
    merge_details,
    to_discovered_places,
)
from places_export.models import AuditScores, BusinessRecord, DiscoveredPlace, SearchPage
from places_export.vendors import google_places, pagespeed

logger = logging.getLogger(__name__)

AUDITABLE_SCHEMES = ("http://", "https://")


class SearchProvider(ABC):
    """Fetches search pages and enriches accepted places."""

    name = "base"
    max_page_size = google_places.MAX_PAGE_SIZE
    include_audit = False

    def page_size_for(self, max_results: Optional[int]) -> int:
        if max_results is None:
            return self.max_page_size
        return min(max_results, self.max_page_size)

    @abstractmethod
    def fetch_page(self, query: str, page_token: Optional[str] = None, page_size: Optional[int] = None) -> SearchPage:
        """Run one search request and return its places and continuation token."""

    def enrich(self, place: DiscoveredPlace) -> BusinessRecord:
        return place.record


class BasicSearchProvider(SearchProvider):
    name = "basic"

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    def fetch_page(self, query: str, page_token: Optional[str] = None, page_size: Optional[int] = None) -> SearchPage:
        payload = google_places.search_text(
            query=query,
            api_key=self.api_key,
            page_size=page_size or self.max_page_size,
            page_token=page_token,
        )
        return SearchPage(
            places=to_discovered_places(payload.get("places", [])),
            next_page_token=extract_next_page_token(payload),
        )


class AuditSearchProvider(SearchProvider):
    name = "audit"
    max_page_size = google_places.LEGACY_PAGE_SIZE
    include_audit = True

    def __init__(self, api_key: str, pagespeed_api_key: str = "", strategy: str = "mobile") -> None:
        self.api_key = api_key
        self.pagespeed_api_key = pagespeed_api_key
        self.strategy = strategy

    def fetch_page(self, query: str, page_token: Optional[str] = None, page_size: Optional[int] = None) -> SearchPage:
        # The legacy endpoint always returns up to 20 results; page_size is not sent.
        payload = google_places.legacy_text_search(query=query, api_key=self.api_key, pagetoken=page_token)
        return SearchPage(
            places=legacy_to_discovered_places(payload.get("results", [])),
            next_page_token=extract_next_page_token(payload),
        )

    def fetch_details(self, place: DiscoveredPlace) -> BusinessRecord:
        if not place.place_id:
            return place.record
        try:
            details = google_places.legacy_place_details(place_id=place.place_id, api_key=self.api_key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to fetch details for %s: %s", place.place_id, exc)
            return place.record
        return merge_details(place.record, legacy_to_business_record(details))

    def audit(self, website: str) -> AuditScores:
        if not website or not website.lower().startswith(AUDITABLE_SCHEMES):
            logger.debug("Skipping audit for website=%r", website)
            return AuditScores.unavailable()
        try:
            payload = pagespeed.run_pagespeed(website, api_key=self.pagespeed_api_key, strategy=self.strategy)
            scores = pagespeed.extract_scores(payload)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Audit failed for %s: %s", website, exc)
            return AuditScores.unavailable()
        logger.info(
            "Audited %s: performance=%s best_practices=%s seo=%s",
            website,
            scores.performance,
            scores.best_practices,
            scores.seo,
        )
        return scores

    def enrich(self, place: DiscoveredPlace) -> BusinessRecord:
        record = self.fetch_details(place)
        scores = self.audit(record.website)
        return dataclasses.replace(
            record,
            performance=scores.performance,
            best_practices=scores.best_practices,
            seo=scores.seo,
        )


def build_provider(audit: bool, api_key: str, pagespeed_api_key: str = "") -> SearchProvider:
    if audit:
        return AuditSearchProvider(api_key=api_key, pagespeed_api_key=pagespeed_api_key)
    return BasicSearchProvider(api_key=api_key)
