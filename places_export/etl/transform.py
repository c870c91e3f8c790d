"""Utilities for transforming Google Places responses into business records."""

from typing import Any, Dict, Iterable, List, Optional

from places_export.models import UNKNOWN, BusinessRecord, DiscoveredPlace

_PAGE_TOKEN_FIELDS = ("nextPageToken", "next_page_token", "nextPage")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _display_name(place: Dict[str, Any]) -> str:
    display_name = place.get("displayName")
    if isinstance(display_name, dict):
        return _text(display_name.get("text"))
    return _text(display_name)


def to_business_record(place: Dict[str, Any]) -> BusinessRecord:
    """Normalize a Places API (New) entry."""
    return BusinessRecord(
        name=_display_name(place) or UNKNOWN,
        address=_text(place.get("formattedAddress")) or UNKNOWN,
        website=_text(place.get("websiteUri")),
        phone=_text(place.get("nationalPhoneNumber")),
    )


def legacy_to_business_record(result: Dict[str, Any]) -> BusinessRecord:
    """Normalize a legacy textsearch/details result."""
    return BusinessRecord(
        name=_text(result.get("name")) or UNKNOWN,
        address=_text(result.get("formatted_address")) or UNKNOWN,
        website=_text(result.get("website")),
        phone=_text(result.get("formatted_phone_number")),
    )


def to_discovered_places(places: Iterable[Dict[str, Any]]) -> List[DiscoveredPlace]:
    return [DiscoveredPlace(place.get("id"), to_business_record(place)) for place in places or []]


def legacy_to_discovered_places(results: Iterable[Dict[str, Any]]) -> List[DiscoveredPlace]:
    return [DiscoveredPlace(result.get("place_id"), legacy_to_business_record(result)) for result in results or []]


def extract_next_page_token(payload: Dict[str, Any]) -> Optional[str]:
    for field_name in _PAGE_TOKEN_FIELDS:
        token = payload.get(field_name)
        if token:
            return token
    return None


def merge_details(record: BusinessRecord, details: BusinessRecord) -> BusinessRecord:
    """Fill fields the search response left empty with values from details."""

    def pick(current: str, fallback: str, empty: str) -> str:
        if current and current != empty:
            return current
        return fallback or current

    return BusinessRecord(
        name=pick(record.name, details.name, UNKNOWN),
        address=pick(record.address, details.address, UNKNOWN),
        website=pick(record.website, details.website, ""),
        phone=pick(record.phone, details.phone, ""),
        performance=record.performance,
        best_practices=record.best_practices,
        seo=record.seo,
    )
