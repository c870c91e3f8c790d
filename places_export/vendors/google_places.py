"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://places.googleapis.com/v1"
_LEGACY_BASE_URL = "https://maps.googleapis.com/maps/api/place"
_TIMEOUT = 10

MAX_PAGE_SIZE = 100
LEGACY_PAGE_SIZE = 20

SEARCH_FIELD_MASK = (
    "places.id,places.displayName,places.formattedAddress,"
    "places.websiteUri,places.nationalPhoneNumber,nextPageToken"
)
LEGACY_DETAILS_FIELDS = "place_id,name,formatted_address,formatted_phone_number,website"


class TransportError(RuntimeError):
    """Raised when an upstream API responds with a non-success status."""

    def __init__(self, status_code: int, body: Any, url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"HTTP {status_code}: {body}")


class GooglePlacesError(TransportError):
    """Raised when the legacy Places API reports a non-OK status in its payload."""


def _response_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _checked_json(response: requests.Response, url: str) -> Dict[str, Any]:
    if not response.ok:
        body = _response_body(response)
        logger.error("Places request failed: url=%s status=%s body=%s", url, response.status_code, body)
        raise TransportError(response.status_code, body, url=url)
    return response.json()


def search_text(query: str, api_key: str, page_size: int = MAX_PAGE_SIZE, page_token: Optional[str] = None) -> Dict[str, Any]:
    url = f"{_BASE_URL}/places:searchText"
    body: Dict[str, Any] = {"textQuery": query, "maxResultCount": min(page_size, MAX_PAGE_SIZE)}
    if page_token:
        body["pageToken"] = page_token
    headers = {
        "Content-Type": "application/json",
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": SEARCH_FIELD_MASK,
    }
    response = _SESSION.post(url, json=body, headers=headers, timeout=_TIMEOUT)
    payload = _checked_json(response, url)
    logger.debug("searchText response for query=%s: %s", query, payload)
    return payload


def _legacy_get(endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
    url = f"{_LEGACY_BASE_URL}/{endpoint}/json"
    response = _SESSION.get(url, params=params, timeout=_TIMEOUT)
    payload = _checked_json(response, url)
    status = payload.get("status")
    if status not in {"OK", "ZERO_RESULTS"}:
        error_message = payload.get("error_message")
        logger.error("%s failed: status=%s, error_message=%s", endpoint, status, error_message)
        body = f"{status}: {error_message}" if error_message else status
        raise GooglePlacesError(response.status_code, body, url=url)
    return payload


def legacy_text_search(query: str, api_key: str, pagetoken: Optional[str] = None) -> Dict[str, Any]:
    params = {"query": query, "key": api_key}
    if pagetoken:
        params["pagetoken"] = pagetoken
    payload = _legacy_get("textsearch", params)
    logger.debug("textsearch response for query=%s: %s", query, payload)
    return payload


def legacy_place_details(place_id: str, api_key: str) -> Dict[str, Any]:
    params = {"place_id": place_id, "key": api_key, "fields": LEGACY_DETAILS_FIELDS}
    return _legacy_get("details", params).get("result", {})
