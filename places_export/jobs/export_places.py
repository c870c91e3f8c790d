"""CLI job to fetch Google Places listings and export them to CSV."""

import argparse
import logging
import sys
import threading
import time
from typing import List, Optional, Sequence

from places_export.core.config import ConfigurationError, Settings, get_settings, parse_max_results
from places_export.core.providers import SearchProvider, build_provider
from places_export.core.results import ResultSet
from places_export.core.variations import generate_search_variations
from places_export.etl.report import PersistenceError, write_records
from places_export.models import BusinessRecord, SearchPage
from places_export.vendors.google_places import TransportError

logger = logging.getLogger(__name__)

PAGE_DELAY_SECONDS = 2
VARIATION_DELAY_SECONDS = 3


def _cancelled(cancel_event: Optional[threading.Event]) -> bool:
    if cancel_event is not None and cancel_event.is_set():
        logger.warning("Cancellation requested; stopping before the next request.")
        return True
    return False


def _absorb_page(page: SearchPage, results: ResultSet, provider: SearchProvider) -> int:
    added = 0
    for place in page.places:
        if results.is_full:
            logger.info("Reached maximum limit of %d results", results.max_size)
            break
        if not results.accepts(place):
            continue
        record = provider.enrich(place)
        results.add(place.place_id, record)
        added += 1
        logger.info(
            "Found: %s (%d%s)",
            record.name,
            len(results),
            f"/{results.max_size}" if results.max_size else "",
        )
    return added


def collect_single_queue(
    provider: SearchProvider,
    query: str,
    max_results: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[BusinessRecord]:
    """Follow continuation tokens for one query until exhausted or capped.

    A ``TransportError`` from the search call is not caught here.
    """
    results = ResultSet(max_results)
    page_size = provider.page_size_for(max_results)
    page_token = None
    pages = 0

    while True:
        if _cancelled(cancel_event):
            break
        page = provider.fetch_page(query, page_token=page_token, page_size=page_size)
        pages += 1
        _absorb_page(page, results, provider)
        if results.is_full:
            break

        page_token = page.next_page_token
        logger.info(
            "Page %d completed. Total found so far: %d. Next page token: %s",
            pages,
            len(results),
            "yes" if page_token else "no",
        )
        if not page_token:
            break
        time.sleep(PAGE_DELAY_SECONDS)

    logger.info("Completed single-queue run: pages_processed=%d records=%d", pages, len(results))
    return results.records


def collect_double_queue(
    provider: SearchProvider,
    query: str,
    max_results: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[BusinessRecord]:
    """Search every variation of ``query`` once and merge unique places."""
    variations = generate_search_variations(query)
    logger.info("Generated %d search variations for query=%s", len(variations), query)

    results = ResultSet(max_results)
    page_size = provider.page_size_for(max_results)

    for index, variation in enumerate(variations):
        if index:
            time.sleep(VARIATION_DELAY_SECONDS)
        if _cancelled(cancel_event):
            break
        logger.info("Searching variation %d/%d: %s", index + 1, len(variations), variation)
        try:
            page = provider.fetch_page(variation, page_size=page_size)
            added = _absorb_page(page, results, provider)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error searching variation %r: %s", variation, exc)
            continue
        logger.info("Variation %r added %d new records (total %d)", variation, added, len(results))
        if results.is_full:
            break

    logger.info("Completed double-queue run: records=%d", len(results))
    return results.records


def run_export_job(
    *,
    query: str,
    output_file: str,
    max_results: Optional[int],
    double_queue: bool,
    audit: bool,
    settings: Optional[Settings] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[BusinessRecord]:
    settings = settings or get_settings()
    query = (query or "").strip()
    if not query:
        raise ConfigurationError("Search query is empty")

    provider = build_provider(audit, settings.places_api_key, settings.pagespeed_api_key)
    logger.info(
        "Fetching businesses for query=%s provider=%s double_queue=%s max_results=%s",
        query,
        provider.name,
        double_queue,
        max_results or "unbounded",
    )

    collect = collect_double_queue if double_queue else collect_single_queue
    records = collect(provider, query, max_results, cancel_event=cancel_event)
    write_records(records, output_file, include_audit=provider.include_audit)
    return records


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export Google Places business listings to CSV",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment variables:
  SEARCH_QUERY       fallback for search_query
  OUTPUT_FILE        fallback for output_file
  MAX_RESULTS        fallback for max_results
  USE_DOUBLE_QUEUE   "true" enables --double-queue
  ENABLE_AUDIT       "true" enables --audit
  GCP_PLACES_KEY     Google Places API key (required)
  PAGESPEED_API_KEY  PageSpeed Insights API key (optional)

Examples:
  places-export "dentists in Chicago"
  places-export "plumbers in LA" la_plumbers.csv 50
  places-export "restaurants in New York" nyc_restaurants.csv 100 --double-queue
        """,
    )
    parser.add_argument("search_query", nargs="?", help='Search text, e.g. "restaurants in New York"')
    parser.add_argument("output_file", nargs="?", help="Output CSV path (default: businesses.csv)")
    parser.add_argument("max_results", nargs="?", help="Maximum number of results (default: no limit)")
    parser.add_argument(
        "--double-queue",
        dest="double_queue",
        action="store_true",
        help="Search related query variations to get more than 20 results",
    )
    parser.add_argument(
        "--audit",
        action="store_true",
        help="Fetch place details and run a PageSpeed audit for each website",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log raw API responses")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )

    try:
        settings = get_settings()
        max_results = (
            parse_max_results(args.max_results, source="max_results")
            if args.max_results
            else settings.max_results
        )
        run_export_job(
            query=args.search_query or settings.search_query,
            output_file=args.output_file or settings.output_file,
            max_results=max_results,
            double_queue=args.double_queue or settings.use_double_queue,
            audit=args.audit or settings.enable_audit,
            settings=settings,
        )
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        raise SystemExit(2) from exc
    except TransportError as exc:
        logger.error("Places request failed with status %s: %s", exc.status_code, exc.body)
        raise SystemExit(1) from exc
    except PersistenceError as exc:
        logger.error("Failed to write output: %s", exc)
        raise SystemExit(1) from exc
    except Exception as exc:  # pragma: no cover - CLI fallback
        logger.error("Export failed: %s", exc, exc_info=True)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main(sys.argv[1:])
