import pytest

from places_export.core import providers
from places_export.models import NOT_AVAILABLE, BusinessRecord, DiscoveredPlace
from places_export.vendors.pagespeed import AuditError

FULL_AUDIT = {
    "lighthouseResult": {
        "categories": {
            "performance": {"score": 0.91},
            "best-practices": {"score": 0.8},
            "seo": {"score": 1.0},
        }
    }
}


def test_basic_provider_fetch_page(monkeypatch):
    captured = {}

    def fake_search_text(query, api_key, page_size, page_token=None):
        captured.update(query=query, api_key=api_key, page_size=page_size, page_token=page_token)
        return {
            "places": [
                {"id": "1", "displayName": {"text": "One"}, "formattedAddress": "Main"},
                {"id": "2"},
            ],
            "next_page_token": "more",
        }

    monkeypatch.setattr(providers.google_places, "search_text", fake_search_text)
    provider = providers.BasicSearchProvider(api_key="key")

    page = provider.fetch_page("gyms in Miami", page_token="tok", page_size=5)

    assert captured == {"query": "gyms in Miami", "api_key": "key", "page_size": 5, "page_token": "tok"}
    assert [p.place_id for p in page.places] == ["1", "2"]
    assert page.places[1].record.name == "Unknown"
    assert page.next_page_token == "more"
    assert provider.enrich(page.places[0]) is page.places[0].record


def test_page_size_for():
    basic = providers.BasicSearchProvider(api_key="key")
    audit = providers.AuditSearchProvider(api_key="key")

    assert basic.page_size_for(None) == 100
    assert basic.page_size_for(5) == 5
    assert basic.page_size_for(500) == 100
    assert audit.page_size_for(None) == 20


def test_audit_provider_fetch_page(monkeypatch):
    monkeypatch.setattr(
        providers.google_places,
        "legacy_text_search",
        lambda query, api_key, pagetoken=None: {
            "status": "OK",
            "results": [{"place_id": "x", "name": "Acme", "formatted_address": "Main"}],
        },
    )
    page = providers.AuditSearchProvider(api_key="key").fetch_page("dentists in Chicago")

    assert page.places[0].place_id == "x"
    assert page.places[0].record.name == "Acme"
    assert page.next_page_token is None


def test_audit_provider_enrich_fills_details_and_scores(monkeypatch):
    monkeypatch.setattr(
        providers.google_places,
        "legacy_place_details",
        lambda place_id, api_key: {
            "name": "Acme",
            "formatted_address": "Main",
            "website": "https://acme.example",
            "formatted_phone_number": "555",
        },
    )
    audited = []

    def fake_run_pagespeed(url, api_key="", strategy="mobile"):
        audited.append(url)
        return FULL_AUDIT

    monkeypatch.setattr(providers.pagespeed, "run_pagespeed", fake_run_pagespeed)
    provider = providers.AuditSearchProvider(api_key="key", pagespeed_api_key="psi")

    record = provider.enrich(DiscoveredPlace("x", BusinessRecord(name="Acme", address="Main")))

    assert audited == ["https://acme.example"]
    assert record.website == "https://acme.example"
    assert record.phone == "555"
    assert (record.performance, record.best_practices, record.seo) == (91, 80, 100)


def test_audit_skipped_without_website(monkeypatch):
    monkeypatch.setattr(providers.google_places, "legacy_place_details", lambda place_id, api_key: {})

    def fail(*args, **kwargs):
        raise AssertionError("audit should be skipped")

    monkeypatch.setattr(providers.pagespeed, "run_pagespeed", fail)
    provider = providers.AuditSearchProvider(api_key="key")

    record = provider.enrich(DiscoveredPlace("x", BusinessRecord(name="No Site", address="Main")))

    assert record.website == ""
    assert (record.performance, record.best_practices, record.seo) == (NOT_AVAILABLE,) * 3


@pytest.mark.parametrize("website", ["ftp://acme.example", "acme.example"])
def test_audit_skipped_for_unrecognized_scheme(monkeypatch, website):
    monkeypatch.setattr(
        providers.pagespeed, "run_pagespeed", lambda *a, **k: pytest.fail("audit should be skipped")
    )
    scores = providers.AuditSearchProvider(api_key="key").audit(website)
    assert scores.seo == NOT_AVAILABLE


def test_audit_failure_degrades(monkeypatch, caplog):
    def boom(url, api_key="", strategy="mobile"):
        raise AuditError("PageSpeed returned HTTP 500", 500, "boom")

    monkeypatch.setattr(providers.pagespeed, "run_pagespeed", boom)

    with caplog.at_level("WARNING"):
        scores = providers.AuditSearchProvider(api_key="key").audit("https://acme.example")

    assert scores.performance == NOT_AVAILABLE
    assert "Audit failed for https://acme.example" in caplog.text


def test_details_failure_keeps_search_record(monkeypatch):
    def boom(place_id, api_key):
        raise RuntimeError("details down")

    monkeypatch.setattr(providers.google_places, "legacy_place_details", boom)
    monkeypatch.setattr(providers.pagespeed, "run_pagespeed", lambda *a, **k: FULL_AUDIT)
    original = BusinessRecord(name="Acme", address="Main", website="https://acme.example")

    record = providers.AuditSearchProvider(api_key="key").enrich(DiscoveredPlace("x", original))

    assert record.name == "Acme"
    assert record.performance == 91


def test_build_provider():
    assert isinstance(providers.build_provider(False, "k"), providers.BasicSearchProvider)
    audit = providers.build_provider(True, "k", "psi")
    assert isinstance(audit, providers.AuditSearchProvider)
    assert audit.pagespeed_api_key == "psi"
    assert audit.include_audit is True


def test_audit_with_non_numeric_score_degrades(monkeypatch):
    monkeypatch.setattr(
        providers.pagespeed,
        "run_pagespeed",
        lambda *a, **k: {"lighthouseResult": {"categories": {"performance": {"score": "n/a"}}}},
    )

    scores = providers.AuditSearchProvider(api_key="key").audit("https://acme.example")

    assert (scores.performance, scores.best_practices, scores.seo) == (NOT_AVAILABLE,) * 3


def test_audit_with_malformed_payload_degrades(monkeypatch, caplog):
    monkeypatch.setattr(providers.pagespeed, "run_pagespeed", lambda *a, **k: {"lighthouseResult": "broken"})

    with caplog.at_level("WARNING"):
        scores = providers.AuditSearchProvider(api_key="key").audit("https://acme.example")

    assert scores == providers.AuditScores.unavailable()
    assert "Audit failed for https://acme.example" in caplog.text
