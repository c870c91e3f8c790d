from places_export.etl import transform
from places_export.models import BusinessRecord


def test_to_business_record_reads_new_api_fields():
    place = {
        "id": "p1",
        "displayName": {"text": "Acme Plumbing", "languageCode": "en"},
        "formattedAddress": "1 Main St",
        "websiteUri": "https://acme.example",
        "nationalPhoneNumber": "(555) 010-0000",
    }

    record = transform.to_business_record(place)

    assert record == BusinessRecord(
        name="Acme Plumbing",
        address="1 Main St",
        website="https://acme.example",
        phone="(555) 010-0000",
    )


def test_to_business_record_defaults_missing_fields():
    record = transform.to_business_record({"id": "p2"})

    assert record.name == "Unknown"
    assert record.address == "Unknown"
    assert record.website == ""
    assert record.phone == ""


def test_legacy_to_business_record():
    record = transform.legacy_to_business_record(
        {"name": "Acme", "formatted_address": "Main", "formatted_phone_number": "123"}
    )
    assert record.name == "Acme"
    assert record.website == ""
    assert record.phone == "123"


def test_to_discovered_places_keeps_ids():
    places = transform.to_discovered_places([{"id": "a"}, {"displayName": {"text": "No id"}}])
    assert [p.place_id for p in places] == ["a", None]
    assert transform.to_discovered_places(None) == []


def test_extract_next_page_token_field_names():
    assert transform.extract_next_page_token({"nextPageToken": "a"}) == "a"
    assert transform.extract_next_page_token({"next_page_token": "b"}) == "b"
    assert transform.extract_next_page_token({"nextPage": "c"}) == "c"
    assert transform.extract_next_page_token({"nextPageToken": ""}) is None
    assert transform.extract_next_page_token({}) is None


def test_merge_details_fills_gaps_only():
    record = BusinessRecord(name="Acme", address="Unknown", website="", phone="123")
    details = BusinessRecord(name="Acme Inc", address="Main St", website="https://acme.example", phone="999")

    merged = transform.merge_details(record, details)

    assert merged.name == "Acme"
    assert merged.address == "Main St"
    assert merged.website == "https://acme.example"
    assert merged.phone == "123"
