"""Expand a "<subject> in <location>" query into related searches.

A single text search is capped at roughly 20 places. Issuing the same search
with synonyms for the business type and with neighbourhoods of the location
surfaces more distinct places, which the job then deduplicates.
"""

from typing import Dict, List, Mapping, Sequence

SEPARATOR = " in "

SUBJECT_SYNONYMS: Dict[str, List[str]] = {
    "restaurants": ["dining", "food", "eateries", "cafes", "bistros"],
    "lawyers": ["attorneys", "law firms", "legal services", "legal counsel"],
    "dentists": ["dental offices", "dental care", "orthodontists", "oral health"],
    "plumbers": ["plumbing services", "plumbing contractors", "pipe repair"],
    "doctors": ["physicians", "medical offices", "healthcare providers", "clinics"],
    "gyms": ["fitness centers", "workout facilities", "exercise studios"],
    "salons": ["beauty salons", "hair salons", "spas", "beauty services"],
    "contractors": ["construction services", "home improvement", "renovation"],
    "medspa": ["medical spa", "med spa", "aesthetic clinic", "beauty clinic", "wellness center"],
    "medspas": ["medical spas", "med spas", "aesthetic clinics", "beauty clinics", "wellness centers"],
    "medspa's": ["medical spa", "med spa", "aesthetic clinic", "beauty clinic", "wellness center"],
}

LOCATION_AREAS: Dict[str, List[str]] = {
    "new york": ["manhattan", "brooklyn", "queens", "bronx", "staten island"],
    "los angeles": ["hollywood", "beverly hills", "santa monica", "downtown la"],
    "chicago": ["downtown chicago", "lincoln park", "wicker park", "lakeview"],
    "miami": ["south beach", "wynwood", "brickell", "coconut grove"],
    "toronto": ["downtown toronto", "yorkville", "queen west", "king west", "etobicoke"],
}


def _dedupe(values: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(values))


def generate_search_variations(
    base_query: str,
    subject_synonyms: Mapping[str, Sequence[str]] = SUBJECT_SYNONYMS,
    location_areas: Mapping[str, Sequence[str]] = LOCATION_AREAS,
) -> List[str]:
    """Return ``base_query`` followed by its subject and location variations.

    Keys are matched as substrings of the lowercased halves. The halves keep
    their original casing when reused, so "restaurants in New York" yields
    "dining in New York" and "restaurants in manhattan".
    """
    lowered = base_query.lower()
    if lowered.count(SEPARATOR) != 1:
        return [base_query]

    split_at = lowered.index(SEPARATOR)
    subject = base_query[:split_at]
    location = base_query[split_at + len(SEPARATOR):]
    subject_key = subject.lower()
    location_key = location.lower()

    variations = [base_query]
    for key, synonyms in subject_synonyms.items():
        if key in subject_key:
            variations.extend(f"{synonym}{SEPARATOR}{location}" for synonym in synonyms)

    for key, areas in location_areas.items():
        if key in location_key:
            variations.extend(f"{subject}{SEPARATOR}{area}" for area in areas)

    return _dedupe(variations)
