"""CSV output for exported business records."""

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Union

from places_export.models import NOT_AVAILABLE, BusinessRecord

logger = logging.getLogger(__name__)

BASE_COLUMNS = (
    ("name", "Business Name"),
    ("address", "Address"),
    ("website", "Website"),
    ("phone", "Phone"),
)
AUDIT_COLUMNS = (
    ("performance", "Performance (%)"),
    ("best_practices", "Best Practices (%)"),
    ("seo", "SEO (%)"),
)


class PersistenceError(RuntimeError):
    """Raised when the output file cannot be written."""


def columns_for(include_audit: bool):
    return BASE_COLUMNS + AUDIT_COLUMNS if include_audit else BASE_COLUMNS


def _cell(value) -> str:
    if value is None:
        return ""
    return str(value)


def write_records(records: Iterable[BusinessRecord], path: Union[str, Path], include_audit: bool = False) -> int:
    """Write ``records`` to ``path``, replacing any existing file."""
    columns = columns_for(include_audit)
    count = 0
    try:
        with open(path, "w", newline="", encoding="utf-8") as fh:
            writer = csv.writer(fh)
            writer.writerow([title for _, title in columns])
            for record in records:
                writer.writerow([_cell(getattr(record, attr)) for attr, _ in columns])
                count += 1
    except OSError as exc:
        raise PersistenceError(f"Unable to write {path}: {exc}") from exc
    logger.info("Saved %d business records to %s", count, path)
    return count


def _score(raw: str):
    if raw in ("", NOT_AVAILABLE):
        return raw or None
    try:
        return int(raw)
    except ValueError:
        return raw


def read_records(path: Union[str, Path]) -> List[BusinessRecord]:
    """Read a file produced by :func:`write_records`."""
    records = []
    with open(path, newline="", encoding="utf-8") as fh:
        for row in csv.DictReader(fh):
            values = {attr: row.get(title, "") for attr, title in BASE_COLUMNS}
            for attr, title in AUDIT_COLUMNS:
                if title in row:
                    values[attr] = _score(row[title])
            records.append(BusinessRecord(**values))
    return records
