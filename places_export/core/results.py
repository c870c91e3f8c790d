"""Ordered, deduplicated and capped collection of discovered businesses."""

import logging
from typing import List, Optional, Set

from places_export.models import BusinessRecord, DiscoveredPlace

logger = logging.getLogger(__name__)


class ResultSet:
    """Records in discovery order; first occurrence of a place id wins."""

    def __init__(self, max_size: Optional[int] = None) -> None:
        self.max_size = max_size
        self._records: List[BusinessRecord] = []
        self._seen_ids: Set[str] = set()

    def __len__(self) -> int:
        return len(self._records)

    @property
    def records(self) -> List[BusinessRecord]:
        return list(self._records)

    @property
    def is_full(self) -> bool:
        return self.max_size is not None and len(self._records) >= self.max_size

    def has_seen(self, place_id: Optional[str]) -> bool:
        return place_id in self._seen_ids

    def accepts(self, place: DiscoveredPlace) -> bool:
        """Whether ``place`` would be kept by :meth:`add`."""
        if self.is_full:
            return False
        if not place.place_id:
            logger.debug("Skipping place without identifier: %s", place.record.name)
            return False
        return not self.has_seen(place.place_id)

    def add(self, place_id: str, record: BusinessRecord) -> bool:
        if self.is_full or not place_id or self.has_seen(place_id):
            return False
        self._seen_ids.add(place_id)
        self._records.append(record)
        return True
