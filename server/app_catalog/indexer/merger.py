"""
Folds ingester streams into one id-keyed catalog.

Records are inserted in arrival order; a record whose id is already present
replaces the earlier one in place (last write wins). Skips are kept aside for
reporting and never reach the catalog.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from .models import AppRecord, ScanItem, Skip

logger = logging.getLogger(__name__)


class AppCatalogMerger:

    def __init__(self):
        self._records: Dict[str, AppRecord] = {}
        self.skipped: List[Skip] = []

    def __len__(self) -> int:
        return len(self._records)

    def add(self, item: ScanItem) -> None:
        if isinstance(item, Skip):
            self.skipped.append(item)
            return
        if item.id in self._records:
            logger.debug("[Merger] id collision, replacing %s (%s)", item.id, item.name)
        self._records[item.id] = item

    def extend(self, items: Iterable[ScanItem]) -> None:
        for item in items:
            self.add(item)

    def records(self) -> List[AppRecord]:
        """Catalog sorted by case-insensitive name; ties keep insertion order."""
        return sorted(self._records.values(), key=lambda record: record.name.lower())
