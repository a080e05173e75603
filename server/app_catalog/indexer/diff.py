"""
Catalog diffing by stable id.

Ids are derived from source identity (the shortcut file, or hive + path +
name), so two scans can be compared row by row. A shortcut whose target moved
shows up in ``changed`` with the same id and a different launch_path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .models import AppRecord

# Fields that reflect scan time rather than source state.
_VOLATILE_FIELDS = {"last_modified"}


@dataclass
class CatalogDiff:
    added: List[AppRecord] = field(default_factory=list)
    removed: List[AppRecord] = field(default_factory=list)
    changed: List[Tuple[AppRecord, AppRecord]] = field(default_factory=list)
    unchanged: List[AppRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.changed)


def _stable_fields(record: AppRecord) -> dict:
    return record.model_dump(exclude=_VOLATILE_FIELDS)


def diff_catalogs(previous: Iterable[AppRecord], current: Iterable[AppRecord]) -> CatalogDiff:
    before = {record.id: record for record in previous}
    after = {record.id: record for record in current}
    diff = CatalogDiff()

    for app_id, record in after.items():
        old = before.get(app_id)
        if old is None:
            diff.added.append(record)
        elif _stable_fields(old) != _stable_fields(record):
            diff.changed.append((old, record))
        else:
            diff.unchanged.append(record)

    diff.removed = [record for app_id, record in before.items() if app_id not in after]
    return diff
