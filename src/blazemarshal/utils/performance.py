"""
Scan tracking for unindexed field lookups.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List


@dataclass
class ScanStat:
    field: str
    count: int = 0
    slots_scanned: int = 0
    total_ms: float = 0.0

    def record(self, slots_scanned: int, elapsed_ms: float) -> None:
        self.count += 1
        self.slots_scanned += slots_scanned
        self.total_ms += elapsed_ms

    @property
    def average_ms(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total_ms / self.count


class ScanTracker:
    """
    Counts linear scans per field and warns once a field is scanned often
    enough that it should probably be indexed.
    """

    def __init__(self, logger: logging.Logger, *, warning_threshold: int = 10) -> None:
        self.logger = logger
        self.warning_threshold = warning_threshold
        self.stats: dict[str, ScanStat] = {}
        self._reported: set[str] = set()

    def record(self, field: str, slots_scanned: int, elapsed_ms: float) -> None:
        stat = self.stats.setdefault(field, ScanStat(field=field))
        stat.record(slots_scanned, elapsed_ms)
        if self._should_report(stat):
            self._report(stat)

    def summary(self) -> List[dict[str, object]]:
        return [
            {
                "field": stat.field,
                "count": stat.count,
                "slots_scanned": stat.slots_scanned,
                "total_ms": stat.total_ms,
                "average_ms": stat.average_ms,
            }
            for stat in self.stats.values()
        ]

    def reset(self) -> None:
        self.stats.clear()
        self._reported.clear()

    def _should_report(self, stat: ScanStat) -> bool:
        if self.warning_threshold <= 0:
            return False
        if stat.count < self.warning_threshold:
            return False
        return stat.field not in self._reported

    def _report(self, stat: ScanStat) -> None:
        self._reported.add(stat.field)
        self.logger.warning(
            "Unindexed field '%s' scanned %s times (%s slots); consider adding it to the index fields",
            stat.field,
            stat.count,
            stat.slots_scanned,
            extra={"field": stat.field, "count": stat.count, "slots_scanned": stat.slots_scanned},
        )
