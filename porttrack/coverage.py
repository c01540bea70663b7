"""Per-class and per-category implementation coverage."""

from __future__ import annotations

from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional

from .categories import ordered_categories
from .equivalence import Mapped, MethodEquivalenceTable, MethodTableSet
from .graph import TargetIndex
from .logging import get_logger
from .models import (
    AnalysisResult,
    CategorySummary,
    ClassMethods,
    ClassTracking,
    ImplementationStatus,
    MethodTracking,
)
from .registry import ClassMapping

_logger = get_logger("coverage")


class CoverageAnalyzer:
    """Scores concrete reference classes against the reimplementation.

    Registry-backed categories (those with an entry in ``mappings``) find their
    counterpart through the :class:`ClassMapping`; every other category looks the
    reference name up directly in the case-folded target index.
    """

    def __init__(
        self,
        tables: MethodTableSet,
        mappings: Optional[Mapping[str, ClassMapping]] = None,
    ) -> None:
        self.tables = tables
        self.mappings: Dict[str, ClassMapping] = dict(mappings or {})

    def analyze(self, reference: Iterable[ClassMethods], target: TargetIndex) -> AnalysisResult:
        records: List[ClassTracking] = []
        for record in reference:
            tracking = self.track(record, target)
            if tracking is not None:
                records.append(tracking)
        records.sort(key=lambda item: (item.class_name, item.class_type))
        _logger.debug("Scored %d reference classes", len(records))
        return AnalysisResult(classes=records)

    def track(self, record: ClassMethods, target: TargetIndex) -> Optional[ClassTracking]:
        """Return the coverage record for ``record``, or None when it is out of scope."""
        if not record.is_real_class or not record.methods:
            return None
        table = self.tables.for_category(record.class_type)
        if table is None:
            return None
        tracked = [method for method in dict.fromkeys(record.methods) if table.tracks(method)]
        if not tracked:
            return None

        available = self._target_methods(record, target)
        return ClassTracking(
            class_name=record.class_name,
            class_type=record.class_type,
            methods=[
                MethodTracking(method_name=method, status=_status(table, method, available))
                for method in tracked
            ],
        )

    def _target_methods(self, record: ClassMethods, target: TargetIndex) -> FrozenSet[str]:
        mapping = self.mappings.get(record.class_type)
        if mapping is None:
            return target.methods_for(record.class_name)
        counterpart = mapping.resolve(record.class_name)
        if counterpart is None:
            _logger.debug("No registry mapping for %s %s", record.class_type, record.class_name)
        return target.methods_for(counterpart)


def _status(
    table: MethodEquivalenceTable, method: str, available: FrozenSet[str]
) -> ImplementationStatus:
    entry = table.target_for(method)
    if isinstance(entry, Mapped) and entry.name in available:
        return ImplementationStatus.IMPLEMENTED
    return ImplementationStatus.NOT_IMPLEMENTED


def summarize(result: AnalysisResult) -> List[CategorySummary]:
    """Group records by category, summing counts before computing the ratio."""
    summaries: Dict[str, CategorySummary] = {}
    for record in result.classes:
        summary = summaries.setdefault(
            record.class_type,
            CategorySummary(category=record.class_type, classes=0, implemented=0, tracked=0),
        )
        summary.classes += 1
        summary.implemented += record.implemented_count
        summary.tracked += record.tracked_count
    return [summaries[name] for name in ordered_categories(list(summaries))]


__all__ = ["CoverageAnalyzer", "summarize"]
