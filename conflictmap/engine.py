"""
Filter engine, statistics and timeline
======================================

Everything the presentation layer asks of a loaded dataset:

1) Filter conflict records by type / intensity / duration / region
2) Summarise a list of records (counts per category, casualty totals)
3) Order records on a timeline by start date
4) Export the current selection (CSV / JSON)

Filter state is an explicit `FilterCriteria` value owned by the caller.
`ConflictMapSession` wraps one for interactive use and keeps undo/redo
stacks of earlier criteria.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
import csv
import json
import math
from .categories import enhance_conflict_data
from .dsa import merge_sort
from .models import ConflictRecord, ConflictStatistics, TimelineEntry

ALL = "all"

FILTER_DIMENSIONS = ("type", "intensity", "duration", "region")

@dataclass(frozen=True)
class FilterCriteria:
    """One value per filter dimension; "all" means no constraint."""
    type: str = ALL
    intensity: str = ALL
    duration: str = ALL
    region: str = ALL

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "FilterCriteria":
        """Build criteria from a dict; unknown keys are ignored."""
        known = {k: str(v) for k, v in values.items() if k in FILTER_DIMENSIONS and v}
        return cls(**known)

    def update(self, **changes: Optional[str]) -> "FilterCriteria":
        """Return new criteria with the given dimensions changed.

        Empty values leave a dimension as it is; unknown keys are ignored.
        """
        known = {k: v for k, v in changes.items() if k in FILTER_DIMENSIONS and v}
        return replace(self, **known)

    def is_unfiltered(self) -> bool:
        return all(getattr(self, d) == ALL for d in FILTER_DIMENSIONS)

CriteriaLike = Union[FilterCriteria, Mapping[str, Any]]

def _as_criteria(criteria: Optional[CriteriaLike]) -> FilterCriteria:
    if criteria is None:
        return FilterCriteria()
    if isinstance(criteria, FilterCriteria):
        return criteria
    return FilterCriteria.from_mapping(criteria)

def matches(conflict: ConflictRecord, criteria: FilterCriteria) -> bool:
    """True when `conflict` passes every non-"all" criterion."""
    if criteria.type != ALL and conflict.type != criteria.type:
        return False
    if criteria.intensity != ALL and conflict.intensity != criteria.intensity:
        return False
    if criteria.duration != ALL and conflict.duration != criteria.duration:
        return False
    if criteria.region != ALL and conflict.region != criteria.region:
        # a subregion matches its top-level region ("West Africa" -> "Africa")
        if enhance_conflict_data(conflict).parent_region != criteria.region:
            return False
    return True

def apply_filters(conflicts: Sequence[ConflictRecord], criteria: Optional[CriteriaLike]) -> List[ConflictRecord]:
    """Return the records passing `criteria`, in input order."""
    c = _as_criteria(criteria)
    if c.is_unfiltered():
        return list(conflicts)
    return [x for x in conflicts if matches(x, c)]

# ---------------- Grouping / statistics ----------------
def group_conflicts(conflicts: Optional[Sequence[ConflictRecord]], group_by: str) -> Dict[str, List[ConflictRecord]]:
    """Group records by a field value; empty values go under "unknown"."""
    if not conflicts:
        return {}
    grouped: Dict[str, List[ConflictRecord]] = {}
    for c in conflicts:
        key = getattr(c, group_by, None) or "unknown"
        grouped.setdefault(key, []).append(c)
    return grouped

def _distribution(conflicts: Sequence[ConflictRecord], group_by: str) -> Dict[str, int]:
    return {k: len(v) for k, v in group_conflicts(conflicts, group_by).items()}

def _casualty_value(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return None if math.isnan(value) else value
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(v) else v

def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))

def calculate_statistics(conflicts: Optional[Sequence[ConflictRecord]]) -> ConflictStatistics:
    """Counts per type/intensity/region plus casualty totals.

    Non-numeric casualties are left out of both the total and the average.
    """
    if not conflicts:
        return ConflictStatistics()

    casualties = [v for v in (_casualty_value(c.casualties) for c in conflicts) if v is not None]
    total = sum(casualties)
    average = _round_half_up(total / len(casualties)) if casualties else 0

    return ConflictStatistics(
        total_conflicts=len(conflicts),
        type_distribution=_distribution(conflicts, "type"),
        intensity_distribution=_distribution(conflicts, "intensity"),
        region_distribution=_distribution(conflicts, "region"),
        total_casualties=total,
        average_casualties=average,
    )

def statistics_to_dict(stats: ConflictStatistics) -> Dict[str, Any]:
    return asdict(stats)

# ---------------- Timeline ----------------
def create_timeline_data(conflicts: Optional[Sequence[ConflictRecord]]) -> List[TimelineEntry]:
    """Records with a parseable start date, oldest first.

    Merge sort is stable, so records sharing a date keep their input order.
    """
    if not conflicts:
        return []
    dated = [(c.start_date_value(), c) for c in conflicts]
    dated = [(d, c) for d, c in dated if d is not None]
    ordered = merge_sort(dated, key=lambda pair: pair[0])
    return [
        TimelineEntry(
            id=c.id,
            name=c.name,
            start_date=c.start_date,
            type=c.type,
            intensity=c.intensity,
            region=c.region,
        )
        for _, c in ordered
    ]

# ---------------- Export ----------------
_EXPORT_COLUMNS = [
    "id", "name", "type", "intensity", "duration", "region", "start_date",
    "lat", "lng", "casualties", "deadliness", "danger", "fragmentation",
    "diffusion", "estimated", "countries",
]

def _export_row(c: ConflictRecord) -> Dict[str, Any]:
    m = c.metrics
    return {
        "id": c.id,
        "name": c.name,
        "type": c.type,
        "intensity": c.intensity,
        "duration": c.duration,
        "region": c.region,
        "start_date": c.start_date,
        "lat": c.location.lat if c.location else None,
        "lng": c.location.lng if c.location else None,
        "casualties": c.casualties,
        "deadliness": m.deadliness if m else None,
        "danger": m.danger if m else None,
        "fragmentation": m.fragmentation if m else None,
        "diffusion": m.diffusion if m else None,
        "estimated": m.estimated if m else None,
        "countries": list(c.countries),
    }

def export_csv(conflicts: Sequence[ConflictRecord], path: str) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=_EXPORT_COLUMNS)
        w.writeheader()
        for c in conflicts:
            row = _export_row(c)
            row["countries"] = "; ".join(row["countries"])
            w.writerow(row)

def export_json(conflicts: Sequence[ConflictRecord], path: str) -> None:
    """Export records to a JSON array.

    CSV is great for spreadsheets; JSON keeps field names and lists intact.
    """
    payload = [_export_row(c) for c in conflicts]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)

# ---------------- Interactive session ----------------
@dataclass
class ConflictMapSession:
    """A loaded dataset plus the current filter criteria.

    Filters only replace `criteria`; `conflicts` is never edited. Undo/redo
    keep snapshots of earlier criteria.
    """
    conflicts: List[ConflictRecord]
    source: Optional[str] = None
    criteria: FilterCriteria = field(default_factory=FilterCriteria)
    # Stores CLI commands (for reproducibility in reports)
    command_log: List[str] = field(default_factory=list)

    _undo: List[FilterCriteria] = field(default_factory=list, init=False)
    _redo: List[FilterCriteria] = field(default_factory=list, init=False)

    # ---------------- History (Stacks) ----------------
    def _push_history(self) -> None:
        self._undo.append(self.criteria)
        self._redo.clear()

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self.criteria)
        self.criteria = self._undo.pop()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self.criteria)
        self.criteria = self._redo.pop()
        return True

    # ---------------- Filters ----------------
    def set_filters(self, **changes: Optional[str]) -> FilterCriteria:
        self._push_history()
        self.criteria = self.criteria.update(**changes)
        return self.criteria

    def reset(self) -> FilterCriteria:
        """Reset all dimensions to "all"."""
        self._push_history()
        self.criteria = FilterCriteria()
        return self.criteria

    def filtered(self) -> List[ConflictRecord]:
        return apply_filters(self.conflicts, self.criteria)

    def values(self, dimension: str) -> List[str]:
        """Distinct values of a filter dimension across the whole dataset."""
        if dimension not in FILTER_DIMENSIONS:
            raise ValueError(f"dimension must be one of: {', '.join(FILTER_DIMENSIONS)}")
        return sorted({getattr(c, dimension) for c in self.conflicts if getattr(c, dimension)})

def criteria_to_dict(criteria: FilterCriteria) -> Dict[str, str]:
    return {f.name: getattr(criteria, f.name) for f in fields(criteria)}
