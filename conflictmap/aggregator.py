"""
Metrics aggregator (country rows -> conflict records)
=====================================================

This is the heart of the project. One pass over the metric rows:

1) Build the country index (country -> conflict ids) from the catalog
2) Start one accumulator per conflict at zero
3) Fold each row into every conflict its country belongs to
   (deadliness/danger/fragmentation sum, diffusion takes the maximum)
4) Conflicts that received no rows get type-based estimated metrics
5) Derive intensity and region, and emit one ConflictRecord per catalog entry

Unmapped countries are dropped silently. The output keeps catalog order.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence
import logging
from .catalog import CONFLICT_DEFINITIONS
from .indices import build_country_index
from .loader import FetchError, load_country_metrics, validate_conflict_records
from .models import ConflictDefinition, ConflictMetrics, ConflictRecord, CountryMetricRow
from .regions import region_for_countries

logger = logging.getLogger(__name__)

# (deadliness, danger, fragmentation, diffusion) used when no row matched
_DEFAULTS_BY_TYPE = {
    "interstate": (5000, 1000, 20, 0.05),
    "territorial": (5000, 1000, 20, 0.05),
    "insurgency": (3000, 1500, 15, 0.03),
}
_DEFAULTS_OTHER = (1000, 500, 10, 0.02)

# Thresholds on summed deadliness when real rows matched
HIGH_DEADLINESS = 20000
MINOR_DEADLINESS = 1000

# Thresholds on the estimated deadliness when nothing matched
ESTIMATED_HIGH_DEADLINESS = 3000
ESTIMATED_MINOR_DEADLINESS = 1000

# Types that are always "high" when their metrics are estimated
_HIGH_WHEN_ESTIMATED = ("interstate", "civil war")

DEFAULT_DURATION = "ongoing"

@dataclass
class _Accumulator:
    deadliness: int = 0
    danger: int = 0
    fragmentation: int = 0
    diffusion: float = 0.0
    countries: List[str] = field(default_factory=list)
    has_metrics: bool = False

    def add(self, row: CountryMetricRow) -> None:
        self.deadliness += row.deadliness
        self.danger += row.danger
        self.fragmentation += row.fragmentation
        self.diffusion = max(self.diffusion, row.diffusion)
        if row.country not in self.countries:
            self.countries.append(row.country)
        self.has_metrics = True

def default_metrics(conflict_type: str) -> ConflictMetrics:
    """Estimated metrics for a conflict type (used when no rows matched)."""
    deadliness, danger, fragmentation, diffusion = _DEFAULTS_BY_TYPE.get(conflict_type, _DEFAULTS_OTHER)
    return ConflictMetrics(
        deadliness=deadliness,
        diffusion=diffusion,
        danger=danger,
        fragmentation=fragmentation,
        estimated=True,
    )

def derive_intensity(metrics: ConflictMetrics, conflict_type: str) -> str:
    """Intensity from aggregated metrics.

    With real data it is a pure deadliness threshold. With estimated data,
    interstate wars and civil wars are always "high"; other types threshold
    the estimated deadliness.
    """
    if not metrics.estimated:
        if metrics.deadliness > HIGH_DEADLINESS:
            return "high"
        if metrics.deadliness < MINOR_DEADLINESS:
            return "minor"
        return "moderate"

    if conflict_type in _HIGH_WHEN_ESTIMATED:
        return "high"
    if metrics.deadliness >= ESTIMATED_HIGH_DEADLINESS:
        return "high"
    if metrics.deadliness < ESTIMATED_MINOR_DEADLINESS:
        return "minor"
    return "moderate"

def aggregate_conflict_metrics(
    catalog: Sequence[ConflictDefinition],
    rows: Iterable[CountryMetricRow],
) -> List[ConflictRecord]:
    """Group country metric rows into one ConflictRecord per catalog entry."""
    idx = build_country_index(catalog)
    acc: Dict[str, _Accumulator] = {d.id: _Accumulator() for d in catalog}

    skipped = 0
    for row in rows:
        ids = idx.conflicts_for(row.country)
        if not ids:
            skipped += 1
            continue
        for cid in ids:
            acc[cid].add(row)
    if skipped:
        logger.debug("%d metric rows did not map to any conflict", skipped)

    return [_build_record(d, acc[d.id]) for d in catalog]

def _build_record(d: ConflictDefinition, a: _Accumulator) -> ConflictRecord:
    if a.has_metrics:
        metrics = ConflictMetrics(
            deadliness=a.deadliness,
            diffusion=a.diffusion,
            danger=a.danger,
            fragmentation=a.fragmentation,
            estimated=False,
        )
    else:
        metrics = default_metrics(d.type)

    countries = tuple(a.countries) if a.countries else d.countries
    return ConflictRecord(
        id=d.id,
        name=d.name,
        type=d.type,
        location=d.location,
        start_date=d.start_date,
        description=d.description,
        actors=d.primary_actors,
        background=d.background,
        countries=countries,
        metrics=metrics,
        casualties=metrics.deadliness,
        intensity=derive_intensity(metrics, d.type),
        duration=DEFAULT_DURATION,
        region=region_for_countries(countries),
    )

def load_and_group_conflict_data(
    source: str,
    catalog: Optional[Sequence[ConflictDefinition]] = None,
) -> List[ConflictRecord]:
    """Load the metric source and aggregate it into conflict records.

    A source that cannot be fetched or parsed is logged and yields an empty
    list; it never raises to the caller.
    """
    catalog = CONFLICT_DEFINITIONS if catalog is None else catalog
    try:
        rows = load_country_metrics(source)
    except FetchError as e:
        logger.error("Error loading conflict data: %s", e)
        return []

    records = aggregate_conflict_metrics(catalog, rows)
    estimated = sum(1 for r in records if r.metrics is not None and r.metrics.estimated)
    logger.info("Grouped %d metric rows into %d conflicts (%d estimated)", len(rows), len(records), estimated)
    return list(validate_conflict_records(records))
