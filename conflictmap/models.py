"""
Data model (conflicts and country metrics)
==========================================

Three kinds of records flow through the engine:

- `ConflictDefinition`: one entry of the static catalog (what the conflict is).
- `CountryMetricRow`: one row of the country metric table (how bad it is, per country).
- `ConflictRecord`: the aggregated view the map consumes (one per definition).

Everything is immutable (`frozen=True`) so that:
- records cannot be accidentally modified after a data load, and
- enhancement/filtering build new lists instead of editing data.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional, Tuple, Union

Number = Union[int, float]

@dataclass(frozen=True)
class Location:
    lat: float
    lng: float

    def is_valid(self) -> bool:
        """True when both coordinates are inside the usual lat/lng ranges."""
        return -90.0 <= self.lat <= 90.0 and -180.0 <= self.lng <= 180.0

@dataclass(frozen=True)
class ConflictDefinition:
    """One catalog entry: a conflict and the countries it spans."""
    id: str
    name: str
    countries: Tuple[str, ...]
    description: str
    primary_actors: Tuple[str, ...]
    # ISO date string, e.g. "2022-02-24"
    start_date: str
    location: Location
    type: str
    background: str = ""

@dataclass(frozen=True)
class CountryMetricRow:
    """Immutable record for one row of the country metric table."""
    country: str
    deadliness: int = 0
    danger: int = 0
    fragmentation: int = 0
    diffusion: float = 0.0

@dataclass(frozen=True)
class ConflictMetrics:
    deadliness: int
    diffusion: float
    danger: int
    fragmentation: int
    # True when no country row matched and the values are type defaults
    estimated: bool

@dataclass(frozen=True)
class ConflictRecord:
    """One conflict as the map sees it.

    `intensity`, `duration`, `region` and `casualties` can be missing on
    records that did not come out of the aggregator; the category enhancer
    fills them in.
    """
    id: str
    name: str
    type: str
    location: Optional[Location]
    start_date: Optional[str]
    description: str = ""
    actors: Tuple[str, ...] = ()
    background: str = ""
    countries: Tuple[str, ...] = ()
    metrics: Optional[ConflictMetrics] = None
    casualties: Optional[Number] = None
    intensity: Optional[str] = None
    duration: Optional[str] = None
    region: Optional[str] = None

    def start_date_value(self) -> Optional[date]:
        """Parsed start date, or None when missing/unparseable."""
        return parse_start_date(self.start_date)

@dataclass(frozen=True)
class EnhancedConflict(ConflictRecord):
    """A ConflictRecord plus display-only derived fields."""
    parent_region: str = "Unknown"
    type_label: str = "Unknown"
    intensity_label: str = "Unknown"
    duration_label: str = "Unknown"

@dataclass(frozen=True)
class TimelineEntry:
    id: str
    name: str
    start_date: str
    type: str
    intensity: Optional[str]
    region: Optional[str]

@dataclass(frozen=True)
class ConflictStatistics:
    total_conflicts: int = 0
    type_distribution: Dict[str, int] = field(default_factory=dict)
    intensity_distribution: Dict[str, int] = field(default_factory=dict)
    region_distribution: Dict[str, int] = field(default_factory=dict)
    total_casualties: Number = 0
    average_casualties: int = 0

def parse_start_date(value) -> Optional[date]:
    """Parse an ISO date ("YYYY-MM-DD", optionally with a time part).

    Returns None for missing or unparseable values.
    """
    if value is None:
        return None
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None
