"""
Category enhancer
=================

Derives display categories for a conflict record:

- intensity from casualties (minor / moderate / high / unknown)
- duration from the start date (recent / ongoing / protracted / unknown)
- parent region from the (sub)region
- human-readable labels for type, intensity and duration

`enhance_conflict_data` never edits its input; it returns a new
`EnhancedConflict` and only fills fields that are missing.
"""

from __future__ import annotations
from dataclasses import fields
from datetime import date
from typing import Dict, List, Optional, Sequence
import math
from .models import ConflictRecord, EnhancedConflict, parse_start_date
from .regions import parent_region, region_for_countries, region_groups

_CONFLICT_TYPES: Dict[str, str] = {
    "civil war": "Civil War",
    "insurgency": "Insurgency",
    "interstate": "Interstate Conflict",
    "territorial": "Territorial Dispute",
    "criminal violence": "Criminal Violence",
    "ethnic conflict": "Ethnic Conflict",
    "religious conflict": "Religious Conflict",
}

# upper bound (exclusive) on casualties; None = no upper bound
_INTENSITY_LEVELS: Dict[str, Dict] = {
    "minor": {"label": "Minor", "threshold_casualties": 1000},
    "moderate": {"label": "Moderate", "threshold_casualties": 10000},
    "high": {"label": "High", "threshold_casualties": None},
}

# upper bound (exclusive) in years since start; None = no upper bound
_DURATION_CATEGORIES: Dict[str, Dict] = {
    "recent": {"label": "Recent", "max_years": 3},
    "ongoing": {"label": "Ongoing", "max_years": 10},
    "protracted": {"label": "Protracted", "max_years": None},
}

_DAYS_PER_YEAR = 365.25

def _as_number(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(v) else v

def categorize_intensity(casualties) -> str:
    v = _as_number(casualties)
    if v is None:
        return "unknown"
    if v < _INTENSITY_LEVELS["minor"]["threshold_casualties"]:
        return "minor"
    if v < _INTENSITY_LEVELS["moderate"]["threshold_casualties"]:
        return "moderate"
    return "high"

def categorize_duration(start_date, today: Optional[date] = None) -> str:
    start = parse_start_date(start_date)
    if start is None:
        return "unknown"
    today = today or date.today()
    years = (today - start).days / _DAYS_PER_YEAR
    if years < _DURATION_CATEGORIES["recent"]["max_years"]:
        return "recent"
    if years < _DURATION_CATEGORIES["ongoing"]["max_years"]:
        return "ongoing"
    return "protracted"

def get_conflict_type_label(conflict_type: Optional[str]) -> str:
    return _CONFLICT_TYPES.get(conflict_type or "", "Unknown")

def get_intensity_label(intensity: Optional[str]) -> str:
    level = _INTENSITY_LEVELS.get(intensity or "")
    return level["label"] if level else "Unknown"

def get_duration_label(duration: Optional[str]) -> str:
    cat = _DURATION_CATEGORIES.get(duration or "")
    return cat["label"] if cat else "Unknown"

def enhance_conflict_data(conflict: ConflictRecord, today: Optional[date] = None) -> EnhancedConflict:
    """Return an enhanced copy of `conflict`.

    Missing intensity/duration/region are derived; present values are kept. The
    parent region is always recomputed from `region`.
    """
    base = {f.name: getattr(conflict, f.name) for f in fields(ConflictRecord)}
    intensity = base["intensity"] or categorize_intensity(base["casualties"])
    duration = base["duration"] or categorize_duration(base["start_date"], today=today)
    region = base["region"] or (region_for_countries(base["countries"]) if base["countries"] else None)
    base.update(intensity=intensity, duration=duration, region=region)
    return EnhancedConflict(
        **base,
        parent_region=parent_region(base["region"]),
        type_label=get_conflict_type_label(base["type"]),
        intensity_label=get_intensity_label(intensity),
        duration_label=get_duration_label(duration),
    )

def enhance_all_conflicts(conflicts: Optional[Sequence[ConflictRecord]], today: Optional[date] = None) -> List[EnhancedConflict]:
    if not conflicts:
        return []
    return [enhance_conflict_data(c, today=today) for c in conflicts]

# ---------------- Category tables (copies) ----------------
def get_all_conflict_types() -> Dict[str, str]:
    return dict(_CONFLICT_TYPES)

def get_all_intensity_levels() -> Dict[str, Dict]:
    return {k: dict(v) for k, v in _INTENSITY_LEVELS.items()}

def get_all_duration_categories() -> Dict[str, Dict]:
    return {k: dict(v) for k, v in _DURATION_CATEGORIES.items()}

def get_all_region_groups() -> Dict[str, list]:
    return region_groups()
