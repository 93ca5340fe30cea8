"""
Marker styling
==============

How a conflict point looks on the map: its radius grows with casualties
(square-root scale, clamped) and its fill color follows intensity.
"""

from __future__ import annotations
from typing import Dict
import math

MIN_RADIUS = 6.0
MAX_RADIUS = 18.0
# casualties per unit of squared radius
_RADIUS_DIVISOR = 800.0

INTENSITY_COLORS: Dict[str, str] = {
    "high": "#FF5A5F",
    "moderate": "#FFC857",
    "minor": "#54DEFD",
    "unknown": "#8675A9",
}

def marker_radius(casualties) -> float:
    """Point radius for a casualty count (MIN_RADIUS when missing)."""
    if casualties is None or isinstance(casualties, bool):
        return MIN_RADIUS
    try:
        v = float(casualties)
    except (TypeError, ValueError):
        return MIN_RADIUS
    if math.isnan(v) or v <= 0:
        return MIN_RADIUS
    return max(MIN_RADIUS, min(MAX_RADIUS, math.sqrt(v / _RADIUS_DIVISOR)))

def intensity_color(intensity) -> str:
    return INTENSITY_COLORS.get(intensity or "unknown", INTENSITY_COLORS["unknown"])
