"""Tests for conflictmap/markers.py – marker radius and intensity colors."""

import pytest

from conflictmap.markers import INTENSITY_COLORS, intensity_color, marker_radius


@pytest.mark.parametrize("casualties, radius", [
    (None, 6.0),
    (0, 6.0),
    (float("nan"), 6.0),
    ("n/a", 6.0),
    (1000, 6.0),
    (80000, 10.0),
    (10_000_000, 18.0),
])
def test_marker_radius(casualties, radius):
    assert marker_radius(casualties) == pytest.approx(radius)


def test_intensity_color():
    assert intensity_color("high") == "#FF5A5F"
    assert intensity_color("minor") == "#54DEFD"
    assert intensity_color("catastrophic") == INTENSITY_COLORS["unknown"]
    assert intensity_color(None) == INTENSITY_COLORS["unknown"]
