"""Tests for conflictmap/regions.py – country and subregion lookups."""

import pytest

from conflictmap.regions import (
    COUNTRY_REGIONS,
    REGION_GROUPS,
    country_to_region,
    parent_region,
    region_for_countries,
    region_groups,
)


def test_known_country():
    assert country_to_region("Mali") == "West Africa"
    assert country_to_region("  Ukraine ") == "Eastern Europe"


@pytest.mark.parametrize("country", ["Atlantis", "", None])
def test_unknown_country_resolves_to_unknown(country):
    assert country_to_region(country) == "Unknown"


def test_parent_region_of_subregion():
    assert parent_region("West Africa") == "Africa"
    assert parent_region("Gulf States") == "Middle East"
    assert parent_region("Caribbean") == "North America"


def test_parent_region_identity_for_top_level_and_unknown():
    assert parent_region("Africa") == "Africa"
    assert parent_region("Middle East") == "Middle East"
    assert parent_region("Narnia") == "Narnia"
    assert parent_region(None) == "Unknown"


@pytest.mark.parametrize("value", sorted(set(COUNTRY_REGIONS.values()) | set(REGION_GROUPS) | {"Narnia", "Unknown"}))
def test_parent_region_is_idempotent(value):
    once = parent_region(value)
    assert parent_region(once) == once


def test_every_country_region_has_a_top_level_parent():
    for region in COUNTRY_REGIONS.values():
        assert parent_region(region) in REGION_GROUPS


def test_region_for_countries_first_match_wins():
    assert region_for_countries(["Atlantis", "Haiti", "Mali"]) == "Caribbean"
    assert region_for_countries([]) == "Unknown"


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        COUNTRY_REGIONS["Atlantis"] = "Nowhere"


def test_region_groups_returns_a_copy():
    groups = region_groups()
    groups["Africa"].append("Atlantis")
    assert "Atlantis" not in REGION_GROUPS["Africa"]
