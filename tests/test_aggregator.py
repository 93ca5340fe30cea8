"""Tests for conflictmap/aggregator.py – grouping country rows into conflicts."""

import json
import logging

import pytest

from conftest import make_definition
from conflictmap.aggregator import (
    aggregate_conflict_metrics,
    default_metrics,
    derive_intensity,
    load_and_group_conflict_data,
)
from conflictmap.catalog import CONFLICT_DEFINITIONS
from conflictmap.models import ConflictMetrics, CountryMetricRow


# ---------- estimated metrics ----------

def test_insurgency_without_rows_gets_estimated_defaults():
    catalog = [make_definition("x", ["A"], type="insurgency")]
    [rec] = aggregate_conflict_metrics(catalog, [])
    assert rec.metrics == ConflictMetrics(deadliness=3000, diffusion=0.03, danger=1500,
                                          fragmentation=15, estimated=True)
    assert rec.intensity == "high"
    assert rec.casualties == 3000


@pytest.mark.parametrize("ctype, expected", [
    ("interstate", (5000, 1000, 20, 0.05)),
    ("territorial", (5000, 1000, 20, 0.05)),
    ("insurgency", (3000, 1500, 15, 0.03)),
    ("civil war", (1000, 500, 10, 0.02)),
    ("criminal violence", (1000, 500, 10, 0.02)),
])
def test_default_metrics_by_type(ctype, expected):
    m = default_metrics(ctype)
    assert (m.deadliness, m.danger, m.fragmentation, m.diffusion) == expected
    assert m.estimated is True


@pytest.mark.parametrize("ctype, intensity", [
    ("interstate", "high"),
    ("civil war", "high"),
    ("territorial", "high"),
    ("insurgency", "high"),
    ("criminal violence", "moderate"),
])
def test_intensity_without_rows(ctype, intensity):
    [rec] = aggregate_conflict_metrics([make_definition("x", ["A"], type=ctype)], [])
    assert rec.intensity == intensity


def test_unmatched_conflict_keeps_catalog_countries():
    catalog = [make_definition("sahel", ["Mali", "Niger"])]
    [rec] = aggregate_conflict_metrics(catalog, [CountryMetricRow("France", deadliness=10)])
    assert rec.countries == ("Mali", "Niger")
    assert rec.metrics.estimated is True
    assert rec.region == "West Africa"


# ---------- real metrics ----------

def test_sum_and_max_across_countries():
    catalog = [make_definition("y", ["A", "B"])]
    rows = [
        CountryMetricRow("A", deadliness=100, diffusion=0.1),
        CountryMetricRow("B", deadliness=50, diffusion=0.3),
    ]
    [rec] = aggregate_conflict_metrics(catalog, rows)
    assert rec.metrics.deadliness == 150
    assert rec.metrics.diffusion == pytest.approx(0.3)
    assert rec.metrics.estimated is False
    assert rec.casualties == 150


def test_danger_and_fragmentation_sum():
    catalog = [make_definition("y", ["A", "B"])]
    rows = [
        CountryMetricRow("A", danger=7, fragmentation=3),
        CountryMetricRow("B", danger=5, fragmentation=4),
    ]
    [rec] = aggregate_conflict_metrics(catalog, rows)
    assert rec.metrics.danger == 12
    assert rec.metrics.fragmentation == 7


def test_shared_country_contributes_fully_to_both_conflicts():
    catalog = [
        make_definition("afghanistan", ["Afghanistan", "Pakistan"]),
        make_definition("pakistan", ["Pakistan"]),
    ]
    rows = [CountryMetricRow("Pakistan", deadliness=2000, danger=300, fragmentation=9, diffusion=0.2)]
    afg, pak = aggregate_conflict_metrics(catalog, rows)
    for rec in (afg, pak):
        assert rec.metrics.deadliness == 2000
        assert rec.metrics.danger == 300
        assert rec.metrics.fragmentation == 9
        assert rec.metrics.diffusion == pytest.approx(0.2)
        assert rec.countries == ("Pakistan",)


def test_contributing_countries_listed_once_in_row_order():
    catalog = [make_definition("y", ["A", "B", "C"])]
    rows = [CountryMetricRow("B", deadliness=1), CountryMetricRow("A", deadliness=1),
            CountryMetricRow("B", deadliness=1)]
    [rec] = aggregate_conflict_metrics(catalog, rows)
    assert rec.countries == ("B", "A")
    assert rec.metrics.deadliness == 3


@pytest.mark.parametrize("deadliness, intensity", [
    (20001, "high"),
    (20000, "moderate"),
    (1000, "moderate"),
    (999, "minor"),
    (0, "minor"),
])
def test_intensity_thresholds_with_rows(deadliness, intensity):
    # civil war with real rows does not get the "high" override
    catalog = [make_definition("y", ["A"], type="civil war")]
    [rec] = aggregate_conflict_metrics(catalog, [CountryMetricRow("A", deadliness=deadliness)])
    assert rec.intensity == intensity


def test_derive_intensity_override_only_applies_to_estimated():
    real = ConflictMetrics(deadliness=10, diffusion=0.0, danger=0, fragmentation=0, estimated=False)
    assert derive_intensity(real, "interstate") == "minor"
    assert derive_intensity(default_metrics("interstate"), "interstate") == "high"


def test_region_comes_from_first_mapped_country():
    catalog = [make_definition("y", ["Atlantis", "Mali", "Ukraine"])]
    rows = [CountryMetricRow("Atlantis", deadliness=1), CountryMetricRow("Ukraine", deadliness=1)]
    [rec] = aggregate_conflict_metrics(catalog, rows)
    assert rec.region == "Eastern Europe"


def test_region_unknown_when_no_country_maps():
    [rec] = aggregate_conflict_metrics([make_definition("y", ["Atlantis"])], [])
    assert rec.region == "Unknown"


def test_output_keeps_catalog_order_and_fields():
    catalog = [make_definition("b", ["B"]), make_definition("a", ["A"])]
    records = aggregate_conflict_metrics(catalog, [CountryMetricRow("A", deadliness=5)])
    assert [r.id for r in records] == ["b", "a"]
    assert all(r.duration == "ongoing" for r in records)
    assert records[1].actors == ("Government", "Rebels")
    assert records[1].location == catalog[1].location


def test_aggregation_is_deterministic():
    rows = [CountryMetricRow("Mali", deadliness=400, diffusion=0.2),
            CountryMetricRow("Pakistan", deadliness=900, diffusion=0.1)]
    first = aggregate_conflict_metrics(CONFLICT_DEFINITIONS, rows)
    second = aggregate_conflict_metrics(CONFLICT_DEFINITIONS, rows)
    assert first == second
    assert len(first) == len(CONFLICT_DEFINITIONS)


# ---------- load_and_group_conflict_data ----------

def test_load_and_group_from_csv(tmp_path):
    src = tmp_path / "ConflictData.csv"
    src.write_text(
        "country,deadliness,danger,fragmentation,diffusion\n"
        "Mali,1200,300,12,0.15\n"
        "Niger,800,200,8,0.4\n"
        "Atlantis,999,1,1,0.9\n",
        encoding="utf-8",
    )
    records = load_and_group_conflict_data(str(src))
    sahel = next(r for r in records if r.id == "sahel-insurgency")
    assert sahel.metrics.deadliness == 2000
    assert sahel.metrics.diffusion == pytest.approx(0.4)
    assert sahel.metrics.estimated is False
    assert sahel.countries == ("Mali", "Niger")
    assert sahel.intensity == "moderate"

    ukraine = next(r for r in records if r.id == "ukraine-russia")
    assert ukraine.metrics.estimated is True
    assert ukraine.intensity == "high"


def test_malformed_values_do_not_break_aggregation(tmp_path):
    src = tmp_path / "data.csv"
    src.write_text(
        "country,deadliness,danger,fragmentation,diffusion\n"
        "Somalia,abc,10,,n/a\n"
        "Somalia,500,5,2,0.25\n",
        encoding="utf-8",
    )
    records = load_and_group_conflict_data(str(src))
    somalia = next(r for r in records if r.id == "somalia-insurgency")
    assert somalia.metrics.deadliness == 500
    assert somalia.metrics.danger == 15
    assert somalia.metrics.fragmentation == 2
    assert somalia.metrics.diffusion == pytest.approx(0.25)


def test_list_valued_json_cells_do_not_break_aggregation(tmp_path):
    src = tmp_path / "data.json"
    src.write_text(json.dumps([
        {"country": "Somalia", "deadliness": [1, 2], "danger": 1, "fragmentation": 1, "diffusion": 0.1},
        {"country": "Mali", "deadliness": 500, "danger": 1, "fragmentation": 1, "diffusion": 0.1},
    ]), encoding="utf-8")
    records = load_and_group_conflict_data(str(src))
    assert len(records) == 20
    somalia = next(r for r in records if r.id == "somalia-insurgency")
    sahel = next(r for r in records if r.id == "sahel-insurgency")
    assert somalia.metrics.deadliness == 0
    assert not somalia.metrics.estimated
    assert sahel.metrics.deadliness == 500


def test_missing_source_returns_empty_list_and_logs(tmp_path, caplog):
    with caplog.at_level(logging.ERROR, logger="conflictmap.aggregator"):
        records = load_and_group_conflict_data(str(tmp_path / "missing.csv"))
    assert records == []
    assert "Error loading conflict data" in caplog.text


def test_custom_catalog(tmp_path):
    src = tmp_path / "data.csv"
    src.write_text("country,deadliness,danger,fragmentation,diffusion\nA,25000,1,1,0.5\n", encoding="utf-8")
    catalog = [make_definition("only", ["A"], type="territorial")]
    [rec] = load_and_group_conflict_data(str(src), catalog=catalog)
    assert rec.id == "only"
    assert rec.intensity == "high"
