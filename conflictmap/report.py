from __future__ import annotations

"""
Conflict map report generator
-----------------------------
This module generates a DOCX report from a list of ConflictRecord objects.

Design goals:
- Keep the engine usable even if report dependencies are missing (lazy imports).
- Draw the same picture the web map shows: every conflict is a point at its
  location, sized by casualties and colored by intensity.
- Only add a category chart when it has more than one bar to compare.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import math
import os
import tempfile

from .engine import FilterCriteria, calculate_statistics, create_timeline_data
from .markers import INTENSITY_COLORS, intensity_color, marker_radius
from .models import ConflictRecord

logger = logging.getLogger(__name__)


# -----------------------------
# Configuration / citation types
# -----------------------------

@dataclass
class DatasetCitation:
    """Minimal metric source citation metadata for the DOCX report."""
    database_name: str = "ACLED Conflict Index"
    institutional_author: str = "Armed Conflict Location & Event Data (ACLED)"
    website: str = "https://acleddata.com"
    source_name: Optional[str] = None


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Global Conflict Map Report"
    subtitle: str = "Conflict-level aggregation of country metrics"
    citation: DatasetCitation = field(default_factory=DatasetCitation)

    # How many conflicts to show in the casualty chart
    top_n: int = 10

    # Criteria that produced the selection (shown in the report header)
    criteria: Optional[FilterCriteria] = None

    # Optional: list of CLI commands used to create the current selection
    command_log: Optional[List[str]] = None


def _distribution_items(dist: Dict[str, int]) -> List[Tuple[str, int]]:
    """Largest categories first, ties by name so charts are reproducible."""
    return sorted(dist.items(), key=lambda kv: (-kv[1], kv[0]))


# -----------------------------
# Main entry point used by CLI
# -----------------------------

def generate_docx_report(
    conflicts: Sequence[ConflictRecord],
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
) -> str:
    """
    Generate a DOCX report + charts for a list of conflict records.

    The report describes the in-memory selection only; nothing is written
    back to the metric source.
    """
    config = config or ReportConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
        from matplotlib.lines import Line2D
        import numpy as np
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib (and numpy).\n"
            "Install with: python -m pip install matplotlib numpy"
        ) from e

    if not conflicts:
        raise ValueError("No conflicts to report on (selection is empty).")

    stats = calculate_statistics(conflicts)
    timeline = create_timeline_data(conflicts)
    estimated = [c for c in conflicts if c.metrics is not None and c.metrics.estimated]

    # -----------------------------
    # 1) Charts
    # -----------------------------
    tmpdir = tempfile.mkdtemp(prefix="conflictmap_report_")
    # Each chart is: (title, file_path, caption)
    chart_paths: List[Tuple[str, str, str]] = []

    def _save(filename: str) -> str:
        path = os.path.join(tmpdir, filename)
        plt.tight_layout()
        plt.savefig(path, dpi=200)
        plt.close()
        return path

    def _bar(title: str, items: List[Tuple[str, int]], ylabel: str, caption: str, filename: str) -> None:
        plt.figure()
        plt.bar([k for k, _ in items], [v for _, v in items])
        plt.xticks(rotation=45, ha="right")
        plt.title(title)
        plt.ylabel(ylabel)
        chart_paths.append((title, _save(filename), caption))

    located = [c for c in conflicts if c.location is not None and c.location.is_valid()]
    if located:
        lng = np.array([c.location.lng for c in located])
        lat = np.array([c.location.lat for c in located])
        # scatter sizes are areas in points^2
        sizes = np.array([marker_radius(c.casualties) for c in located]) ** 2
        colors = [intensity_color(c.intensity) for c in located]
        plt.figure(figsize=(10, 5))
        plt.scatter(lng, lat, s=sizes, c=colors, alpha=0.8, edgecolors="black", linewidths=0.5)
        for c in located:
            plt.annotate(c.name, (c.location.lng, c.location.lat), fontsize=5,
                         xytext=(3, 3), textcoords="offset points")
        plt.xlim(-180, 180)
        plt.ylim(-60, 85)
        plt.xlabel("Longitude")
        plt.ylabel("Latitude")
        plt.grid(True, linewidth=0.3)
        handles = [
            Line2D([0], [0], marker="o", linestyle="", markerfacecolor=color,
                   markeredgecolor="black", label=name.capitalize())
            for name, color in INTENSITY_COLORS.items()
        ]
        plt.legend(handles=handles, title="Intensity", loc="lower left", fontsize=6)
        plt.title("Conflict map (equirectangular)")
        chart_paths.append((
            "Conflict map",
            _save("conflict_map.png"),
            "Each point is one conflict; size grows with casualties and color shows intensity."
        ))

    if len(stats.type_distribution) > 1:
        _bar("Conflicts by type", _distribution_items(stats.type_distribution), "Count",
             "Number of conflicts per conflict type.", "bar_types.png")
    if len(stats.intensity_distribution) > 1:
        _bar("Conflicts by intensity", _distribution_items(stats.intensity_distribution), "Count",
             "Number of conflicts per intensity level.", "bar_intensity.png")
    if len(stats.region_distribution) > 1:
        _bar("Conflicts by region", _distribution_items(stats.region_distribution), "Count",
             "Number of conflicts per (sub)region.", "bar_regions.png")

    by_casualties = sorted(
        [c for c in conflicts if isinstance(c.casualties, (int, float)) and math.isfinite(c.casualties)],
        key=lambda c: c.casualties,
        reverse=True,
    )[:config.top_n]
    if len(by_casualties) > 1:
        _bar(f"Top {len(by_casualties)} conflicts by casualties",
             [(c.name, int(c.casualties)) for c in by_casualties], "Casualties",
             "Estimated values are included; see the estimated-metrics section.", "bar_casualties.png")

    # -----------------------------
    # 2) Build DOCX report
    # -----------------------------
    doc = Document()

    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    def _table(header: List[str], rows: List[List[str]]) -> None:
        t = doc.add_table(rows=1, cols=len(header))
        for i, h in enumerate(header):
            t.rows[0].cells[i].text = h
        for row in rows:
            cells = t.add_row().cells
            for i, v in enumerate(row):
                cells[i].text = v

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    cit = config.citation
    _kv("Metric source", cit.source_name or cit.database_name)
    if config.criteria is not None:
        c = config.criteria
        _kv("Filters", f"type={c.type}, intensity={c.intensity}, duration={c.duration}, region={c.region}")
    _kv("Conflicts in scope", str(stats.total_conflicts))
    _kv("Total casualties", f"{stats.total_casualties:,.0f}")
    _kv("Average casualties", f"{stats.average_casualties:,}")
    _kv("Conflicts with estimated metrics", str(len(estimated)))

    doc.add_heading("Data citation", level=1)
    doc.add_paragraph(f"{cit.institutional_author}. {cit.database_name}. {cit.website}.")

    if config.command_log:
        doc.add_heading("Command log (reproducibility)", level=1)
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    doc.add_heading("Visualizations", level=1)
    for title, path, caption in chart_paths:
        doc.add_paragraph(title)
        doc.add_picture(path, width=Inches(6.5))
        doc.add_paragraph(caption)

    doc.add_heading("Conflicts", level=1)
    _table(
        ["Conflict", "Type", "Intensity", "Region", "Casualties", "Countries"],
        [
            [
                c.name,
                c.type,
                c.intensity or "unknown",
                c.region or "Unknown",
                f"{c.casualties:,}" if isinstance(c.casualties, (int, float)) else "",
                ", ".join(c.countries),
            ]
            for c in conflicts
        ],
    )

    if timeline:
        doc.add_heading("Timeline", level=1)
        _table(
            ["Start date", "Conflict", "Type", "Region"],
            [[t.start_date, t.name, t.type, t.region or "Unknown"] for t in timeline],
        )

    if estimated:
        doc.add_heading("Estimated metrics", level=1)
        doc.add_paragraph(
            "No country rows matched these conflicts, so their metrics are "
            "type-based defaults rather than observed values:"
        )
        for c in estimated:
            doc.add_paragraph(f"{c.name} ({c.type})", style="List Bullet")

    # -----------------------------
    # Reproducibility footer
    # -----------------------------
    doc.add_heading("Reproducibility footer", level=1)

    from . import __version__ as conflictmap_version
    from datetime import datetime as _dt
    generated_at = _dt.now().isoformat(timespec="seconds")

    doc.add_paragraph(f"conflictmap version: {conflictmap_version}")
    doc.add_paragraph(f"Report generated at: {generated_at}")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    logger.info("Report written to %s (%d conflicts)", out_path, len(conflicts))
    return out_path
