"""
Conflict map command line interface (CLI)
=========================================

This file provides the interactive terminal program you run like:

    python -m conflictmap.cli --metrics "path/or/url/to/ConflictData.csv"

It loads the metric source once, aggregates it into conflict records, and
then lets you filter, summarise, export and report on the in-memory
selection. The metric source is never modified.
"""

from __future__ import annotations
import argparse, logging, shlex
from typing import List, Optional
from .aggregator import load_and_group_conflict_data
from .catalog import CONFLICT_DEFINITIONS, load_catalog_json
from .config import settings
from .engine import (
    FILTER_DIMENSIONS, ConflictMapSession, calculate_statistics,
    create_timeline_data, export_csv, export_json,
)
from .models import ConflictRecord
from .regions import REGION_GROUPS

HELP_TEXT = """
Conflict map commands
---------------------

1) View / Inspect
   help
   show [n]                          (example: show 5)
   stats
   values <dimension>                (example: values region)
   timeline

2) Filtering
   filter <dimension> "<value>"      (example: filter region "Africa")
   filter <dimension> all            (clears one dimension)
   filters                           (print the current filters)
   reset
   dimensions: type, intensity, duration, region

3) History
   undo
   redo

4) Export (current selection)
   export csv "<out.csv>"
   export json "<out.json>"

5) Report (DOCX)
   report "<out.docx>"

6) Exit
   quit
"""


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the conflict map CLI.

    1) Load + aggregate the metric source
    2) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(prog="conflictmap")
    ap.add_argument("--metrics", default=settings.METRICS_SOURCE,
                    help="Path or URL of the country metric table (CSV, XLSX or JSON)")
    ap.add_argument("--catalog", default=settings.CATALOG_PATH,
                    help="Optional JSON conflict catalog (defaults to the built-in one)")
    ap.add_argument("--log-level", default=settings.LOG_LEVEL,
                    help="Logging level (DEBUG, INFO, WARNING, ...)")
    args = ap.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s [%(levelname)s] %(message)s")

    if not args.metrics:
        ap.error("--metrics is required (or set CONFLICTMAP_METRICS_SOURCE)")

    catalog = load_catalog_json(args.catalog) if args.catalog else CONFLICT_DEFINITIONS

    print("Loading conflict data...")
    conflicts = load_and_group_conflict_data(args.metrics, catalog=catalog)
    session = ConflictMapSession(conflicts=conflicts, source=args.metrics)

    print(f"Loaded {len(conflicts)} conflicts. Type 'help' for commands.")
    while True:
        try:
            line = input("conflictmap> ")
            # Keep a lightweight log of commands for the report (reproducibility).
            stripped = line.strip()
            if stripped:
                cmd0 = stripped.split()[0].lower()
                if cmd0 not in ("help", "show", "values", "stats", "filters", "timeline", "quit"):
                    session.command_log.append(stripped)
        except EOFError:
            break
        if not stripped:
            continue
        if stripped.lower() in ("quit", "exit"):
            break
        try:
            handle(session, stripped)
        except Exception as e:
            print(f"Error: {e}")
    return 0


def handle(session: ConflictMapSession, line: str) -> None:
    """Handle one CLI command line.

    This parses the command and calls the matching session/engine function.
    """
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP_TEXT)
        return

    if cmd == "stats":
        stats = calculate_statistics(session.filtered())
        print(f"Conflicts: {stats.total_conflicts} | Casualties: {stats.total_casualties:,.0f} | Average: {stats.average_casualties:,}")
        for label, dist in (("Types", stats.type_distribution),
                            ("Intensity", stats.intensity_distribution),
                            ("Regions", stats.region_distribution)):
            print(f"{label}: " + ", ".join(f"{k}={v}" for k, v in sorted(dist.items())))
        return

    if cmd == "filters":
        c = session.criteria
        print(f"type={c.type} | intensity={c.intensity} | duration={c.duration} | region={c.region}")
        return

    if cmd == "reset":
        session.reset()
        print("Filters reset.")
        return

    if cmd == "undo":
        print("Undone." if session.undo() else "Nothing to undo.")
        return

    if cmd == "redo":
        print("Redone." if session.redo() else "Nothing to redo.")
        return

    if cmd == "values":
        if len(parts) < 2:
            raise ValueError(f"values needs a dimension: {' | '.join(FILTER_DIMENSIONS)}")
        dim = parts[1].lower()
        vals = session.values(dim)
        if dim == "region":
            # top-level regions also work as filters
            vals = sorted(set(vals) | set(REGION_GROUPS))
        for v in vals:
            print(v)
        return

    if cmd == "filter":
        if len(parts) < 3:
            raise ValueError('Usage: filter <dimension> "<value>"')
        dim = parts[1].lower()
        if dim not in FILTER_DIMENSIONS:
            raise ValueError(f"filter dimension must be: {', '.join(FILTER_DIMENSIONS)}")
        session.set_filters(**{dim: parts[2]})
        print(f"Filtered {dim}={parts[2]}. Size={len(session.filtered())}")
        return

    if cmd == "timeline":
        for t in create_timeline_data(session.filtered()):
            print(f"{t.start_date} | {t.name} | {t.type} | {t.intensity} | {t.region}")
        return

    if cmd == "show":
        n = int(parts[1]) if len(parts) >= 2 else 10
        _print_rows(session.filtered()[:n])
        return

    if cmd == "export":
        if len(parts) < 3:
            print('Usage: export csv "out.csv"  OR  export json "out.json"')
            return
        fmt = parts[1].lower()
        out_path = parts[2]
        rows = session.filtered()
        if not rows:
            print("Nothing to export: current selection is empty.")
            return
        if fmt == "csv":
            export_csv(rows, out_path)
            print(f"Exported CSV to {out_path}")
            return
        if fmt == "json":
            export_json(rows, out_path)
            print(f"Exported JSON to {out_path}")
            return
        print("Unknown export format. Use: csv or json")
        return

    if cmd == "report":
        from .report import DatasetCitation, ReportConfig, generate_docx_report
        if len(parts) < 2:
            raise ValueError('Usage: report "<path.docx>"')
        cfg = ReportConfig(
            citation=DatasetCitation(source_name=session.source),
            criteria=session.criteria,
            command_log=session.command_log,
        )
        generate_docx_report(session.filtered(), parts[1], config=cfg)
        print(f"Report written to {parts[1]}")
        return

    print("Unknown command. Type 'help'.")


def _print_rows(rows: List[ConflictRecord]) -> None:
    for c in rows:
        est = " (estimated)" if c.metrics is not None and c.metrics.estimated else ""
        print(f"[{c.id}] {c.name} | {c.type} | {c.intensity} | {c.region} | casualties={c.casualties}{est}")


if __name__ == "__main__":
    raise SystemExit(main())
