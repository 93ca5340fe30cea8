"""
Metric source loader (table -> CountryMetricRow list)
=====================================================

This module reads the country metric table (CSV, Excel or JSON; a local path
or a URL) and converts each row into a `CountryMetricRow`.

Key ideas:
- We try multiple possible column names because exports vary
  ("deadliness", "Deadliness Value Raw", ...).
- Conversion helpers (_to_int/_to_float) turn blanks and junk into 0, so one
  bad row never breaks a load.
- Anything that stops us from reading the table at all is a `FetchError`.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence
import logging
import re
import zipfile
import pandas as pd
from .models import ConflictRecord, CountryMetricRow

logger = logging.getLogger(__name__)

class FetchError(RuntimeError):
    """Raised when the metric source cannot be fetched or parsed."""

def _is_missing(x) -> bool:
    """True for None/NaN cells; lists and other non-scalar cells count too."""
    return x is None or not pd.api.types.is_scalar(x) or pd.isna(x)

def _to_int(x) -> int:
    """Convert a cell to int, returning 0 if missing/invalid."""
    if _is_missing(x): return 0
    try: return int(float(x))
    except Exception: return 0

def _to_float(x) -> float:
    """Convert a cell to float, returning 0.0 if missing/invalid."""
    if _is_missing(x): return 0.0
    try: v = float(x)
    except Exception: return 0.0
    return v if v == v and v not in (float("inf"), float("-inf")) else 0.0

def _to_str(x) -> str:
    if _is_missing(x): return ""
    return str(x).strip()

def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())

def _col(df: pd.DataFrame, *names: str) -> Optional[str]:
    cols = list(df.columns)
    for n in names:
        if n in cols:
            return n
    norm_map = {_norm(c): c for c in cols}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    return None

def _suffix(source: str) -> str:
    # drop query strings/fragments so URLs like ".../data.csv?raw=1" still match
    path = re.split(r"[?#]", str(source), maxsplit=1)[0]
    m = re.search(r"\.([A-Za-z0-9]+)$", path)
    return m.group(1).lower() if m else ""

def _read_table(source: str) -> pd.DataFrame:
    suffix = _suffix(source)
    try:
        if suffix in ("xlsx", "xlsm", "xls"):
            df = pd.read_excel(source, engine="openpyxl")
        elif suffix == "json":
            df = pd.read_json(source, orient="records", dtype=False)
        else:
            df = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    except (OSError, ValueError, zipfile.BadZipFile, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise FetchError(f"Failed to load metric source {source!r}: {e}") from e
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    return df

def load_country_metrics(source: str) -> List[CountryMetricRow]:
    """Fetch the metric table and convert it to CountryMetricRow records.

    Raises:
        FetchError: the source is missing/unreachable, unreadable, or has no
        country column.
    """
    df = _read_table(source)

    country_col = _col(df, "country", "Country", "Country Name", "country_name")
    if country_col is None:
        raise FetchError(f"Metric source {source!r} has no country column. Available={list(df.columns)}")

    deadliness_col = _col(df, "deadliness", "Deadliness Value Raw", "fatalities")
    danger_col = _col(df, "danger", "Danger Value Raw")
    fragmentation_col = _col(df, "fragmentation", "Fragmentation Value Raw", "armed_groups")
    diffusion_col = _col(df, "diffusion", "Diffusion Value Raw")

    missing = [n for n, c in (("deadliness", deadliness_col), ("danger", danger_col),
                              ("fragmentation", fragmentation_col), ("diffusion", diffusion_col)) if c is None]
    if missing:
        logger.warning("Metric source %s lacks columns %s; treating them as 0", source, ", ".join(missing))

    def cell(row, col):
        return row[col] if col else None

    rows: List[CountryMetricRow] = []
    malformed = 0
    for _, r in df.iterrows():
        raw = [cell(r, c) for c in (deadliness_col, danger_col, fragmentation_col, diffusion_col)]
        metric = CountryMetricRow(
            country=_to_str(r[country_col]),
            deadliness=_to_int(raw[0]),
            danger=_to_int(raw[1]),
            fragmentation=_to_int(raw[2]),
            diffusion=_to_float(raw[3]),
        )
        if _is_malformed(raw):
            malformed += 1
            logger.debug("Coerced malformed metric values to 0 for %r: %r", metric.country, raw)
        rows.append(metric)

    logger.info("Loaded %d metric rows from %s", len(rows), source)
    if malformed:
        logger.info("%d metric rows had unparseable values (coerced to 0)", malformed)
    return rows

def _is_malformed(values: Sequence) -> bool:
    """True when a present, non-blank cell did not parse as a number."""
    for v in values:
        if v is not None and not pd.api.types.is_scalar(v):
            return True
        if _is_missing(v):
            continue
        if isinstance(v, str) and not v.strip():
            continue
        try:
            float(v)
        except (TypeError, ValueError):
            return True
    return False

# ---------------- Conflict record maintenance ----------------
def validate_conflict_records(records: Sequence[ConflictRecord]) -> Sequence[ConflictRecord]:
    """Log a warning for records missing an id, a name or a valid location.

    Problems are reported, never raised; the records are returned as-is.
    """
    for i, c in enumerate(records):
        if not c.id:
            logger.warning("Conflict at index %d is missing an id", i)
        if not c.name:
            logger.warning("Conflict at index %d is missing a name", i)
        if c.location is None or not c.location.is_valid():
            logger.warning("Conflict at index %d is missing valid location coordinates", i)
    return records

def update_conflict_data(existing: Sequence[ConflictRecord], new: Sequence[ConflictRecord]) -> List[ConflictRecord]:
    """Merge `new` into `existing` by id.

    A record with a known id replaces the old one in place; unknown ids are
    appended. Neither input list is modified.
    """
    merged: List[ConflictRecord] = list(existing)
    position: Dict[str, int] = {}
    for i, c in enumerate(merged):
        position.setdefault(c.id, i)
    for c in new:
        if c.id in position:
            merged[position[c.id]] = c
        else:
            position[c.id] = len(merged)
            merged.append(c)
    validate_conflict_records(merged)
    return merged
