"""
validation.py — Quality report for an exported clean dataset.

Checks the invariants downstream consumers rely on and summarises null
coverage per column, as an aligned text table or a JSON-ready dict.

Checks:
  header           — columns equal CLEAN_COLUMNS, in order
  null_keys        — rows with a null country or year (must be 0)
  duplicate_keys   — rows sharing a (country, year) with another row;
                     non-zero only when a source fanned out
  nulls            — null count per column
  unresolved       — countries whose continent is null

Usage:
    from gapdata_pipeline.loaders.csv_exporter import read_clean_dataset
    from gapdata_pipeline.validation import check_clean_dataset, format_report_table

    report = check_clean_dataset(read_clean_dataset("data/clean_df.csv"))
    print(format_report_table(report))
    assert report.passed
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any

import polars as pl

from gapdata_shared.constants import CLEAN_COLUMNS, CONTINENT_COL, COUNTRY_COL, YEAR_COL
from gapdata_pipeline.transforms.join import duplicate_keys


@dataclass
class QualityReport:
    """Result of check_clean_dataset()."""

    row_count: int
    columns: list[str]
    header_ok: bool
    null_key_rows: int = 0
    duplicate_key_rows: int = 0
    nulls: dict[str, int] = field(default_factory=dict)
    unresolved_countries: list[str] = field(default_factory=list)
    year_range: tuple[str, str] | None = None

    @property
    def passed(self) -> bool:
        return self.header_ok and self.null_key_rows == 0

    def as_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["passed"] = self.passed
        payload["generated_at"] = datetime.now(timezone.utc).isoformat()
        return payload


def check_clean_dataset(df: pl.DataFrame) -> QualityReport:
    """Compute a QualityReport; never raises on bad data, only reports it."""
    columns = df.columns
    report = QualityReport(
        row_count=len(df),
        columns=columns,
        header_ok=tuple(columns) == CLEAN_COLUMNS,
        nulls={c: df[c].null_count() for c in columns},
    )

    keys = [c for c in (COUNTRY_COL, YEAR_COL) if c in columns]
    if len(keys) < 2:
        report.null_key_rows = len(df)
        return report

    report.null_key_rows = len(
        df.filter(pl.col(COUNTRY_COL).is_null() | pl.col(YEAR_COL).is_null())
    )

    dupes = duplicate_keys(df, keys)
    report.duplicate_key_rows = int(dupes["count"].sum()) if len(dupes) else 0

    if CONTINENT_COL in columns:
        report.unresolved_countries = sorted(
            c
            for c in df.filter(pl.col(CONTINENT_COL).is_null())[COUNTRY_COL].unique().to_list()
            if c is not None
        )

    years = df[YEAR_COL].drop_nulls()
    if len(years):
        report.year_range = (years[0], years[-1])

    return report


def format_report_table(report: QualityReport) -> str:
    """Render the report as an aligned text table."""
    lines = [
        f"{'Check':<24} {'Value':>12}",
        "-" * 37,
        f"{'rows':<24} {report.row_count:>12}",
        f"{'header':<24} {'ok' if report.header_ok else 'MISMATCH':>12}",
        f"{'null key rows':<24} {report.null_key_rows:>12}",
        f"{'duplicate key rows':<24} {report.duplicate_key_rows:>12}",
        f"{'unresolved countries':<24} {len(report.unresolved_countries):>12}",
    ]
    if report.year_range:
        first, last = report.year_range
        lines.append(f"{'years':<24} {first + '..' + last:>12}")
    lines.append("-" * 37)
    for col, n in report.nulls.items():
        pct = (n / report.row_count * 100) if report.row_count else 0.0
        lines.append(f"{'nulls: ' + col:<24} {n:>12} ({pct:.1f}%)")
    lines.append("-" * 37)
    lines.append(f"{'result':<24} {'PASS' if report.passed else 'FAIL':>12}")
    return "\n".join(lines)
