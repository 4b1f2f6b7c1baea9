"""
sources/gapminder.py — Gapminder wide-format CSV source adapter.

Reads one of the Gapminder "indicator by country" downloads into a
WideTable: one row per country, one text column per year label.

Gapminder CSV format notes:
  - First row is the header; first column is `country`
  - Remaining headers are year labels ("1800" … "2100"); they are kept
    verbatim, no range validation, no renaming
  - Cells are numeric text, empty when missing; some downloads use
    compact suffixes ("10.5k", "1.2M") which are expanded on request

Usage:
    source = GapminderCsvSource("data/life_expectancy_years.csv", metric="life_expectancy")
    wide = source.run()
    # columns: country, 1800, 1801, ...
"""

from __future__ import annotations

import csv
from collections import Counter
from pathlib import Path
from typing import Any

import polars as pl
import structlog

from gapdata_shared.constants import CONTINENT_COL, COUNTRY_COL, YEAR_COL, Metric
from gapdata_pipeline.errors import SourceReadError
from gapdata_pipeline.sources.base import BaseSource
from gapdata_pipeline.transforms.normalize import parse_magnitude_expr

log = structlog.get_logger(__name__)


class GapminderCsvSource(BaseSource):
    """Loads a Gapminder wide CSV (country x year) as an all-text DataFrame."""

    name = "Gapminder"

    def __init__(
        self,
        path: str | Path,
        metric: Metric,
        *,
        key_column: str = COUNTRY_COL,
        expand_magnitude_suffixes: bool = False,
    ) -> None:
        super().__init__()
        self.path = Path(path)
        self.metric = metric
        self.key_column = key_column
        self.expand_magnitude_suffixes = expand_magnitude_suffixes
        self._log = self._log.bind(metric=metric, path=str(self.path))
        self._wide: pl.DataFrame | None = None

    @property
    def reserved_columns(self) -> frozenset[str]:
        """Names the reshape or enrichment step will create for this table."""
        if self.metric == "life_expectancy":
            return frozenset({YEAR_COL, CONTINENT_COL})
        return frozenset({YEAR_COL})

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    def _read_header(self) -> list[str]:
        """
        Read the header row exactly as written.

        Raises:
            SourceReadError: missing/unreadable file, no columns, blank or
                duplicate header names.
        """
        if not self.path.is_file():
            raise SourceReadError(self.path, "file not found")

        try:
            with self.path.open(newline="", encoding="utf-8-sig") as fh:
                header = next(csv.reader(fh), None)
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise SourceReadError(self.path, f"unreadable: {exc}") from exc

        if not header:
            raise SourceReadError(self.path, "table has zero columns")

        if any(not name.strip() for name in header):
            raise SourceReadError(self.path, "header contains a blank column name")

        dupes = sorted(name for name, n in Counter(header).items() if n > 1)
        if dupes:
            raise SourceReadError(self.path, f"duplicate header names: {dupes}")

        return header

    # ------------------------------------------------------------------
    # BaseSource interface
    # ------------------------------------------------------------------

    def extract(self, **kwargs: Any) -> pl.DataFrame:
        """
        Read the CSV with every column as pl.String.

        Returns:
            Raw DataFrame whose column names equal the file header.

        Raises:
            SourceReadError: see _read_header(); also ragged or otherwise
                unparsable rows.
        """
        header = self._read_header()

        try:
            raw = pl.read_csv(
                self.path,
                has_header=True,
                schema={name: pl.String for name in header},
                encoding="utf8",
            )
        except pl.exceptions.PolarsError as exc:
            raise SourceReadError(self.path, f"unparsable table: {exc}") from exc
        except OSError as exc:
            raise SourceReadError(self.path, f"unreadable: {exc}") from exc

        return raw

    def transform(self, raw: pl.DataFrame) -> pl.DataFrame:
        """
        Validate the key column and optionally expand magnitude suffixes.

        Rows with an empty key are dropped (the key is the join key and
        may not be null downstream).

        Raises:
            SourceReadError: key column missing or not the first column,
                or a year header that collides with a column the
                pipeline adds (`year`; `continent` on the life table).
        """
        if not raw.columns or raw.columns[0] != self.key_column:
            raise SourceReadError(
                self.path,
                f"first column must be {self.key_column!r}, got {raw.columns[:1]}",
            )

        clashes = [c for c in raw.columns[1:] if c in self.reserved_columns]
        if clashes:
            raise SourceReadError(self.path, f"reserved column names in header: {clashes}")

        null_keys = raw[self.key_column].null_count()
        if null_keys:
            self._log.warning("null_key_rows_dropped", count=null_keys)
            raw = raw.filter(pl.col(self.key_column).is_not_null())

        if self.expand_magnitude_suffixes:
            year_cols = [c for c in raw.columns if c != self.key_column]
            raw = raw.with_columns([parse_magnitude_expr(c) for c in year_cols])

        self._wide = raw
        return raw

    def get_metadata(self) -> dict[str, Any]:
        """Source info; row/year counts are filled once run() has completed."""
        meta: dict[str, Any] = {
            "source_name": self.name,
            "path": str(self.path),
            "metric": self.metric,
            "record_count": None,
            "year_count": None,
            "first_year": None,
            "last_year": None,
        }
        if self._wide is not None:
            years = [c for c in self._wide.columns if c != self.key_column]
            meta.update(
                record_count=len(self._wide),
                year_count=len(years),
                first_year=years[0] if years else None,
                last_year=years[-1] if years else None,
            )
        return meta
