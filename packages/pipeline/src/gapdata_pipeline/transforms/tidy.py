"""
transforms/tidy.py — Wide → long reshape and continent enrichment.

A WideTable has identifier columns (country, optionally continent) and
one column per year label. The reshaper turns it into a long table with
one row per (identifier, year) cell:

    country | 1800 | 1801          country | year | life_expectancy
    --------+------+-----    →     --------+------+----------------
    Iceland | 45   | 46            Iceland | 1800 | 45.0
                                   Iceland | 1801 | 46.0

Pre/post-conditions:
  - every non-identifier column is a year column, labels kept verbatim
  - output rows == input rows × year columns; nothing dropped or added
  - empty or non-numeric cells become null values
  - output order is column-major: all rows for the first year, then the next

Usage:
    from gapdata_pipeline.transforms.tidy import add_continent, melt_wide

    life = add_continent(life_wide, resolve_continent)
    life_long = melt_wide(life, ["country", "continent"], "life_expectancy")
"""

from __future__ import annotations

import warnings
from collections.abc import Sequence

import polars as pl
import structlog

from gapdata_shared.constants import CONTINENT_COL, COUNTRY_COL, YEAR_COL, Metric
from gapdata_shared.geo import ContinentResolver, build_continent_map, unresolved
from gapdata_shared.models.records import LongRecord
from gapdata_pipeline.errors import ResolutionGap
from gapdata_pipeline.transforms.normalize import cast_numeric_cols

log = structlog.get_logger(__name__)


def year_columns(wide: pl.DataFrame, id_columns: Sequence[str]) -> list[str]:
    """
    Return every non-identifier column, in header order.

    Raises:
        ValueError: an identifier column is not present.
    """
    missing = [c for c in id_columns if c not in wide.columns]
    if missing:
        raise ValueError(f"identifier columns not in table: {missing}")
    return [c for c in wide.columns if c not in id_columns]


def add_continent(
    wide: pl.DataFrame,
    resolver: ContinentResolver,
    *,
    country_col: str = COUNTRY_COL,
    continent_col: str = CONTINENT_COL,
) -> pl.DataFrame:
    """
    Insert a continent column right after the country column.

    Each distinct country is resolved once. Countries the resolver cannot
    place get a null continent and a single ResolutionGap warning is
    issued for the whole table; the run continues.

    Args:
        wide:          WideTable containing country_col.
        resolver:      Country name → continent label or None.
        country_col:   Key column.
        continent_col: Name of the new column.

    Returns:
        New DataFrame; the input is not modified.
    """
    if country_col not in wide.columns:
        raise ValueError(f"column {country_col!r} not in table")
    if continent_col in wide.columns:
        raise ValueError(f"column {continent_col!r} already present")

    countries = wide[country_col].to_list()
    mapping = build_continent_map(countries, resolver)

    gaps = unresolved(mapping)
    if gaps:
        log.warning("continent_unresolved", count=len(gaps), countries=gaps)
        warnings.warn(
            ResolutionGap(f"{len(gaps)} countries without a continent: {gaps}"),
            stacklevel=2,
        )
    log.debug("continent_map_built", countries=len(mapping), unresolved=len(gaps))

    continent = pl.Series(
        continent_col,
        [mapping.get(c) if c is not None else None for c in countries],
        dtype=pl.String,
    )
    position = wide.columns.index(country_col) + 1
    order = [*wide.columns[:position], continent_col, *wide.columns[position:]]
    return wide.with_columns(continent).select(order)


def melt_wide(
    wide: pl.DataFrame,
    id_columns: Sequence[str],
    value_name: str,
) -> pl.DataFrame:
    """
    Reshape a WideTable into a long table.

    Args:
        wide:       WideTable.
        id_columns: Identifier columns carried onto every output row.
        value_name: Name of the value column (the metric).

    Returns:
        DataFrame with columns [*id_columns, "year", value_name]; year is
        pl.String, value_name is pl.Float64.
    """
    id_columns = list(id_columns)
    if value_name in id_columns or YEAR_COL in id_columns:
        raise ValueError(f"identifier columns clash with output names: {id_columns}")

    years = year_columns(wide, id_columns)

    if not years:
        return pl.DataFrame(
            schema={
                **{c: wide.schema[c] for c in id_columns},
                YEAR_COL: pl.String,
                value_name: pl.Float64,
            }
        )

    numeric = cast_numeric_cols(wide, years)
    long = numeric.unpivot(
        on=years,
        index=id_columns,
        variable_name=YEAR_COL,
        value_name=value_name,
    )

    expected = len(wide) * len(years)
    if len(long) != expected:
        raise RuntimeError(f"reshape produced {len(long)} rows, expected {expected}")

    log.debug(
        "melted",
        value_name=value_name,
        rows_in=len(wide),
        year_cols=len(years),
        rows_out=len(long),
    )
    return long


def pivot_long(
    long: pl.DataFrame,
    id_columns: Sequence[str],
    value_name: str,
) -> pl.DataFrame:
    """
    Inverse of melt_wide: spread year labels back into columns.

    Year columns appear in first-seen order and rows in first-seen
    identifier order, so pivot_long(melt_wide(w)) lines up with w.

    Raises:
        polars.exceptions.ComputeError: duplicate (identifier, year) pairs.
    """
    return long.pivot(
        on=YEAR_COL,
        index=list(id_columns),
        values=value_name,
        aggregate_function=None,
        maintain_order=True,
    )


def to_long_records(long: pl.DataFrame, metric: Metric) -> list[LongRecord]:
    """Materialize a long table as LongRecord models."""
    return [LongRecord.from_row(row, metric) for row in long.iter_rows(named=True)]
