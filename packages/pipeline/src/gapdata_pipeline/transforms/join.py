"""
transforms/join.py — Left joins of long tables on (country, year).

The life-expectancy long table is the anchor: every one of its rows
reaches the clean dataset, in its original order, and no key outside it
ever appears.

Semantics:
  - unmatched left rows get null right-hand values (null, not zero)
  - a right-hand key occurring n > 1 times fans the matching left row
    out into n rows, ordered as in the right table; a
    JoinCardinalityWarning is issued and the run continues
  - keys are compared verbatim; "Iceland" and "iceland " do not match

Usage:
    from gapdata_pipeline.transforms.join import join_metrics

    clean = join_metrics(life_long, income_long, population_long)
    # columns: country, year, life_expectancy, continent, income, population
"""

from __future__ import annotations

import warnings
from collections.abc import Sequence

import polars as pl
import structlog

from gapdata_shared.constants import CLEAN_COLUMNS, COUNTRY_COL, YEAR_COL
from gapdata_pipeline.errors import JoinCardinalityWarning

log = structlog.get_logger(__name__)

JOIN_KEYS: tuple[str, ...] = (COUNTRY_COL, YEAR_COL)

_LEFT_IDX = "__left_idx"
_RIGHT_IDX = "__right_idx"


def duplicate_keys(
    long: pl.DataFrame,
    keys: Sequence[str] = JOIN_KEYS,
) -> pl.DataFrame:
    """
    Keys occurring more than once, with their count.

    Returns:
        DataFrame [*keys, "count"] in first-seen order; empty when keys are unique.
    """
    return (
        long.group_by(list(keys), maintain_order=True)
        .len(name="count")
        .filter(pl.col("count") > 1)
    )


def left_join(
    left: pl.DataFrame,
    right: pl.DataFrame,
    on: Sequence[str] = JOIN_KEYS,
    *,
    right_name: str = "right",
) -> pl.DataFrame:
    """
    Left-join right onto left with deterministic ordering.

    Output is ordered by left row position, then right row position for
    fanned-out matches.

    Args:
        left:       Anchor table.
        right:      Table whose non-key columns are attached.
        on:         Join key columns, present in both tables.
        right_name: Label for logs and warnings.

    Returns:
        Left columns followed by the right table's non-key columns.

    Raises:
        ValueError: a non-key column name exists on both sides.
    """
    on = list(on)
    clash = (set(left.columns) & set(right.columns)) - set(on)
    if clash:
        raise ValueError(f"columns present on both sides of the join: {sorted(clash)}")

    dupes = duplicate_keys(right, on)
    if len(dupes):
        extra_rows = int((dupes["count"] - 1).sum())
        sample = dupes.head(5).rows()
        log.warning(
            "join_fanout_detected",
            right=right_name,
            duplicate_keys=len(dupes),
            extra_right_rows=extra_rows,
            sample=sample,
        )
        warnings.warn(
            JoinCardinalityWarning(
                f"{right_name}: {len(dupes)} duplicate {tuple(on)} keys, "
                f"matching rows will fan out (e.g. {sample})"
            ),
            stacklevel=2,
        )

    joined = (
        left.with_row_index(_LEFT_IDX)
        .join(right.with_row_index(_RIGHT_IDX), on=on, how="left")
        .sort([_LEFT_IDX, _RIGHT_IDX], nulls_last=True)
        .drop([_LEFT_IDX, _RIGHT_IDX])
    )

    log.debug(
        "left_join_complete",
        right=right_name,
        left_rows=len(left),
        right_rows=len(right),
        result_rows=len(joined),
    )
    return joined


def join_metrics(
    life_long: pl.DataFrame,
    income_long: pl.DataFrame,
    population_long: pl.DataFrame,
) -> pl.DataFrame:
    """
    Build the clean dataset from the three long tables.

    life_long ⟕ income_long ⟕ population_long on (country, year).

    Args:
        life_long:       [country, continent, year, life_expectancy]
        income_long:     [country, year, income]
        population_long: [country, year, population]

    Returns:
        DataFrame with columns CLEAN_COLUMNS.
    """
    keys = list(JOIN_KEYS)
    with_income = left_join(
        life_long,
        income_long.select([*keys, "income"]),
        right_name="income",
    )
    clean = left_join(
        with_income,
        population_long.select([*keys, "population"]),
        right_name="population",
    )

    log.info(
        "metrics_joined",
        anchor_rows=len(life_long),
        result_rows=len(clean),
        income_nulls=clean["income"].null_count(),
        population_nulls=clean["population"].null_count(),
        continent_nulls=clean["continent"].null_count(),
    )
    return clean.select(list(CLEAN_COLUMNS))
