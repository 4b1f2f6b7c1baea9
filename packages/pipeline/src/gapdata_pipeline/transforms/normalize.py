"""
transforms/normalize.py — Cell-level numeric helpers for pipeline DataFrames.

Stateless polars expressions/functions shared by the source adapter and
the reshaper. Nothing here touches key columns: country strings are
matched verbatim downstream.

Usage:
    from gapdata_pipeline.transforms.normalize import cast_numeric_cols, parse_magnitude_expr

    df = cast_numeric_cols(df, ["life_expectancy"])
    df = df.with_columns(parse_magnitude_expr("1990"))   # "1.2M" → 1200000.0
"""

from __future__ import annotations

import polars as pl

from gapdata_shared.constants import MAGNITUDE_SUFFIXES

# number with an optional k/K/M/B suffix, surrounding whitespace allowed
_MAGNITUDE_RE = r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([kKMB]?)\s*$"


def parse_magnitude_expr(col: str) -> pl.Expr:
    """
    Expression parsing Gapminder compact numbers into Float64.

    "800" → 800.0, "10.5k" → 10500.0, "1.2M" → 1200000.0, "3B" → 3e9.
    Anything else (empty, "n/a", "12x") becomes null.
    """
    text = pl.col(col).cast(pl.String)
    number = text.str.extract(_MAGNITUDE_RE, 1).cast(pl.Float64, strict=False)
    factor = (
        text.str.extract(_MAGNITUDE_RE, 2)
        .replace_strict(MAGNITUDE_SUFFIXES, default=1.0, return_dtype=pl.Float64)
        .fill_null(1.0)
    )
    return (number * factor).alias(col)


def cast_numeric_cols(
    df: pl.DataFrame,
    columns: list[str],
    dtype: type[pl.DataType] = pl.Float64,
) -> pl.DataFrame:
    """
    Cast specified columns to a numeric dtype, coercing errors to null.

    Float NaN (from "NaN"/"nan" cells) is turned into null as well, so a
    missing value has a single representation downstream.
    """
    exprs = []
    for c in columns:
        if c not in df.columns:
            continue
        expr = pl.col(c).cast(dtype, strict=False)
        if dtype.is_float():
            expr = expr.fill_nan(None)
        exprs.append(expr)
    return df.with_columns(exprs)
