"""
models/records.py — Pydantic models for LongRecord and JoinedRow.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from gapdata_shared.constants import CLEAN_COLUMNS, Metric


class LongRecord(BaseModel):
    """
    One observation of a long (tidy) table.

    Identity is (country, year, metric); year is the source column label
    kept as text.
    """

    country: str
    year: str
    value: float | None = None
    metric: Metric

    @classmethod
    def from_row(cls, row: dict[str, Any], metric: Metric) -> "LongRecord":
        return cls(
            country=row["country"],
            year=row["year"],
            value=row.get(metric),
            metric=metric,
        )

    def to_row_dict(self) -> dict[str, Any]:
        return {"country": self.country, "year": self.year, self.metric: self.value}


class JoinedRow(BaseModel):
    """
    One row of the clean dataset.

    country and year come from the life-expectancy anchor and are never
    null; every other field is null when the source had no match.
    """

    country: str
    year: str
    life_expectancy: float | None = None
    continent: str | None = None
    income: float | None = None
    population: float | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "JoinedRow":
        return cls(**{k: row.get(k) for k in CLEAN_COLUMNS})

    def to_row_dict(self) -> dict[str, Any]:
        return self.model_dump(include=set(CLEAN_COLUMNS))
