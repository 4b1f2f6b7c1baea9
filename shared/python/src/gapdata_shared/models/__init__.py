"""
gapdata_shared.models — Pydantic models for the tidy and joined row shapes.

These models are used by:
- the pipeline: materialize long/joined rows for inspection and tests
- downstream consumers: typed access to clean dataset rows

All models provide:
  .from_row(row: dict) -> Model
  .to_row_dict() -> dict
"""

from gapdata_shared.models.records import JoinedRow, LongRecord

__all__ = [
    "LongRecord",
    "JoinedRow",
]
