"""
sources — wide-table loaders.

Each source module exposes a BaseSource subclass with:
  extract()      → raw polars DataFrame (every column as text)
  transform(raw) → WideTable ready for the reshaper
  get_metadata() → dict for logging
  run()          → extract + transform with timing
"""

from gapdata_pipeline.sources.base import BaseSource
from gapdata_pipeline.sources.gapminder import GapminderCsvSource

__all__ = ["BaseSource", "GapminderCsvSource"]
