"""
sources/base.py — Abstract base class for table sources.

A source turns one file into a WideTable in two steps:
  extract()      — read the file as written, every cell as text
  transform()    — check the key column and tidy cells, shape unchanged

get_metadata() describes the source for logs and the pipeline result.
Callers use run(), which times both steps and logs the outcome; any
error is logged once here and re-raised untouched.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any

import polars as pl
import structlog

log = structlog.get_logger(__name__)


def _elapsed_ms(since: float) -> int:
    return int((time.monotonic() - since) * 1000)


class BaseSource(ABC):
    """Base for synchronous, file-backed table sources."""

    # Subclasses set this; it tags every log line
    name: str = "unknown"

    def __init__(self) -> None:
        self._log = log.bind(source_name=self.name)

    @abstractmethod
    def extract(self, **kwargs: Any) -> pl.DataFrame:
        """Read the raw table; raise SourceReadError if it cannot be read."""
        ...

    @abstractmethod
    def transform(self, raw: pl.DataFrame) -> pl.DataFrame:
        """Return the WideTable built from extract()'s output."""
        ...

    @abstractmethod
    def get_metadata(self) -> dict[str, Any]:
        """Source description: at least source_name, path and record_count."""
        ...

    def run(self, **kwargs: Any) -> pl.DataFrame:
        """
        extract() then transform(), with per-step timings in the log.

        Args:
            **kwargs: Passed through to extract().

        Returns:
            The WideTable.

        Raises:
            Whatever extract() or transform() raised, after `source_run_failed`.
        """
        run_log = self._log.bind(**{k: str(v) for k, v in kwargs.items()})
        run_log.info("source_run_start")
        started = time.monotonic()

        try:
            raw = self.extract(**kwargs)
            run_log.info(
                "extract_complete",
                raw_rows=len(raw),
                raw_cols=raw.width,
                duration_ms=_elapsed_ms(started),
            )

            step = time.monotonic()
            wide = self.transform(raw)
            run_log.info(
                "transform_complete",
                rows=len(wide),
                year_cols=max(wide.width - 1, 0),
                duration_ms=_elapsed_ms(step),
            )
        except Exception as exc:
            run_log.error(
                "source_run_failed",
                error=str(exc),
                duration_ms=_elapsed_ms(started),
                exc_info=True,
            )
            raise

        run_log.info("source_run_complete", total_duration_ms=_elapsed_ms(started))
        return wide
