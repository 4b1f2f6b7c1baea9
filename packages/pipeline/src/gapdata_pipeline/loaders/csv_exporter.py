"""
loaders/csv_exporter.py — Atomic CSV export of the clean dataset.

The pipeline funnels its final DataFrame through this module. The exporter:
  - Writes columns in the fixed CLEAN_COLUMNS order with a header row
  - Formats floats with their shortest round-trip text, dropping a
    trailing ".0" (45.0 → "45", 0.1 → "0.1"); nothing is rounded
  - Writes every null as one configured marker (default: empty field)
  - Writes to a temporary file beside the target and renames it into
    place, so a failed export never leaves a truncated file behind
  - Returns an ExportResult with row/byte counts and timing

Usage:
    from gapdata_pipeline.loaders.csv_exporter import CsvExporter

    exporter = CsvExporter()
    result = exporter.export(clean_df, "data/clean_df.csv")
    print(result.rows_written, result.bytes_written)

    # Reload for downstream use / validation
    df = read_clean_dataset("data/clean_df.csv")
"""

from __future__ import annotations

import os
import tempfile
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import polars as pl
import structlog

from gapdata_shared.constants import CLEAN_COLUMNS, METRICS
from gapdata_pipeline.errors import ExportWriteError, SourceReadError
from gapdata_pipeline.transforms.normalize import cast_numeric_cols

log = structlog.get_logger(__name__)


@dataclass
class ExportResult:
    """Summary of one export."""

    path: Path
    rows_written: int = 0
    columns: list[str] = field(default_factory=list)
    bytes_written: int = 0
    duration_ms: int = 0

    @property
    def status(self) -> str:
        return "success" if self.rows_written else "empty"


def _format_float_expr(col: str) -> pl.Expr:
    return pl.col(col).cast(pl.String).str.replace(r"\.0$", "").alias(col)


class CsvExporter:
    """Writes a DataFrame to CSV with a fixed column order and null marker."""

    def __init__(
        self,
        null_marker: str = "",
        columns: Sequence[str] = CLEAN_COLUMNS,
    ) -> None:
        self._null_marker = null_marker
        self._columns = list(columns)

    def format(self, df: pl.DataFrame) -> pl.DataFrame:
        """
        Select the export columns and render floats as text.

        Raises:
            ValueError: an export column is missing from df.
        """
        missing = [c for c in self._columns if c not in df.columns]
        if missing:
            raise ValueError(f"columns missing from export frame: {missing}")

        out = df.select(self._columns)
        float_cols = [c for c, dtype in out.schema.items() if dtype.is_float()]
        if float_cols:
            out = out.with_columns([_format_float_expr(c) for c in float_cols])
        return out

    def export(self, df: pl.DataFrame, path: str | Path) -> ExportResult:
        """
        Write df to path atomically.

        Args:
            df:   Clean dataset.
            path: Destination file; parent directories are created.

        Returns:
            ExportResult.

        Raises:
            ExportWriteError: directory cannot be created, destination is a
                directory, or the write/rename fails. The destination is
                left untouched in every failure case.
        """
        dest = Path(path)
        t0 = time.monotonic()
        export_log = log.bind(path=str(dest), rows=len(df))

        formatted = self.format(df)

        if dest.is_dir():
            raise ExportWriteError(dest, "destination is a directory")
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=dest.parent, prefix=f".{dest.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise ExportWriteError(dest, f"cannot create destination: {exc}") from exc

        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                formatted.write_csv(fh, include_header=True, null_value=self._null_marker)
            os.chmod(tmp, 0o644)
            os.replace(tmp, dest)
        except (OSError, pl.exceptions.PolarsError) as exc:
            export_log.error("export_failed", error=str(exc))
            raise ExportWriteError(dest, f"write failed: {exc}") from exc
        finally:
            tmp.unlink(missing_ok=True)

        result = ExportResult(
            path=dest,
            rows_written=len(formatted),
            columns=formatted.columns,
            bytes_written=dest.stat().st_size,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        export_log.info(
            "export_complete",
            bytes_written=result.bytes_written,
            duration_ms=result.duration_ms,
            status=result.status,
        )
        return result


def read_clean_dataset(path: str | Path, *, null_marker: str = "") -> pl.DataFrame:
    """
    Load an exported clean dataset with metric columns as Float64.

    country, year and continent stay text; year labels are not parsed.

    Raises:
        SourceReadError: file missing or unparsable.
    """
    src = Path(path)
    if not src.is_file():
        raise SourceReadError(src, "file not found")
    try:
        df = pl.read_csv(
            src,
            infer_schema_length=0,
            null_values=[null_marker] if null_marker else None,
        )
    except pl.exceptions.PolarsError as exc:
        raise SourceReadError(src, f"unparsable table: {exc}") from exc
    except OSError as exc:
        raise SourceReadError(src, f"unreadable: {exc}") from exc
    return cast_numeric_cols(df, list(METRICS))
