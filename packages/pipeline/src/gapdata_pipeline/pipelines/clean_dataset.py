"""
pipelines/clean_dataset.py — income × life expectancy × population clean dataset.

Orchestrates:
  1. Gapminder sources → three WideTables (optionally on a thread pool)
  2. Continent enrichment of the life-expectancy table
  3. Wide → long reshape of each table
  4. Left joins anchored on life expectancy
  5. Atomic CSV export (skipped on dry run)

Any SourceReadError or ExportWriteError aborts the run before the
destination is touched. Unresolved continents and duplicate join keys
are reported on the result and in the logs; they never abort.

Usage:
    from gapdata_pipeline.pipelines.clean_dataset import run
    result = run(output_path="data/clean_df.csv")
    print(result.rows, result.unresolved_countries)
"""

from __future__ import annotations

import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import polars as pl

from gapdata_shared.config import settings
from gapdata_shared.constants import CONTINENT_COL, COUNTRY_COL, YEAR_COL
from gapdata_shared.geo import ContinentResolver, resolve_continent
from gapdata_shared.models.records import JoinedRow
from gapdata_pipeline.loaders.csv_exporter import CsvExporter, ExportResult
from gapdata_pipeline.sources.gapminder import GapminderCsvSource
from gapdata_pipeline.transforms.join import duplicate_keys, join_metrics
from gapdata_pipeline.transforms.tidy import add_continent, melt_wide
from gapdata_pipeline.utils.logging import get_logger

log = get_logger(__name__, pipeline="clean_dataset")

# Identifier columns per metric once the life table carries its continent
ID_COLUMNS: dict[str, tuple[str, ...]] = {
    "life_expectancy": (COUNTRY_COL, CONTINENT_COL),
    "income": (COUNTRY_COL,),
    "population": (COUNTRY_COL,),
}


@dataclass
class PipelineResult:
    """Outcome of one clean dataset run."""

    dataset: pl.DataFrame
    export: ExportResult | None = None
    unresolved_countries: list[str] = field(default_factory=list)
    duplicate_keys: dict[str, int] = field(default_factory=dict)
    sources: list[dict[str, Any]] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def rows(self) -> int:
        return len(self.dataset)

    @property
    def status(self) -> str:
        if self.duplicate_keys and any(self.duplicate_keys.values()):
            return "fanout"
        if self.unresolved_countries:
            return "partial_coverage"
        return "success"


def load_sources(
    paths: dict[str, Path],
    *,
    parallel: bool = False,
    expand_magnitude_suffixes: bool = False,
) -> tuple[dict[str, pl.DataFrame], list[dict[str, Any]]]:
    """
    Load each metric's WideTable.

    The loads share no state, so parallel=True only changes throughput.

    Returns:
        (metric → WideTable, per-source metadata)
    """
    sources = {
        metric: GapminderCsvSource(
            path, metric, expand_magnitude_suffixes=expand_magnitude_suffixes
        )
        for metric, path in paths.items()
    }

    if parallel:
        with ThreadPoolExecutor(max_workers=len(sources)) as pool:
            futures = {metric: pool.submit(src.run) for metric, src in sources.items()}
            tables = {metric: fut.result() for metric, fut in futures.items()}
    else:
        tables = {metric: src.run() for metric, src in sources.items()}

    return tables, [src.get_metadata() for src in sources.values()]


def build_clean_dataset(
    life_wide: pl.DataFrame,
    income_wide: pl.DataFrame,
    population_wide: pl.DataFrame,
    *,
    resolver: ContinentResolver = resolve_continent,
) -> PipelineResult:
    """
    Pure in-memory part of the pipeline: enrich, reshape, join.

    Inputs are not modified. No files are written.
    """
    t0 = time.monotonic()

    life = add_continent(life_wide, resolver)
    unresolved_countries = sorted(
        set(life.filter(pl.col(CONTINENT_COL).is_null())[COUNTRY_COL].to_list())
    )

    long_tables = {
        "life_expectancy": melt_wide(life, ID_COLUMNS["life_expectancy"], "life_expectancy"),
        "income": melt_wide(income_wide, ID_COLUMNS["income"], "income"),
        "population": melt_wide(population_wide, ID_COLUMNS["population"], "population"),
    }
    for metric, long in long_tables.items():
        log.info("reshaped", metric=metric, rows=len(long))

    dupes = {
        metric: len(duplicate_keys(long_tables[metric]))
        for metric in ("income", "population")
    }

    clean = join_metrics(
        long_tables["life_expectancy"],
        long_tables["income"],
        long_tables["population"],
    )

    return PipelineResult(
        dataset=clean,
        unresolved_countries=unresolved_countries,
        duplicate_keys=dupes,
        duration_ms=int((time.monotonic() - t0) * 1000),
    )


def run(
    *,
    income_path: str | Path | None = None,
    life_expectancy_path: str | Path | None = None,
    population_path: str | Path | None = None,
    output_path: str | Path | None = None,
    resolver: ContinentResolver | None = None,
    parallel: bool | None = None,
    expand_magnitude_suffixes: bool | None = None,
    null_marker: str | None = None,
    dry_run: bool = False,
) -> PipelineResult:
    """
    Run the clean dataset pipeline end-to-end.

    Every argument left as None falls back to settings.

    Args:
        income_path:          Income WideTable CSV.
        life_expectancy_path: Life-expectancy WideTable CSV (the join anchor).
        population_path:      Population WideTable CSV.
        output_path:          Destination of clean_df.csv.
        resolver:             Country → continent callable (default: resolve_continent).
        parallel:             Load the three sources on a thread pool.
        expand_magnitude_suffixes: Parse "10.5k"-style cells.
        null_marker:          Null token written to the export.
        dry_run:              If True, build the dataset but write nothing.

    Returns:
        PipelineResult; export is None on dry run.

    Raises:
        SourceReadError:  a source table is missing or malformed.
        ExportWriteError: the destination cannot be written.
    """
    paths = {
        "life_expectancy": Path(life_expectancy_path or settings.life_expectancy_path),
        "income": Path(income_path or settings.income_path),
        "population": Path(population_path or settings.population_path),
    }
    dest = Path(output_path or settings.output_path)
    parallel = settings.parallel_load if parallel is None else parallel
    expand = (
        settings.expand_magnitude_suffixes
        if expand_magnitude_suffixes is None
        else expand_magnitude_suffixes
    )
    marker = settings.null_marker if null_marker is None else null_marker

    log.info(
        "clean_dataset_start",
        output=str(dest),
        parallel=parallel,
        dry_run=dry_run,
    )
    t0 = time.monotonic()

    try:
        tables, source_meta = load_sources(
            paths, parallel=parallel, expand_magnitude_suffixes=expand
        )
        result = build_clean_dataset(
            tables["life_expectancy"],
            tables["income"],
            tables["population"],
            resolver=resolver or resolve_continent,
        )
        result.sources = source_meta

        if dry_run:
            log.info("dry_run_skip_export", rows=result.rows)
        else:
            result.export = CsvExporter(null_marker=marker).export(result.dataset, dest)

    except Exception as exc:
        log.error("clean_dataset_failed", error=str(exc), exc_info=True)
        raise

    result.duration_ms = int((time.monotonic() - t0) * 1000)
    log.info(
        "clean_dataset_complete",
        rows=result.rows,
        unresolved_countries=len(result.unresolved_countries),
        duplicate_keys=result.duplicate_keys,
        status=result.status,
        duration_ms=result.duration_ms,
    )
    return result


# ---------------------------------------------------------------------------
# Downstream helpers — plotting/analysis code consumes rows by year
# ---------------------------------------------------------------------------


def filter_years(clean: pl.DataFrame, predicate: Callable[[str], bool]) -> pl.DataFrame:
    """Rows whose year label satisfies predicate, in dataset order."""
    keep = pl.Series([bool(predicate(y)) for y in clean[YEAR_COL].to_list()], dtype=pl.Boolean)
    return clean.filter(keep)


def rows_for_year(clean: pl.DataFrame, year: int | str) -> list[JoinedRow]:
    """JoinedRow models for one year (compared as its text label)."""
    label = str(year)
    return [
        JoinedRow.from_row(row)
        for row in clean.filter(pl.col(YEAR_COL) == label).iter_rows(named=True)
    ]
