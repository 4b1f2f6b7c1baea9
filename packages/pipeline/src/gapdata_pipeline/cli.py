"""
cli.py — Click CLI entrypoint for the gapdata pipeline.

Usage:
    gapdata run
    gapdata run --data-dir ./data --output ./out/clean_df.csv --parallel
    gapdata run --dry-run
    gapdata validate ./data/clean_df.csv --json
    gapdata coverage
"""

from __future__ import annotations

import json
from pathlib import Path

import click

from gapdata_shared.config import settings
from gapdata_shared.geo import build_continent_map, resolve_continent, unresolved
from gapdata_pipeline.errors import GapdataError
from gapdata_pipeline.utils.logging import configure_logging


def _paths(data_dir: str | None) -> dict[str, Path]:
    root = Path(data_dir) if data_dir else Path(settings.data_dir)
    return {
        "income": root / settings.income_file,
        "life_expectancy": root / settings.life_expectancy_file,
        "population": root / settings.population_file,
    }


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--log-format",
    default=settings.log_format,
    type=click.Choice(["console", "json"]),
    help="Log renderer",
)
def main(log_level: str, log_format: str) -> None:
    """gapdata clean dataset pipeline."""
    configure_logging(log_level, log_format)


@main.command()
@click.option("--data-dir", default=None, help="Directory holding the three source CSVs")
@click.option("--output", default=None, help="Destination of the clean dataset CSV")
@click.option("--parallel/--no-parallel", default=settings.parallel_load,
              help="Load sources on a thread pool")
@click.option("--expand-suffixes/--no-expand-suffixes",
              default=settings.expand_magnitude_suffixes,
              help="Parse 10.5k / 1.2M style cells")
@click.option("--dry-run", is_flag=True, help="Build the dataset without writing it")
def run(
    data_dir: str | None,
    output: str | None,
    parallel: bool,
    expand_suffixes: bool,
    dry_run: bool,
) -> None:
    """Build clean_df.csv from the income, life expectancy and population tables."""
    from gapdata_pipeline.pipelines.clean_dataset import run as run_clean

    paths = _paths(data_dir)
    try:
        result = run_clean(
            income_path=paths["income"],
            life_expectancy_path=paths["life_expectancy"],
            population_path=paths["population"],
            output_path=output,
            parallel=parallel,
            expand_magnitude_suffixes=expand_suffixes,
            dry_run=dry_run,
        )
    except GapdataError as exc:
        raise click.ClickException(str(exc)) from exc

    if result.export is not None:
        click.echo(f"Wrote {result.export.rows_written} rows to {result.export.path}")
    else:
        click.echo(f"Dry run: {result.rows} rows built, nothing written")
    if result.unresolved_countries:
        click.echo(f"  {len(result.unresolved_countries)} countries without a continent")
    for metric, n in result.duplicate_keys.items():
        if n:
            click.echo(f"  {metric}: {n} duplicate (country, year) keys fanned out")


@main.command()
@click.argument("path", type=click.Path(dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def validate(path: str, as_json: bool) -> None:
    """Check an exported clean dataset; exit 1 if it fails."""
    from gapdata_pipeline.loaders.csv_exporter import read_clean_dataset
    from gapdata_pipeline.validation import check_clean_dataset, format_report_table

    try:
        df = read_clean_dataset(path, null_marker=settings.null_marker)
    except GapdataError as exc:
        raise click.ClickException(str(exc)) from exc

    report = check_clean_dataset(df)
    if as_json:
        click.echo(json.dumps(report.as_dict(), indent=2, default=str))
    else:
        click.echo(format_report_table(report))

    if not report.passed:
        raise SystemExit(1)


@main.command()
@click.option("--data-dir", default=None, help="Directory holding the source CSVs")
def coverage(data_dir: str | None) -> None:
    """List life-expectancy countries that resolve to no continent."""
    from gapdata_pipeline.sources.gapminder import GapminderCsvSource

    path = _paths(data_dir)["life_expectancy"]
    try:
        wide = GapminderCsvSource(path, "life_expectancy").run()
    except GapdataError as exc:
        raise click.ClickException(str(exc)) from exc

    mapping = build_continent_map(wide["country"].to_list(), resolve_continent)
    gaps = unresolved(mapping)
    click.echo(f"{len(mapping) - len(gaps)}/{len(mapping)} countries resolved")
    for country in gaps:
        click.echo(f"  ✗ {country}")


if __name__ == "__main__":
    main()
