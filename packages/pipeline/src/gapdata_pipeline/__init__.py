"""
gapdata_pipeline — reshape-and-join pipeline for Gapminder country tables.

Architecture:
  sources/     — wide CSV loaders (income, life expectancy, population)
  transforms/  — wide -> long reshape, continent enrichment, left joins
  loaders/     — atomic CSV export of the clean dataset
  pipelines/   — orchestrator wiring sources -> transforms -> loaders
  validation   — quality report over an exported clean dataset
  utils/       — structlog configuration

Quick start:
    from gapdata_pipeline.pipelines.clean_dataset import run
    result = run(dry_run=True)
    print(result.dataset.head())

CLI:
    gapdata run --data-dir ./data --output ./data/clean_df.csv
    gapdata validate ./data/clean_df.csv
    gapdata coverage

Shared code from gapdata_shared:
    from gapdata_shared.config import settings
    from gapdata_shared.geo import resolve_continent
    from gapdata_shared.models.records import JoinedRow, LongRecord
"""

__version__ = "0.1.0"
