"""
tests/test_pipelines/test_clean_dataset.py — End-to-end tests for the
clean dataset pipeline.

Tests cover:
  - The Iceland examples (with and without an income match)
  - Row totality and continent coverage on the fixture tables
  - Dry run (nothing written)
  - Parallel loading gives the same dataset
  - Fatal errors abort without writing output
  - Fan-out through the whole pipeline
  - Downstream year helpers
"""

from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from gapdata_shared.models.records import JoinedRow
from gapdata_pipeline.errors import JoinCardinalityWarning, ResolutionGap, SourceReadError
from gapdata_pipeline.pipelines.clean_dataset import (
    PipelineResult,
    build_clean_dataset,
    filter_years,
    rows_for_year,
    run,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

HEADER = "country,year,life_expectancy,continent,income,population"


def _run(paths: dict[str, Path], output: Path, resolver, **kwargs) -> PipelineResult:
    return run(
        income_path=paths["income"],
        life_expectancy_path=paths["life_expectancy"],
        population_path=paths["population"],
        output_path=output,
        resolver=resolver,
        **kwargs,
    )


@pytest.fixture
def iceland_paths(write_csv) -> dict[str, Path]:
    return {
        "income": write_csv("income.csv", "country,1800\nIceland,800\n"),
        "life_expectancy": write_csv("life.csv", "country,1800\nIceland,45\n"),
        "population": write_csv("population.csv", "country,1800\nIceland,50000\n"),
    }


# ---------------------------------------------------------------------------
# End-to-end examples
# ---------------------------------------------------------------------------

class TestIcelandExamples:
    def test_single_row_export(self, iceland_paths, fake_resolver, tmp_path: Path):
        out = tmp_path / "clean_df.csv"
        result = _run(iceland_paths, out, fake_resolver)

        assert result.rows == 1
        assert out.read_text().splitlines() == [HEADER, "Iceland,1800,45,Europe,800,50000"]
        assert result.status == "success"

    def test_missing_income(self, iceland_paths, fake_resolver, write_csv, tmp_path: Path):
        iceland_paths["income"] = write_csv("income_empty.csv", "country,1800\nNorway,1330\n")
        out = tmp_path / "clean_df.csv"
        _run(iceland_paths, out, fake_resolver)

        assert out.read_text().splitlines() == [HEADER, "Iceland,1800,45,Europe,,50000"]


# ---------------------------------------------------------------------------
# Fixture tables
# ---------------------------------------------------------------------------

class TestFixtureRun:
    def test_row_count_equals_anchor(self, source_paths, fake_resolver, tmp_path: Path):
        with pytest.warns(ResolutionGap):
            result = _run(source_paths, tmp_path / "clean_df.csv", fake_resolver)
        assert result.rows == 5 * 3
        assert result.export is not None
        assert result.export.rows_written == 15

    def test_unresolved_country_reported(self, source_paths, fake_resolver, tmp_path: Path):
        with pytest.warns(ResolutionGap, match="Atlantis"):
            result = _run(source_paths, tmp_path / "clean_df.csv", fake_resolver)
        assert result.unresolved_countries == ["Atlantis"]
        assert result.status == "partial_coverage"
        atlantis = result.dataset.filter(pl.col("country") == "Atlantis")
        assert atlantis["continent"].null_count() == 3
        assert atlantis["income"].null_count() == 3

    def test_source_metadata_collected(self, source_paths, fake_resolver, tmp_path: Path):
        with pytest.warns(ResolutionGap):
            result = _run(source_paths, tmp_path / "clean_df.csv", fake_resolver)
        by_metric = {m["metric"]: m for m in result.sources}
        assert by_metric["income"]["record_count"] == 4
        assert by_metric["life_expectancy"]["year_count"] == 3

    def test_default_resolver(self, source_paths, tmp_path: Path):
        with pytest.warns(ResolutionGap):
            result = _run(source_paths, tmp_path / "clean_df.csv", None)
        continents = dict(zip(result.dataset["country"], result.dataset["continent"]))
        assert continents["Korea, Rep."] == "Asia"
        assert continents["Atlantis"] is None

    def test_dry_run_writes_nothing(self, source_paths, fake_resolver, tmp_path: Path):
        out = tmp_path / "clean_df.csv"
        with pytest.warns(ResolutionGap):
            result = _run(source_paths, out, fake_resolver, dry_run=True)
        assert result.export is None
        assert result.rows == 15
        assert not out.exists()

    def test_parallel_load_same_dataset(self, source_paths, fake_resolver, tmp_path: Path):
        with pytest.warns(ResolutionGap):
            sequential = _run(source_paths, tmp_path / "a.csv", fake_resolver, parallel=False)
        with pytest.warns(ResolutionGap):
            parallel = _run(source_paths, tmp_path / "b.csv", fake_resolver, parallel=True)
        assert parallel.dataset.equals(sequential.dataset)
        assert (tmp_path / "a.csv").read_bytes() == (tmp_path / "b.csv").read_bytes()

    def test_custom_null_marker(self, source_paths, fake_resolver, tmp_path: Path):
        out = tmp_path / "clean_df.csv"
        with pytest.warns(ResolutionGap):
            _run(source_paths, out, fake_resolver, null_marker="NA")
        atlantis = [l for l in out.read_text().splitlines() if l.startswith("Atlantis")]
        assert atlantis[0] == "Atlantis,1800,30,NA,NA,1000"


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:
    def test_missing_source_aborts_without_output(
        self, source_paths, fake_resolver, tmp_path: Path
    ):
        source_paths["population"] = tmp_path / "missing.csv"
        out = tmp_path / "clean_df.csv"
        with pytest.raises(SourceReadError, match="missing.csv"):
            _run(source_paths, out, fake_resolver)
        assert not out.exists()

    def test_missing_source_aborts_in_parallel(self, source_paths, fake_resolver, tmp_path: Path):
        source_paths["income"] = tmp_path / "missing.csv"
        out = tmp_path / "clean_df.csv"
        with pytest.raises(SourceReadError):
            _run(source_paths, out, fake_resolver, parallel=True)
        assert not out.exists()

    def test_continent_year_header_aborts_without_output(
        self, iceland_paths, fake_resolver, write_csv, tmp_path
    ):
        iceland_paths["life_expectancy"] = write_csv(
            "life_continent.csv", "country,continent\nIceland,45\n"
        )
        out = tmp_path / "clean_df.csv"
        with pytest.raises(SourceReadError, match="reserved column names"):
            _run(iceland_paths, out, fake_resolver)
        assert not out.exists()

    def test_fan_out_through_pipeline(self, iceland_paths, fake_resolver, write_csv, tmp_path):
        iceland_paths["income"] = write_csv(
            "income_dupes.csv", "country,1800\nIceland,800\nIceland,900\n"
        )
        out = tmp_path / "clean_df.csv"
        with pytest.warns(JoinCardinalityWarning):
            result = _run(iceland_paths, out, fake_resolver)

        assert result.rows == 2
        assert result.duplicate_keys == {"income": 1, "population": 0}
        assert result.status == "fanout"
        assert out.read_text().splitlines()[1:] == [
            "Iceland,1800,45,Europe,800,50000",
            "Iceland,1800,45,Europe,900,50000",
        ]


# ---------------------------------------------------------------------------
# build_clean_dataset (in-memory)
# ---------------------------------------------------------------------------

class TestBuildCleanDataset:
    def test_inputs_not_modified(self, life_wide, income_wide, population_wide, fake_resolver):
        before = [t.clone() for t in (life_wide, income_wide, population_wide)]
        with pytest.warns(ResolutionGap):
            build_clean_dataset(life_wide, income_wide, population_wide, resolver=fake_resolver)
        for original, table in zip(before, (life_wide, income_wide, population_wide)):
            assert table.equals(original)

    def test_no_export(self, life_wide, income_wide, population_wide, fake_resolver):
        with pytest.warns(ResolutionGap):
            result = build_clean_dataset(
                life_wide, income_wide, population_wide, resolver=fake_resolver
            )
        assert result.export is None
        assert result.duplicate_keys == {"income": 0, "population": 0}


# ---------------------------------------------------------------------------
# Downstream helpers
# ---------------------------------------------------------------------------

class TestYearHelpers:
    @pytest.fixture
    def clean(self, life_wide, income_wide, population_wide, fake_resolver) -> pl.DataFrame:
        with pytest.warns(ResolutionGap):
            return build_clean_dataset(
                life_wide, income_wide, population_wide, resolver=fake_resolver
            ).dataset

    def test_rows_for_year(self, clean: pl.DataFrame):
        rows = rows_for_year(clean, 1800)
        assert len(rows) == 5
        assert all(isinstance(r, JoinedRow) for r in rows)
        iceland = rows[0]
        assert iceland.country == "Iceland"
        assert iceland.continent == "Europe"
        assert iceland.income == pytest.approx(800.0)
        assert iceland.population == pytest.approx(50_000.0)

    def test_rows_for_unknown_year(self, clean: pl.DataFrame):
        assert rows_for_year(clean, "2500") == []

    def test_filter_years(self, clean: pl.DataFrame):
        later = filter_years(clean, lambda y: int(y) >= 1801)
        assert set(later["year"].to_list()) == {"1801", "1802"}
        assert len(later) == 10
