"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  fixture_path()     — resolves paths to tests/fixtures/
  fake_resolver      — deterministic country → continent callable
  *_wide             — fixture CSVs loaded as all-text WideTables
  source_paths       — the three fixture CSV paths keyed by metric
  write_csv          — writes CSV text into tmp_path and returns the path
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import polars as pl
import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

# "Atlantis" is deliberately absent
FAKE_CONTINENTS: dict[str, str] = {
    "Iceland": "Europe",
    "Norway": "Europe",
    "Kenya": "Africa",
    "Korea, Rep.": "Asia",
}


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def source_paths() -> dict[str, Path]:
    return {
        "income": FIXTURES_DIR / "income_sample.csv",
        "life_expectancy": FIXTURES_DIR / "life_expectancy_sample.csv",
        "population": FIXTURES_DIR / "population_sample.csv",
    }


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    """
    Write CSV text to tmp_path/<name> and return the path.

    Usage in tests:
        path = write_csv("income.csv", "country,1800\\nIceland,800\\n")
    """
    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


# ---------------------------------------------------------------------------
# Continent resolver
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_resolver() -> Callable[[str], str | None]:
    return FAKE_CONTINENTS.get


# ---------------------------------------------------------------------------
# Sample DataFrames
# ---------------------------------------------------------------------------

def _read_wide(name: str) -> pl.DataFrame:
    return pl.read_csv(FIXTURES_DIR / name, infer_schema_length=0)


@pytest.fixture
def life_wide() -> pl.DataFrame:
    """Life-expectancy WideTable (5 countries × 3 years, all text)."""
    return _read_wide("life_expectancy_sample.csv")


@pytest.fixture
def income_wide() -> pl.DataFrame:
    """Income WideTable (no Atlantis row)."""
    return _read_wide("income_sample.csv")


@pytest.fixture
def population_wide() -> pl.DataFrame:
    """Population WideTable (5 countries × 3 years, all text)."""
    return _read_wide("population_sample.csv")
