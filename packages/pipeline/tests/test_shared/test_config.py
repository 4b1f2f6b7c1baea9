"""
tests/test_shared/test_config.py — Tests for environment-driven Settings.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from gapdata_shared.config import Settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATA_DIR", raising=False)
        s = Settings(_env_file=None)
        assert s.life_expectancy_path == Path("data") / "life_expectancy_years.csv"
        assert s.null_marker == ""
        assert s.parallel_load is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("DATA_DIR", "/srv/gapminder/")
        monkeypatch.setenv("PARALLEL_LOAD", "true")
        monkeypatch.setenv("NULL_MARKER", "NA")
        s = Settings(_env_file=None)
        assert s.data_dir == "/srv/gapminder"
        assert s.income_path == Path(
            "/srv/gapminder/income_per_person_gdppercapita_ppp_inflation_adjusted.csv"
        )
        assert s.parallel_load is True
        assert s.null_marker == "NA"

    def test_invalid_log_format(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
