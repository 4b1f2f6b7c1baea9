"""
config.py — Environment-driven settings for gapdata.

Source file names, the export destination and its null marker, load
options and logging are read from the environment or the nearest .env.
Pipeline entry points take explicit overrides for every value here.

Usage:
    from gapdata_shared.config import settings
    print(settings.life_expectancy_path)
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Source tables
    # -------------------------------------------------------------------------
    data_dir: str = Field(default="./data")
    income_file: str = Field(
        default="income_per_person_gdppercapita_ppp_inflation_adjusted.csv"
    )
    life_expectancy_file: str = Field(default="life_expectancy_years.csv")
    population_file: str = Field(default="population_total.csv")

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------
    output_path: str = Field(default="./data/clean_df.csv")
    null_marker: str = Field(default="")

    # -------------------------------------------------------------------------
    # Processing
    # -------------------------------------------------------------------------
    parallel_load: bool = Field(default=False)
    expand_magnitude_suffixes: bool = Field(default=False)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    # -------------------------------------------------------------------------
    # Derived / computed
    # -------------------------------------------------------------------------
    @property
    def income_path(self) -> Path:
        return Path(self.data_dir) / self.income_file

    @property
    def life_expectancy_path(self) -> Path:
        return Path(self.data_dir) / self.life_expectancy_file

    @property
    def population_path(self) -> Path:
        return Path(self.data_dir) / self.population_file

    @field_validator("data_dir", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return (v.rstrip("/") or "/") if isinstance(v, str) else v


# ---------------------------------------------------------------------------
# Module-level singleton — import this everywhere
# ---------------------------------------------------------------------------
settings = Settings()
