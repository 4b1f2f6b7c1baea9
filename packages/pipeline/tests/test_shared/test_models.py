"""
tests/test_shared/test_models.py — Tests for the record models.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from gapdata_shared.constants import CLEAN_COLUMNS
from gapdata_shared.models import JoinedRow, LongRecord


class TestLongRecord:
    def test_from_row(self):
        rec = LongRecord.from_row({"country": "Iceland", "year": "1800", "income": 800.0}, "income")
        assert rec.value == pytest.approx(800.0)
        assert rec.to_row_dict() == {"country": "Iceland", "year": "1800", "income": 800.0}

    def test_null_value(self):
        rec = LongRecord.from_row({"country": "Norway", "year": "1801", "income": None}, "income")
        assert rec.value is None

    def test_unknown_metric_rejected(self):
        with pytest.raises(ValidationError):
            LongRecord(country="Iceland", year="1800", value=1.0, metric="gdp")


class TestJoinedRow:
    def test_round_trip_dict(self):
        row = {
            "country": "Iceland",
            "year": "1800",
            "life_expectancy": 45.0,
            "continent": "Europe",
            "income": None,
            "population": 50_000.0,
        }
        joined = JoinedRow.from_row(row)
        assert joined.income is None
        assert joined.to_row_dict() == row
        assert list(joined.to_row_dict()) == list(CLEAN_COLUMNS)

    def test_country_required(self):
        with pytest.raises(ValidationError):
            JoinedRow.from_row({"country": None, "year": "1800"})
