"""
gapdata_shared — shared configuration, constants, geography helpers and
row models for the gapdata pipeline.

Usage:
    from gapdata_shared.config import settings
    from gapdata_shared.geo import resolve_continent, build_continent_map
    from gapdata_shared.models.records import LongRecord, JoinedRow
    from gapdata_shared.constants import CONTINENTS, METRICS
"""

__version__ = "0.1.0"
