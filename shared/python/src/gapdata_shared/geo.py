"""
geo.py — Country name -> continent resolution.

Used by the pipeline to attach a continent label to the life-expectancy
table. Gapminder country strings are matched against a static table,
then against known alternate spellings, then fuzzily. Anything that
still does not match resolves to None; callers treat that as a gap in
coverage, not an error.

Usage:
    from gapdata_shared.geo import resolve_continent, build_continent_map

    resolve_continent("Iceland")            # "Europe"
    resolve_continent("Korea, Rep.")        # "Asia"
    resolve_continent("Atlantis")           # None

    mapping = build_continent_map(["Iceland", "Atlantis"])
    # {"Iceland": "Europe", "Atlantis": None}
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from difflib import get_close_matches

from gapdata_shared.constants import COUNTRY_ALIASES, COUNTRY_TO_CONTINENT

# Any callable from a country name to a continent label (or None)
ContinentResolver = Callable[[str], str | None]

# ---------------------------------------------------------------------------
# Lookup tables (all lowercase for matching)
# ---------------------------------------------------------------------------

_NAME_TO_CONTINENT: dict[str, str] = {
    **{name.lower(): continent for name, continent in COUNTRY_TO_CONTINENT.items()},
    **{
        alias: COUNTRY_TO_CONTINENT[canonical]
        for alias, canonical in COUNTRY_ALIASES.items()
    },
}

# High cutoff: a wrong continent is worse than a missing one
_FUZZY_CUTOFF = 0.9


def resolve_continent(name: str | None) -> str | None:
    """
    Resolve a country name to one of the five continent labels.

    Performs an exact (case-insensitive) match first, then falls back to
    fuzzy matching against known names and aliases.

    Args:
        name: Country name as it appears in the source table.

    Returns:
        "Africa", "Americas", "Asia", "Europe" or "Oceania", or None if
        no match is found.
    """
    if not name:
        return None

    key = " ".join(name.split()).lower()
    if not key:
        return None

    if key in _NAME_TO_CONTINENT:
        return _NAME_TO_CONTINENT[key]

    matches = get_close_matches(key, list(_NAME_TO_CONTINENT), n=1, cutoff=_FUZZY_CUTOFF)
    if matches:
        return _NAME_TO_CONTINENT[matches[0]]

    return None


def build_continent_map(
    countries: Iterable[str | None],
    resolver: ContinentResolver = resolve_continent,
) -> dict[str, str | None]:
    """
    Resolve each distinct country exactly once.

    Args:
        countries: Country names; duplicates and None are skipped.
        resolver:  Name -> continent callable (injected so tests can
                   supply a fixed mapping).

    Returns:
        dict of country -> continent label or None, in first-seen order.
    """
    mapping: dict[str, str | None] = {}
    for country in countries:
        if country is None or country in mapping:
            continue
        mapping[country] = resolver(country)
    return mapping


def unresolved(mapping: dict[str, str | None]) -> list[str]:
    """Countries in a continent map with no label, sorted."""
    return sorted(country for country, continent in mapping.items() if continent is None)
