"""
constants.py — shared constants used across the pipeline.

Continent labels, the Gapminder country -> continent table, metric names
and the clean dataset column order are defined here so the pipeline,
the validation report and the CLI stay in sync.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# Continents
# ---------------------------------------------------------------------------
Continent = Literal["Africa", "Americas", "Asia", "Europe", "Oceania"]

CONTINENTS: Final[tuple[str, ...]] = ("Africa", "Americas", "Asia", "Europe", "Oceania")

# Country names as spelled in the Gapminder downloads.
_CONTINENT_MEMBERS: Final[dict[str, tuple[str, ...]]] = {
    "Africa": (
        "Algeria", "Angola", "Benin", "Botswana", "Burkina Faso", "Burundi",
        "Cameroon", "Cape Verde", "Central African Republic", "Chad", "Comoros",
        "Congo, Dem. Rep.", "Congo, Rep.", "Cote d'Ivoire", "Djibouti", "Egypt",
        "Equatorial Guinea", "Eritrea", "Eswatini", "Ethiopia", "Gabon", "Gambia",
        "Ghana", "Guinea", "Guinea-Bissau", "Kenya", "Lesotho", "Liberia", "Libya",
        "Madagascar", "Malawi", "Mali", "Mauritania", "Mauritius", "Morocco",
        "Mozambique", "Namibia", "Niger", "Nigeria", "Rwanda",
        "Sao Tome and Principe", "Senegal", "Seychelles", "Sierra Leone",
        "Somalia", "South Africa", "South Sudan", "Sudan", "Tanzania", "Togo",
        "Tunisia", "Uganda", "Zambia", "Zimbabwe",
    ),
    "Americas": (
        "Antigua and Barbuda", "Argentina", "Bahamas", "Barbados", "Belize",
        "Bolivia", "Brazil", "Canada", "Chile", "Colombia", "Costa Rica", "Cuba",
        "Dominica", "Dominican Republic", "Ecuador", "El Salvador", "Grenada",
        "Guatemala", "Guyana", "Haiti", "Honduras", "Jamaica", "Mexico",
        "Nicaragua", "Panama", "Paraguay", "Peru", "St. Kitts and Nevis",
        "St. Lucia", "St. Vincent and the Grenadines", "Suriname",
        "Trinidad and Tobago", "United States", "Uruguay", "Venezuela",
    ),
    "Asia": (
        "Afghanistan", "Armenia", "Azerbaijan", "Bahrain", "Bangladesh", "Bhutan",
        "Brunei", "Cambodia", "China", "Georgia", "Hong Kong, China", "India",
        "Indonesia", "Iran", "Iraq", "Israel", "Japan", "Jordan", "Kazakhstan",
        "Kuwait", "Kyrgyz Republic", "Lao", "Lebanon", "Malaysia", "Maldives",
        "Mongolia", "Myanmar", "Nepal", "North Korea", "Oman", "Pakistan",
        "Palestine", "Philippines", "Qatar", "Saudi Arabia", "Singapore",
        "South Korea", "Sri Lanka", "Syria", "Taiwan", "Tajikistan", "Thailand",
        "Timor-Leste", "Turkey", "Turkmenistan", "United Arab Emirates",
        "Uzbekistan", "Vietnam", "Yemen",
    ),
    "Europe": (
        "Albania", "Andorra", "Austria", "Belarus", "Belgium",
        "Bosnia and Herzegovina", "Bulgaria", "Croatia", "Cyprus",
        "Czech Republic", "Denmark", "Estonia", "Finland", "France", "Germany",
        "Greece", "Hungary", "Iceland", "Ireland", "Italy", "Kosovo", "Latvia",
        "Liechtenstein", "Lithuania", "Luxembourg", "Malta", "Moldova", "Monaco",
        "Montenegro", "Netherlands", "North Macedonia", "Norway", "Poland",
        "Portugal", "Romania", "Russia", "San Marino", "Serbia",
        "Slovak Republic", "Slovenia", "Spain", "Sweden", "Switzerland",
        "Ukraine", "United Kingdom",
    ),
    "Oceania": (
        "Australia", "Fiji", "Kiribati", "Marshall Islands",
        "Micronesia, Fed. Sts.", "Nauru", "New Zealand", "Palau",
        "Papua New Guinea", "Samoa", "Solomon Islands", "Tonga", "Tuvalu",
        "Vanuatu",
    ),
}

COUNTRY_TO_CONTINENT: Final[dict[str, str]] = {
    country: continent
    for continent, members in _CONTINENT_MEMBERS.items()
    for country in members
}

# Alternate spellings (World Bank, UN, colloquial) -> Gapminder name
COUNTRY_ALIASES: Final[dict[str, str]] = {
    "usa": "United States",
    "us": "United States",
    "united states of america": "United States",
    "uk": "United Kingdom",
    "great britain": "United Kingdom",
    "czechia": "Czech Republic",
    "slovakia": "Slovak Republic",
    "kyrgyzstan": "Kyrgyz Republic",
    "laos": "Lao",
    "lao pdr": "Lao",
    "ivory coast": "Cote d'Ivoire",
    "côte d'ivoire": "Cote d'Ivoire",
    "swaziland": "Eswatini",
    "macedonia, fyr": "North Macedonia",
    "macedonia": "North Macedonia",
    "cabo verde": "Cape Verde",
    "micronesia": "Micronesia, Fed. Sts.",
    "korea, rep.": "South Korea",
    "korea, dem. rep.": "North Korea",
    "russian federation": "Russia",
    "syrian arab republic": "Syria",
    "iran, islamic rep.": "Iran",
    "egypt, arab rep.": "Egypt",
    "yemen, rep.": "Yemen",
    "venezuela, rb": "Venezuela",
    "gambia, the": "Gambia",
    "bahamas, the": "Bahamas",
    "brunei darussalam": "Brunei",
    "viet nam": "Vietnam",
    "turkiye": "Turkey",
    "türkiye": "Turkey",
    "democratic republic of the congo": "Congo, Dem. Rep.",
    "republic of the congo": "Congo, Rep.",
    "east timor": "Timor-Leste",
    "burma": "Myanmar",
    "holland": "Netherlands",
    "hong kong": "Hong Kong, China",
    "st. lucia": "St. Lucia",
    "saint lucia": "St. Lucia",
    "saint kitts and nevis": "St. Kitts and Nevis",
    "saint vincent and the grenadines": "St. Vincent and the Grenadines",
}

# ---------------------------------------------------------------------------
# Metrics and clean dataset schema
# ---------------------------------------------------------------------------
Metric = Literal["life_expectancy", "income", "population"]

METRICS: Final[tuple[str, ...]] = ("life_expectancy", "income", "population")

COUNTRY_COL: Final[str] = "country"
CONTINENT_COL: Final[str] = "continent"
YEAR_COL: Final[str] = "year"

# Field order of clean_df.csv
CLEAN_COLUMNS: Final[tuple[str, ...]] = (
    "country",
    "year",
    "life_expectancy",
    "continent",
    "income",
    "population",
)

# Gapminder compact number suffixes ("10.5k", "1.2M", "3B")
MAGNITUDE_SUFFIXES: Final[dict[str, float]] = {
    "k": 1e3,
    "K": 1e3,
    "M": 1e6,
    "B": 1e9,
}
