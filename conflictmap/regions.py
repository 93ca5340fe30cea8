"""
Region classifier
=================

Two fixed lookup tables:

- `COUNTRY_REGIONS`: country name -> (sub)region, e.g. "Mali" -> "West Africa".
- `REGION_GROUPS`: top-level region -> its subregions, e.g. "Africa" -> [..., "West Africa", ...].

Both are read-only mappings built once at import time. Unknown countries
resolve to "Unknown" instead of raising.
"""

from __future__ import annotations
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

UNKNOWN_REGION = "Unknown"

REGION_GROUPS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Africa": ("North Africa", "West Africa", "East Africa", "Central Africa", "Southern Africa"),
    "Middle East": ("Middle East", "Gulf States"),
    "Europe": ("Western Europe", "Eastern Europe", "Southern Europe", "Northern Europe", "Balkans"),
    "Asia": ("East Asia", "Central Asia"),
    "North America": ("North America", "Central America", "Caribbean"),
    "South America": ("South America",),
    "Southeast Asia": ("Southeast Asia",),
    "South Asia": ("South Asia",),
    "Oceania": ("Australia and New Zealand", "Pacific Islands"),
})

# subregion -> top-level region (inverse of REGION_GROUPS)
_SUBREGION_PARENTS: Mapping[str, str] = MappingProxyType({
    sub: parent for parent, subs in REGION_GROUPS.items() for sub in subs
})

COUNTRY_REGIONS: Mapping[str, str] = MappingProxyType({
    # Europe
    "Ukraine": "Eastern Europe",
    "Russia": "Eastern Europe",
    "Belarus": "Eastern Europe",
    "Moldova": "Eastern Europe",
    "Serbia": "Balkans",
    "Kosovo": "Balkans",
    "Bosnia and Herzegovina": "Balkans",
    # Middle East
    "Israel": "Middle East",
    "Palestine": "Middle East",
    "Lebanon": "Middle East",
    "Syria": "Middle East",
    "Iraq": "Middle East",
    "Iran": "Middle East",
    "Turkey": "Middle East",
    "Jordan": "Middle East",
    "Yemen": "Middle East",
    "Saudi Arabia": "Gulf States",
    "United Arab Emirates": "Gulf States",
    "Bahrain": "Gulf States",
    "Qatar": "Gulf States",
    "Kuwait": "Gulf States",
    "Oman": "Gulf States",
    # Africa
    "Libya": "North Africa",
    "Egypt": "North Africa",
    "Algeria": "North Africa",
    "Tunisia": "North Africa",
    "Morocco": "North Africa",
    "Sudan": "North Africa",
    "Mali": "West Africa",
    "Niger": "West Africa",
    "Burkina Faso": "West Africa",
    "Nigeria": "West Africa",
    "Benin": "West Africa",
    "Togo": "West Africa",
    "Ghana": "West Africa",
    "Mauritania": "West Africa",
    "Chad": "Central Africa",
    "Cameroon": "Central Africa",
    "Central African Republic": "Central Africa",
    "Democratic Republic of Congo": "Central Africa",
    "South Sudan": "East Africa",
    "Ethiopia": "East Africa",
    "Somalia": "East Africa",
    "Kenya": "East Africa",
    "Uganda": "East Africa",
    "Burundi": "East Africa",
    "Rwanda": "East Africa",
    "Eritrea": "East Africa",
    "Mozambique": "Southern Africa",
    "Zimbabwe": "Southern Africa",
    "South Africa": "Southern Africa",
    "Angola": "Southern Africa",
    # Asia
    "Afghanistan": "South Asia",
    "Pakistan": "South Asia",
    "India": "South Asia",
    "Bangladesh": "South Asia",
    "Sri Lanka": "South Asia",
    "Nepal": "South Asia",
    "Myanmar": "Southeast Asia",
    "Thailand": "Southeast Asia",
    "Philippines": "Southeast Asia",
    "Indonesia": "Southeast Asia",
    "China": "East Asia",
    "North Korea": "East Asia",
    "South Korea": "East Asia",
    "Kazakhstan": "Central Asia",
    "Kyrgyzstan": "Central Asia",
    "Tajikistan": "Central Asia",
    # Americas
    "Mexico": "North America",
    "United States": "North America",
    "Honduras": "Central America",
    "Guatemala": "Central America",
    "El Salvador": "Central America",
    "Nicaragua": "Central America",
    "Haiti": "Caribbean",
    "Jamaica": "Caribbean",
    "Colombia": "South America",
    "Venezuela": "South America",
    "Brazil": "South America",
    "Ecuador": "South America",
    "Peru": "South America",
    # Oceania
    "Papua New Guinea": "Pacific Islands",
})

def country_to_region(country: Optional[str]) -> str:
    """Return the (sub)region for a country name, or "Unknown"."""
    if not country:
        return UNKNOWN_REGION
    return COUNTRY_REGIONS.get(country.strip(), UNKNOWN_REGION)

def region_for_countries(countries: Iterable[str]) -> str:
    """First country with a known region wins; otherwise "Unknown"."""
    for c in countries:
        region = country_to_region(c)
        if region != UNKNOWN_REGION:
            return region
    return UNKNOWN_REGION

def parent_region(region: Optional[str]) -> str:
    """Map a region or subregion to its top-level region.

    Top-level regions map to themselves and names we do not know are
    returned unchanged, so `parent_region(parent_region(x)) == parent_region(x)`.
    """
    if not region:
        return UNKNOWN_REGION
    if region in REGION_GROUPS:
        return region
    return _SUBREGION_PARENTS.get(region, region)

def region_groups() -> Dict[str, list]:
    """Copy of the region groups (safe for callers to modify)."""
    return {k: list(v) for k, v in REGION_GROUPS.items()}
