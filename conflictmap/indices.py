"""
Indices (precomputed lookup tables)
===================================

The aggregator needs to answer "which conflicts does this country belong to?"
for every metric row. We answer it with a map built once per data load:

- `by_country["Pakistan"]` -> ["afghanistan-taliban", "pakistan-militancy"]

A country can map to several conflicts (many-to-many); ids keep catalog order.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Sequence
from .models import ConflictDefinition

@dataclass
class CountryIndex:
    """Country -> conflict ids."""
    by_country: Dict[str, List[str]]

    def conflicts_for(self, country: str) -> List[str]:
        return self.by_country.get(country.strip(), []) if country else []

def build_country_index(catalog: Sequence[ConflictDefinition]) -> CountryIndex:
    """Build the country index from catalog membership."""
    by_country: Dict[str, List[str]] = {}

    for d in catalog:
        for country in d.countries:
            ids = by_country.setdefault(country, [])
            # a definition listing the same country twice still counts once
            if d.id not in ids:
                ids.append(d.id)

    return CountryIndex(by_country=by_country)
