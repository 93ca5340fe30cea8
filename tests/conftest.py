from datetime import date

import pytest

from conflictmap.models import ConflictDefinition, ConflictMetrics, ConflictRecord, Location


def make_definition(id, countries, type="insurgency", start_date="2015-01-01", name=None):
    return ConflictDefinition(
        id=id,
        name=name or id.title(),
        countries=tuple(countries),
        description="",
        primary_actors=("Government", "Rebels"),
        start_date=start_date,
        location=Location(lat=10.0, lng=20.0),
        type=type,
    )


def make_record(id="c1", type="insurgency", region="West Africa", intensity="moderate",
                duration="ongoing", casualties=5000, start_date="2015-01-01", **kw):
    defaults = dict(
        name=id.upper(),
        location=Location(lat=10.0, lng=20.0),
        countries=("Mali",),
        metrics=ConflictMetrics(deadliness=casualties if isinstance(casualties, int) else 0,
                                diffusion=0.1, danger=10, fragmentation=2, estimated=False),
    )
    defaults.update(kw)
    return ConflictRecord(
        id=id,
        type=type,
        region=region,
        intensity=intensity,
        duration=duration,
        casualties=casualties,
        start_date=start_date,
        **defaults,
    )


@pytest.fixture
def today():
    return date(2025, 6, 1)
