from __future__ import annotations

from uuid import uuid4

import pytest

from evtour.models import (
    POI,
    ChargingPortType,
    DrivingConditions,
    GeoLocation,
    Narration,
    POICategory,
    Vehicle,
)


def make_poi(
    name: str,
    latitude: float,
    longitude: float = 0.0,
    category: POICategory = POICategory.ATTRACTION,
    **kwargs: object,
) -> POI:
    return POI(
        name=name,
        category=category,
        location=GeoLocation(latitude=latitude, longitude=longitude),
        **kwargs,
    )


def make_charger(name: str, latitude: float, longitude: float = 0.0, *ports: ChargingPortType) -> POI:
    return make_poi(name, latitude, longitude, POICategory.EV_CHARGER, charging_ports=frozenset(ports))


def make_narration(name: str = "Old Mill", duration_seconds: float = 180.0) -> Narration:
    return Narration(
        poi_id=uuid4(),
        poi_name=name,
        title=f"About {name}",
        content=f"A short story about {name}.",
        duration_seconds=duration_seconds,
    )


@pytest.fixture
def model3() -> Vehicle:
    return Vehicle(
        make="Tesla",
        model="Model 3",
        year=2023,
        battery_capacity_kwh=75.0,
        epa_range_miles=272.0,
        consumption_kwh_per_mile=0.276,
        charging_ports=frozenset({ChargingPortType.TESLA, ChargingPortType.NACS}),
    )


@pytest.fixture
def standard() -> DrivingConditions:
    return DrivingConditions.standard()
