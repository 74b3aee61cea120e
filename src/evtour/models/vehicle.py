"""Vehicle model."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import Field

from evtour.models._base import EvTourBaseModel


class ChargingPortType(StrEnum):
    TESLA = "Tesla"
    CCS = "CCS"
    CHADEMO = "CHAdeMO"
    J1772 = "J1772"
    NACS = "NACS"


class Vehicle(EvTourBaseModel):
    """An electric vehicle profile.

    Read-only input owned by the caller; the range estimator and the tour
    planner only ever read it.
    """

    id: UUID = Field(default_factory=uuid4)
    make: str = ""
    model: str = ""
    year: int | None = None
    battery_capacity_kwh: float = Field(gt=0)
    """Usable battery capacity in kWh."""
    epa_range_miles: float = Field(gt=0)
    """Rated range on a full battery under reference conditions."""
    consumption_kwh_per_mile: float = Field(gt=0)
    """Energy consumption rate in kWh per mile."""
    charging_ports: frozenset[ChargingPortType] = frozenset()
    """Charging standards the vehicle can accept."""

    @property
    def display_name(self) -> str:
        parts = [str(self.year) if self.year else "", self.make, self.model]
        return " ".join(part for part in parts if part)

    def supports_any(self, ports: Iterable[ChargingPortType]) -> bool:
        """Whether the vehicle accepts at least one of *ports*.

        An empty *ports* collection means the station did not advertise its
        connectors and is treated as compatible.
        """
        offered = frozenset(ports)
        if not offered:
            return True
        return bool(offered & self.charging_ports)
