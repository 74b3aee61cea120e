"""Domain models for evtour."""

from evtour.models._base import EvTourBaseModel, utcnow
from evtour.models.conditions import DrivingConditions
from evtour.models.narration import Narration, NarrationStatus, NarrationTiming
from evtour.models.poi import (
    POI,
    GeoLocation,
    InterestCategory,
    POICategory,
    POIHours,
    POIRating,
    POISource,
)
from evtour.models.tour import Tour, TourPlanningResult, TourStatus, TripUnsafe, Waypoint
from evtour.models.vehicle import ChargingPortType, Vehicle

__all__ = [
    "ChargingPortType",
    "DrivingConditions",
    "EvTourBaseModel",
    "GeoLocation",
    "InterestCategory",
    "Narration",
    "NarrationStatus",
    "NarrationTiming",
    "POI",
    "POICategory",
    "POIHours",
    "POIRating",
    "POISource",
    "Tour",
    "TourPlanningResult",
    "TourStatus",
    "TripUnsafe",
    "Vehicle",
    "Waypoint",
    "utcnow",
]
