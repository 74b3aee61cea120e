"""evtour - EV road-trip planning and in-car narration core."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("evtour")
except PackageNotFoundError:
    __version__ = "0+local"
from evtour.config import TourConfig
from evtour.content import AudioPlayback, ContentGenerator, TemplateContentGenerator, estimate_duration_seconds
from evtour.exceptions import (
    CollaboratorError,
    ConfigError,
    ContentGenerationFailedError,
    EvTourError,
    InvalidInputError,
    NarrationNotFoundError,
    NarrationStateError,
    NoRouteFoundError,
    PlaybackFailedError,
    TourStateError,
)
from evtour.models import (
    POI,
    ChargingPortType,
    DrivingConditions,
    GeoLocation,
    InterestCategory,
    Narration,
    NarrationStatus,
    NarrationTiming,
    POICategory,
    POIHours,
    POIRating,
    POISource,
    Tour,
    TourPlanningResult,
    TourStatus,
    TripUnsafe,
    Vehicle,
    Waypoint,
)
from evtour.narration_queue import NarrationQueue
from evtour.narrator import PreparationReport, TourNarrator
from evtour.planner import StandardTourPlanner, TourPlanner
from evtour.poi_lookup import InMemoryPOILookup, POIFilter, POILookup, POISortOrder, filter_pois
from evtour.range_estimation import RangeEstimator, SimpleRangeEstimator
from evtour.routing import RouteOptimizer, calculate_total_distance, optimize_route
from evtour.timing import (
    NarrationTimingCalculator,
    StandardNarrationTimingCalculator,
    estimated_time_to_arrival,
    has_passed_poi,
)

__all__ = [
    "AudioPlayback",
    "ChargingPortType",
    "CollaboratorError",
    "ConfigError",
    "ContentGenerationFailedError",
    "ContentGenerator",
    "DrivingConditions",
    "EvTourError",
    "GeoLocation",
    "InMemoryPOILookup",
    "InterestCategory",
    "InvalidInputError",
    "Narration",
    "NarrationNotFoundError",
    "NarrationQueue",
    "NarrationStateError",
    "NarrationStatus",
    "NarrationTiming",
    "NarrationTimingCalculator",
    "NoRouteFoundError",
    "POI",
    "POICategory",
    "POIFilter",
    "POIHours",
    "POILookup",
    "POIRating",
    "POISortOrder",
    "POISource",
    "PlaybackFailedError",
    "PreparationReport",
    "RangeEstimator",
    "RouteOptimizer",
    "SimpleRangeEstimator",
    "StandardNarrationTimingCalculator",
    "StandardTourPlanner",
    "TemplateContentGenerator",
    "Tour",
    "TourConfig",
    "TourNarrator",
    "TourPlanner",
    "TourPlanningResult",
    "TourStateError",
    "TourStatus",
    "TripUnsafe",
    "Vehicle",
    "Waypoint",
    "__version__",
    "calculate_total_distance",
    "estimate_duration_seconds",
    "estimated_time_to_arrival",
    "filter_pois",
    "has_passed_poi",
    "optimize_route",
]
