"""Point-of-interest and location models."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import Field

from evtour.geo import haversine_miles, intermediate_point, midpoint
from evtour.models._base import EvTourBaseModel, utcnow
from evtour.models.vehicle import ChargingPortType


class GeoLocation(EvTourBaseModel):
    """A geographic coordinate in degrees."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    altitude: float | None = None
    """Altitude in meters."""
    address: str | None = None

    def distance_to(self, other: GeoLocation) -> float:
        """Great-circle distance to *other* in miles."""
        return haversine_miles(self, other)

    def midpoint_to(self, other: GeoLocation) -> GeoLocation:
        lat, lon = midpoint(self, other)
        return GeoLocation(latitude=lat, longitude=lon)

    def interpolate_to(self, other: GeoLocation, fraction: float) -> GeoLocation:
        """Point *fraction* of the way to *other* along the great circle."""
        lat, lon = intermediate_point(self, other, fraction)
        return GeoLocation(latitude=lat, longitude=lon)


class InterestCategory(StrEnum):
    FOOD = "food"
    CULTURE = "culture"
    HISTORY = "history"
    NATURE = "nature"
    ADVENTURE = "adventure"
    SCENIC = "scenic"
    RELAXATION = "relaxation"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"


class POICategory(StrEnum):
    RESTAURANT = "Restaurant"
    CAFE = "Cafe"
    ATTRACTION = "Attraction"
    PARK = "Park"
    MUSEUM = "Museum"
    HISTORIC_SITE = "Historic Site"
    SCENIC = "Scenic Viewpoint"
    HIKING = "Hiking Trail"
    BEACH = "Beach"
    LAKE = "Lake"
    WATERFALL = "Waterfall"
    EV_CHARGER = "EV Charger"
    HOTEL = "Hotel"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"

    @property
    def related_interests(self) -> frozenset[InterestCategory]:
        """Interest categories a POI of this category appeals to."""
        return _RELATED_INTERESTS.get(self, frozenset())


_RELATED_INTERESTS: dict[POICategory, frozenset[InterestCategory]] = {
    POICategory.RESTAURANT: frozenset({InterestCategory.FOOD}),
    POICategory.CAFE: frozenset({InterestCategory.FOOD}),
    POICategory.ATTRACTION: frozenset({InterestCategory.CULTURE, InterestCategory.HISTORY}),
    POICategory.MUSEUM: frozenset({InterestCategory.CULTURE, InterestCategory.HISTORY}),
    POICategory.HISTORIC_SITE: frozenset({InterestCategory.CULTURE, InterestCategory.HISTORY}),
    POICategory.PARK: frozenset({InterestCategory.NATURE, InterestCategory.ADVENTURE}),
    POICategory.HIKING: frozenset({InterestCategory.NATURE, InterestCategory.ADVENTURE}),
    POICategory.WATERFALL: frozenset({InterestCategory.NATURE, InterestCategory.ADVENTURE}),
    POICategory.SCENIC: frozenset({InterestCategory.SCENIC, InterestCategory.NATURE}),
    POICategory.BEACH: frozenset({InterestCategory.RELAXATION, InterestCategory.NATURE}),
    POICategory.LAKE: frozenset({InterestCategory.RELAXATION, InterestCategory.NATURE}),
    POICategory.HOTEL: frozenset({InterestCategory.RELAXATION}),
    POICategory.SHOPPING: frozenset({InterestCategory.SHOPPING}),
    POICategory.ENTERTAINMENT: frozenset({InterestCategory.ENTERTAINMENT}),
}


class POISource(StrEnum):
    GOOGLE = "Google Places"
    YELP = "Yelp"
    FOURSQUARE = "Foursquare"
    USER_SUBMITTED = "User Submitted"
    CURATED = "Curated"


class POIRating(EvTourBaseModel):
    average_rating: float = Field(ge=0, le=5)
    total_ratings: int = Field(default=0, ge=0)
    price_level: int | None = Field(default=None, ge=1, le=4)
    """Price level 1-4, where 1 is least expensive."""


class POIHours(EvTourBaseModel):
    description: str
    """Free-form opening hours (e.g. ``"Mon-Fri 9am-5pm"``)."""
    is_open_now: bool | None = None


class POI(EvTourBaseModel):
    """A point of interest.

    Points whose category is :attr:`POICategory.EV_CHARGER` are charging
    candidates for the tour planner; their ``charging_ports`` lists the
    connectors the station offers (empty when unknown).
    """

    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str | None = None
    category: POICategory
    location: GeoLocation
    rating: POIRating | None = None
    hours: POIHours | None = None
    tags: frozenset[str] = frozenset()
    source: POISource = POISource.CURATED
    charging_ports: frozenset[ChargingPortType] = frozenset()
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def is_charger(self) -> bool:
        return self.category == POICategory.EV_CHARGER

    def distance_to(self, location: GeoLocation) -> float:
        return self.location.distance_to(location)

    def is_within(self, miles: float, of: GeoLocation) -> bool:
        return self.location.distance_to(of) <= miles

    def matches_interests(self, interests: Iterable[InterestCategory]) -> bool:
        return not self.category.related_interests.isdisjoint(interests)
