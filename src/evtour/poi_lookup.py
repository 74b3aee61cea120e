"""POI lookup contract and an in-memory implementation.

The tour planner only depends on :class:`POILookup`; real deployments plug
in a client for their POI provider. :class:`InMemoryPOILookup` serves a
fixed catalogue (offline packages, demos, tests) through the same filtering
rules the app applies to provider results.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import StrEnum
from typing import Protocol
from uuid import UUID

from pydantic import Field

from evtour.models._base import EvTourBaseModel
from evtour.models.poi import POI, GeoLocation, InterestCategory, POICategory, POISource

_logger = logging.getLogger(__name__)


class POILookup(Protocol):
    """Finds candidate POIs around a location."""

    async def find_nearby(
        self,
        location: GeoLocation,
        radius_miles: float,
        categories: frozenset[POICategory] | None = None,
    ) -> list[POI]:
        """Return POIs within *radius_miles*, closest first."""
        ...


class POISortOrder(StrEnum):
    DISTANCE = "distance"
    RATING = "rating"
    NAME = "name"
    NEWEST = "newest"


class POIFilter(EvTourBaseModel):
    """Criteria for filtering POIs. Unset criteria match everything."""

    categories: frozenset[POICategory] | None = None
    interests: frozenset[InterestCategory] | None = None
    location: GeoLocation | None = None
    radius_miles: float | None = Field(default=None, ge=0)
    minimum_rating: float | None = Field(default=None, ge=0, le=5)
    maximum_price_level: int | None = Field(default=None, ge=1, le=4)
    tags: frozenset[str] | None = None
    sources: frozenset[POISource] | None = None

    @classmethod
    def ev_chargers(cls, near: GeoLocation, radius_miles: float) -> POIFilter:
        return cls(categories=frozenset({POICategory.EV_CHARGER}), location=near, radius_miles=radius_miles)

    def matches(self, poi: POI) -> bool:
        if self.categories is not None and poi.category not in self.categories:
            return False
        if self.interests and not poi.matches_interests(self.interests):
            return False
        if self.location is not None and self.radius_miles is not None:
            if not poi.is_within(self.radius_miles, of=self.location):
                return False
        if self.minimum_rating is not None:
            if poi.rating is None or poi.rating.average_rating < self.minimum_rating:
                return False
        if self.maximum_price_level is not None and poi.rating is not None and poi.rating.price_level is not None:
            if poi.rating.price_level > self.maximum_price_level:
                return False
        if self.tags and poi.tags.isdisjoint(self.tags):
            return False
        return self.sources is None or poi.source in self.sources


def filter_pois(
    pois: Iterable[POI],
    poi_filter: POIFilter,
    sort_order: POISortOrder = POISortOrder.DISTANCE,
) -> list[POI]:
    """Filter *pois* and sort them.

    Distance sorting needs ``poi_filter.location``; without it the input
    order is kept. Ties always fall back to the POI id.
    """
    matched = [poi for poi in pois if poi_filter.matches(poi)]
    if sort_order == POISortOrder.DISTANCE:
        origin = poi_filter.location
        if origin is None:
            return matched
        return sorted(matched, key=lambda p: (p.distance_to(origin), str(p.id)))
    if sort_order == POISortOrder.RATING:
        return sorted(matched, key=lambda p: (-(p.rating.average_rating if p.rating else 0.0), str(p.id)))
    if sort_order == POISortOrder.NAME:
        return sorted(matched, key=lambda p: (p.name, str(p.id)))
    return sorted(matched, key=lambda p: (p.created_at, str(p.id)), reverse=True)


class InMemoryPOILookup:
    """POI lookup over a fixed in-process catalogue."""

    def __init__(self, pois: Sequence[POI] = ()) -> None:
        self._pois: dict[UUID, POI] = {poi.id: poi for poi in pois}

    def __len__(self) -> int:
        return len(self._pois)

    def add(self, poi: POI) -> None:
        self._pois[poi.id] = poi

    def remove(self, poi_id: UUID) -> None:
        self._pois.pop(poi_id, None)

    def get(self, poi_id: UUID) -> POI | None:
        return self._pois.get(poi_id)

    async def find(self, poi_filter: POIFilter, sort_order: POISortOrder = POISortOrder.DISTANCE) -> list[POI]:
        return filter_pois(self._pois.values(), poi_filter, sort_order)

    async def find_nearby(
        self,
        location: GeoLocation,
        radius_miles: float,
        categories: frozenset[POICategory] | None = None,
    ) -> list[POI]:
        poi_filter = POIFilter(categories=categories, location=location, radius_miles=radius_miles)
        found = filter_pois(self._pois.values(), poi_filter)
        _logger.debug("find_nearby radius=%.1f categories=%s -> %d result(s)", radius_miles, categories, len(found))
        return found
