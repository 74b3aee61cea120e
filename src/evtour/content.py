"""Narration content and audio playback collaborators."""

from __future__ import annotations

from collections.abc import Set
from typing import Protocol

from evtour._constants import DEFAULT_WORDS_PER_MINUTE
from evtour.config import TourConfig
from evtour.exceptions import ContentGenerationFailedError
from evtour.models.narration import Narration
from evtour.models.poi import POI, InterestCategory, POICategory


class ContentGenerator(Protocol):
    """Produces a narration for a POI.

    Implementations raise :class:`ContentGenerationFailedError` when no
    content can be produced.
    """

    async def generate_narration(
        self,
        poi: POI,
        target_duration_seconds: float,
        interests: Set[InterestCategory],
    ) -> Narration: ...


class AudioPlayback(Protocol):
    """Speaks narrations.

    ``play`` returns once the narration finished and raises
    :class:`~evtour.exceptions.PlaybackFailedError` on failure.
    """

    async def play(self, narration: Narration) -> None: ...

    async def stop(self) -> None: ...


def estimate_duration_seconds(text: str, words_per_minute: float = DEFAULT_WORDS_PER_MINUTE) -> float:
    """Speaking time for *text* at *words_per_minute*."""
    return len(text.split()) / words_per_minute * 60.0


class TemplateContentGenerator:
    """Offline generator that fills category-specific templates.

    Used when no language model is reachable, and for demos. The duration
    is derived from the rendered text, so it can differ from the target.
    """

    source = "template"

    def __init__(self, words_per_minute: float = DEFAULT_WORDS_PER_MINUTE) -> None:
        self._words_per_minute = words_per_minute

    @classmethod
    def from_config(cls, config: TourConfig) -> TemplateContentGenerator:
        return cls(config.words_per_minute)

    async def generate_narration(
        self,
        poi: POI,
        target_duration_seconds: float,
        interests: Set[InterestCategory],
    ) -> Narration:
        if poi.is_charger:
            raise ContentGenerationFailedError(f"no story to tell about charger {poi.name}", poi_id=poi.id)

        content = self._render(poi)
        if interests and poi.matches_interests(interests):
            matched = sorted(poi.category.related_interests & set(interests))
            content += f" It is a good match for your interest in {' and '.join(matched)}."

        return Narration(
            poi_id=poi.id,
            poi_name=poi.name,
            title=f"About {poi.name}",
            content=content,
            duration_seconds=estimate_duration_seconds(content, self._words_per_minute),
            source=self.source,
        )

    @staticmethod
    def _render(poi: POI) -> str:
        rating = f"{poi.rating.average_rating:.1f}" if poi.rating else None
        category = poi.category.value.lower()
        if poi.category == POICategory.WATERFALL:
            return (
                f"You're approaching {poi.name}, one of the most spectacular waterfalls in the region. "
                f"This {poi.description or 'natural wonder'} has drawn visitors for generations. "
                "Keep an eye out for the viewing area, where you can stop and take in the falls."
            )
        if poi.category == POICategory.PARK:
            return (
                f"Coming up is {poi.name}. This {category} offers a peaceful retreat from the road. "
                f"{poi.description or 'Visitors enjoy the quiet atmosphere and well-kept grounds.'} "
                "It's a perfect spot to stretch your legs."
            )
        if poi.category in (POICategory.RESTAURANT, POICategory.CAFE):
            return (
                f"Just ahead you'll find {poi.name}, a local favorite known for {poi.description or 'great food'}. "
                f"With an average rating of {rating or 'excellent'} stars, it is one of the most popular spots around. "
                "If you're hungry, this could be your stop."
            )
        rated = f" Rated {rating} stars by visitors." if rating else ""
        return (
            f"You're approaching {poi.name}, a notable {category} in this area. "
            f"{poi.description or 'It is worth a visit if you have time.'}{rated} "
            "Watch for signs if you'd like to stop and explore."
        )
