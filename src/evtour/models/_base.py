"""Base model shared by every evtour domain type.

Every model inherits from :class:`EvTourBaseModel` which provides:

* ``frozen=True`` so instances handed to callers cannot be mutated
  in place; changes are expressed as new instances via :meth:`evolve`.
* ``alias_generator=to_camel`` so an outer persistence or API layer can
  ``model_dump(by_alias=True)`` and get camelCase keys, while Python
  code keeps using snake_case field names.
* ``extra="forbid"`` so misspelled keyword arguments fail loudly.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Self

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(UTC)


class EvTourBaseModel(BaseModel):
    """Base for evtour domain models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def evolve(self, **changes: Any) -> Self:
        """Return a validated copy with *changes* applied.

        Unlike ``model_copy(update=...)`` the result goes through field
        and model validators again, so invariants keep holding.
        """
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)
