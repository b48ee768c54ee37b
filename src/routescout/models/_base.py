"""Base model for upstream service responses.

Every response model inherits from :class:`RouteScoutModel` which
provides:

* frozen, ``extra="ignore"`` configuration so unknown upstream keys
  never break parsing.
* A ``model_validator(mode="before")`` that drops empty values
  (``None``, ``""``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RouteScoutModel(BaseModel):
    """Base for geocoding, routing and place-search response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original upstream object."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop empty values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = RouteScoutModel._clean_dict(values)

        # Only auto-stash raw when not explicitly provided (i.e. model_validate
        # from an upstream dict).
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
