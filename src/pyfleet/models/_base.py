"""Base model for records received from a status source.

Every record model inherits from :class:`FleetBaseModel` which provides:

* A ``model_validator(mode="before")`` that strips sentinel values
  (``""``, ``"--"``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Sentinel strings status feeds use for "not available".
_SENTINELS = frozenset({"", "--", "NaN", "nan", "null"})


class FleetBaseModel(BaseModel):
    """Base for status record models.

    Handles:
    * sentinel values (``""``, ``"--"``, NaN) → dropped so the field
      default is used instead
    * Stashes the original record dict in ``raw``
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original record dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = FleetBaseModel._clean_dict(original)

        # A record key named "raw" is payload data; it never replaces the stash.
        cleaned["raw"] = original
        return cleaned
