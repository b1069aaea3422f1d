"""Display-oriented view of a current-weather record.

The fetch engine treats provider records as opaque JSON. Consumers that
render them need a handful of nested fields; :class:`WeatherSummary`
pulls those out and fails loudly when a record lacks them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class WeatherSummary(BaseModel):
    """The fields a weather display requires."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    country: str | None = None
    temp: float
    humidity: float
    description: str
    wind_speed: float
    raw: dict[str, Any] = Field(default_factory=dict)
    """Original provider record."""

    @model_validator(mode="before")
    @classmethod
    def _flatten_record(cls, values: Any) -> Any:
        """Map the provider's nested layout onto flat fields."""
        if not isinstance(values, dict) or "main" not in values:
            return values
        main = values.get("main") or {}
        sys_block = values.get("sys") or {}
        wind = values.get("wind") or {}
        conditions = values.get("weather") or [{}]
        first = conditions[0] if isinstance(conditions, list) and conditions else {}
        return {
            "name": values.get("name"),
            "country": sys_block.get("country"),
            "temp": main.get("temp"),
            "humidity": main.get("humidity"),
            "description": first.get("description") if isinstance(first, dict) else None,
            "wind_speed": wind.get("speed"),
            "raw": values,
        }

    @classmethod
    def from_record(cls, record: Any) -> WeatherSummary:
        """Build a summary from a provider record.

        Raises :class:`pydantic.ValidationError` if a required field is missing.
        """
        return cls.model_validate(record)

    @property
    def location_label(self) -> str:
        return f"{self.name}, {self.country}" if self.country else self.name
