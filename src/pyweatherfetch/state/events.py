"""Fetch engine events.

The engine never mutates state directly; it describes what happened as
one of these events and hands it to the state store.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FetchEventType(StrEnum):
    FETCH_START = "FETCH_START"
    FETCH_SUCCESS = "FETCH_SUCCESS"
    FETCH_ERROR = "FETCH_ERROR"
    FETCH_FALLBACK = "FETCH_FALLBACK"


class FetchEvent(BaseModel):
    """A single transition request for the state store."""

    model_config = ConfigDict(frozen=True)

    type: FetchEventType
    payload: Any = Field(default=None, description="Weather record for FETCH_SUCCESS")
    message: str | None = Field(default=None, description="User-visible text for FETCH_ERROR")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def start(cls) -> FetchEvent:
        return cls(type=FetchEventType.FETCH_START)

    @classmethod
    def success(cls, payload: Any) -> FetchEvent:
        return cls(type=FetchEventType.FETCH_SUCCESS, payload=payload)

    @classmethod
    def error(cls, message: str) -> FetchEvent:
        return cls(type=FetchEventType.FETCH_ERROR, message=message)

    @classmethod
    def fallback(cls) -> FetchEvent:
        return cls(type=FetchEventType.FETCH_FALLBACK)
