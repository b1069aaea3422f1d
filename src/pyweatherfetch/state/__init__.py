"""State/store layer.

This package is the single source of truth for the externally observable
fetch state. The fetch engine emits :class:`FetchEvent`s; only the store
applies them, through the pure :func:`reduce` function.
"""

from pyweatherfetch.state.events import FetchEvent, FetchEventType
from pyweatherfetch.state.store import FetchState, StateStore, reduce

__all__ = [
    "FetchEvent",
    "FetchEventType",
    "FetchState",
    "StateStore",
    "reduce",
]
