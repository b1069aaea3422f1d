from __future__ import annotations

from pyweatherfetch._cache import WeatherCache, normalize_location


def test_normalize_location_strips_and_casefolds() -> None:
    assert normalize_location("  New York ") == "new york"
    assert normalize_location("STRASSE") == normalize_location("straße")


def test_get_returns_stale_entry_without_evicting() -> None:
    now = [100.0]
    cache = WeatherCache(duration=10, clock=lambda: now[0])
    cache.set("oslo", {"name": "Oslo"})

    now[0] = 500.0
    entry = cache.get("oslo")

    assert entry is not None
    assert entry.timestamp == 100.0
    assert not cache.is_fresh(entry)
    assert cache.get_fresh("oslo") is None
    assert "oslo" in cache


def test_fresh_boundary_is_exclusive() -> None:
    now = [0.0]
    cache = WeatherCache(duration=300, clock=lambda: now[0])
    cache.set("rome", {"name": "Rome"})

    now[0] = 299.999
    assert cache.get_fresh("rome") is not None
    now[0] = 300.0
    assert cache.get_fresh("rome") is None


def test_set_overwrites_and_refreshes_timestamp() -> None:
    now = [0.0]
    cache = WeatherCache(clock=lambda: now[0])
    cache.set("lima", {"v": 1})
    now[0] = 42.0
    cache.set("lima", {"v": 2})

    entry = cache.get("lima")
    assert entry is not None
    assert entry.data == {"v": 2}
    assert entry.timestamp == 42.0
    assert len(cache) == 1


def test_invalidate_and_clear() -> None:
    cache = WeatherCache()
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.invalidate("a") is True
    assert cache.invalidate("a") is False
    cache.clear()

    assert len(cache) == 0
    assert cache.get("b") is None
