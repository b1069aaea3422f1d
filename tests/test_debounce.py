from __future__ import annotations

import asyncio

import pytest

from pyweatherfetch._debounce import Debouncer


@pytest.mark.asyncio
async def test_burst_collapses_to_last_call() -> None:
    calls: list[str] = []
    debounced = Debouncer(calls.append, 0.03)

    for value in ("a", "ab", "abc"):
        debounced(value)
        await asyncio.sleep(0.005)

    assert calls == []
    await asyncio.sleep(0.1)
    assert calls == ["abc"]
    assert not debounced.pending


@pytest.mark.asyncio
async def test_fires_after_quiet_period_from_last_call() -> None:
    loop = asyncio.get_running_loop()
    fired_at: list[float] = []
    debounced = Debouncer(lambda: fired_at.append(loop.time()), 0.05)

    debounced()
    await asyncio.sleep(0.03)
    last_call = loop.time()
    debounced()
    await asyncio.sleep(0.15)

    assert len(fired_at) == 1
    assert fired_at[0] - last_call >= 0.045


@pytest.mark.asyncio
async def test_cancel_drops_pending_call() -> None:
    calls: list[int] = []
    debounced = Debouncer(calls.append, 0.01)

    debounced(1)
    assert debounced.cancel() is True
    assert debounced.cancel() is False
    await asyncio.sleep(0.05)

    assert calls == []


@pytest.mark.asyncio
async def test_flush_runs_async_target_without_waiting_for_timer() -> None:
    seen: list[str] = []

    async def _target(value: str) -> None:
        await asyncio.sleep(0)
        seen.append(value)

    debounced = Debouncer(_target, 60)
    debounced("x")
    task = debounced.flush()

    assert task is not None
    await task
    assert seen == ["x"]
    assert debounced.flush() is None


@pytest.mark.asyncio
async def test_async_target_does_not_block_next_call() -> None:
    release = asyncio.Event()
    started: list[str] = []

    async def _target(value: str) -> None:
        started.append(value)
        await release.wait()

    debounced = Debouncer(_target, 0)
    debounced("first")
    await asyncio.sleep(0.01)
    debounced("second")
    await asyncio.sleep(0.01)

    assert started == ["first", "second"]
    release.set()
    await debounced.wait()


def test_negative_delay_rejected() -> None:
    with pytest.raises(ValueError):
        Debouncer(print, -1)
