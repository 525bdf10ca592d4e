import asyncio
from unittest.mock import MagicMock

import pytest

from belix.scheduler.sweep_scheduler import PeriodicSweeper


def test_run_once_returns_removed_count() -> None:
    sweeper = PeriodicSweeper("test", MagicMock(return_value=3), interval_seconds=60)

    assert sweeper.run_once() == 3


def test_run_once_swallows_failures() -> None:
    sweep_fn = MagicMock(side_effect=RuntimeError("boom"))
    sweeper = PeriodicSweeper("test", sweep_fn, interval_seconds=60)

    assert sweeper.run_once() == 0
    sweep_fn.assert_called_once()


@pytest.mark.asyncio
async def test_loop_survives_failing_cycle() -> None:
    calls = []

    def flaky_sweep() -> int:
        calls.append(None)
        if len(calls) == 1:
            raise RuntimeError("bad cycle")
        return 0

    sweep_fn = MagicMock(side_effect=flaky_sweep)
    sweeper = PeriodicSweeper("test", sweep_fn, interval_seconds=0.001)

    sweeper.start()
    for _ in range(100):
        await asyncio.sleep(0.005)
        if sweep_fn.call_count >= 3:
            break
    await sweeper.shutdown()

    assert sweep_fn.call_count >= 3
    assert sweeper.running is False


@pytest.mark.asyncio
async def test_start_twice_keeps_single_task() -> None:
    sweeper = PeriodicSweeper("test", MagicMock(return_value=0), interval_seconds=60)

    sweeper.start()
    first_task = sweeper._task
    sweeper.start()

    assert sweeper._task is first_task
    assert sweeper.running is True
    await sweeper.shutdown()
    assert first_task.cancelled()


@pytest.mark.asyncio
async def test_shutdown_without_start() -> None:
    sweeper = PeriodicSweeper("test", MagicMock(return_value=0), interval_seconds=60)

    await sweeper.shutdown()

    assert sweeper.running is False
