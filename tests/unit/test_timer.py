import asyncio

import pytest

from services.timer import SessionTimer


@pytest.mark.asyncio
async def test_timer_fires_once():
    fired = []
    timer = SessionTimer(lambda: fired.append(True))
    timer.arm(0.01)
    assert timer.armed
    assert 0 < timer.time_left() <= 0.01
    await asyncio.sleep(0.05)
    assert fired == [True]
    assert timer.fired and not timer.armed
    assert timer.time_left() == 0.0


@pytest.mark.asyncio
async def test_cancel_before_expiry_prevents_callback():
    fired = []
    timer = SessionTimer(lambda: fired.append(True))
    timer.arm(0.02)
    timer.cancel()
    timer.cancel()
    await asyncio.sleep(0.05)
    assert fired == []
    assert timer.cancelled


@pytest.mark.asyncio
async def test_cancel_after_fire_is_noop():
    async def on_expire():
        timer.cancel()

    timer = SessionTimer(on_expire)
    timer.arm(0)
    await asyncio.sleep(0.01)
    timer.cancel()
    assert timer.fired
    assert not timer.cancelled


@pytest.mark.asyncio
async def test_timer_cannot_be_rearmed():
    timer = SessionTimer(lambda: None)
    timer.arm(10)
    with pytest.raises(RuntimeError):
        timer.arm(10)
    timer.cancel()
