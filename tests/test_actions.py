"""
ActionDispatcher tests: per-key exclusion and success callbacks.
"""

from __future__ import annotations

import asyncio

import pytest

from core.domain.errors import ActionInProgressError, DomainRejectedError
from core.services.actions import ActionDispatcher, action_key


def test_action_key_format():
    assert action_key("status", "u1") == "status-u1"


@pytest.mark.asyncio
async def test_duplicate_key_is_rejected_while_in_flight():
    dispatcher = ActionDispatcher()
    release = asyncio.Event()
    calls = {"n": 0}

    async def mutation():
        calls["n"] += 1
        await release.wait()
        return "done"

    first = asyncio.create_task(dispatcher.run("status-u1", mutation))
    await asyncio.sleep(0)
    assert dispatcher.is_running("status-u1")

    with pytest.raises(ActionInProgressError) as excinfo:
        await dispatcher.run("status-u1", mutation)
    assert excinfo.value.key == "status-u1"

    release.set()
    assert await first == "done"
    assert calls["n"] == 1
    assert dispatcher.state == {}


@pytest.mark.asyncio
async def test_different_keys_run_concurrently():
    dispatcher = ActionDispatcher()
    release = asyncio.Event()

    async def mutation():
        await release.wait()

    tasks = [
        asyncio.create_task(dispatcher.run("status-u1", mutation)),
        asyncio.create_task(dispatcher.run("visibility-u1", mutation)),
    ]
    await asyncio.sleep(0)
    assert dispatcher.state == {"status-u1": True, "visibility-u1": True}

    release.set()
    await asyncio.gather(*tasks)
    assert dispatcher.state == {}


@pytest.mark.asyncio
async def test_failure_releases_key_and_skips_callback():
    dispatcher = ActionDispatcher()
    callbacks: list[str] = []

    async def failing():
        raise DomainRejectedError("Failed to update user status", status_code=500)

    with pytest.raises(DomainRejectedError):
        await dispatcher.run("status-u1", failing, on_success=lambda: callbacks.append("x"))

    assert not dispatcher.is_running("status-u1")
    assert callbacks == []

    async def ok():
        return 1

    assert await dispatcher.run("status-u1", ok) == 1


@pytest.mark.asyncio
async def test_async_success_callback_is_awaited():
    dispatcher = ActionDispatcher()
    refreshed: list[bool] = []

    async def refresh():
        refreshed.append(True)

    async def ok():
        return None

    await dispatcher.run("horoscope-h1", ok, on_success=refresh)

    assert refreshed == [True]
