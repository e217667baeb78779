"""Action dispatcher.

Runs single-item mutations keyed by an action key (`"status-<id>"`). While a
key is in flight a second run with the same key is rejected immediately,
which is what keeps a double submit from reaching the backend twice.
Unrelated keys run concurrently.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, TypeVar

from core.domain.errors import ActionInProgressError

logger = logging.getLogger(__name__)

R = TypeVar("R")

SuccessCallback = Callable[[], Any]


def action_key(action: str, record_id: object) -> str:
    return f"{action}-{record_id}"


class ActionDispatcher:
    def __init__(self) -> None:
        self._in_flight: dict[str, bool] = {}

    @property
    def state(self) -> dict[str, bool]:
        """Copy of the in-flight map (ActionState)."""

        return dict(self._in_flight)

    def is_running(self, key: str) -> bool:
        return self._in_flight.get(key, False)

    async def run(
        self,
        key: str,
        mutation: Callable[[], Awaitable[R]],
        *,
        on_success: SuccessCallback | None = None,
    ) -> R:
        """Run `mutation` under `key`.

        On success the key is released and `on_success` fires before this
        returns (awaited when it returns an awaitable, e.g. a controller
        refresh). On failure the key is released and the error propagates;
        `on_success` is not called.
        """

        if self._in_flight.get(key):
            logger.info("Rejected duplicate action", extra={"key": key})
            raise ActionInProgressError(key)

        self._in_flight[key] = True
        try:
            result = await mutation()
        finally:
            self._in_flight.pop(key, None)

        logger.debug("Action completed", extra={"key": key})
        if on_success is not None:
            outcome = on_success()
            if inspect.isawaitable(outcome):
                await outcome
        return result
