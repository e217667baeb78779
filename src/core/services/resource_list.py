"""Resource list controller.

One generic controller owns the paging/filter/sort state of a list screen,
issues the fetches and exposes the current page together with its loading
and error flags. Screens only render `current()`.

Every state-changing call triggers exactly one fetch with the latest
`PageRequest`. Fetches may overlap (rapid paging, typing a filter) and the
transport does not order their completions, so each fetch carries a
sequence number and only the response of the newest one is applied.
Superseded responses, successful or not, are dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from core.domain.errors import AdminConsoleError
from core.domain.models import PageRequest, PageResult
from core.interfaces.fetcher import PageFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")

StateListener = Callable[["ListState[T]"], None]


@dataclass(frozen=True)
class ListState(Generic[T]):
    """Immutable snapshot of a controller."""

    request: PageRequest
    data: PageResult[T] | None = None
    loading: bool = False
    error: AdminConsoleError | None = None

    @property
    def items(self) -> list[T]:
        return list(self.data.items) if self.data else []

    @property
    def is_empty(self) -> bool:
        """True when a page was loaded and it holds no items (not an error)."""

        return self.data is not None and self.data.is_empty


class ResourceListController(Generic[T]):
    def __init__(
        self,
        fetcher: PageFetcher[T],
        initial_request: PageRequest | None = None,
        *,
        name: str = "resource",
    ) -> None:
        self.name = name
        self._fetcher = fetcher
        self._request = initial_request or PageRequest()
        self._data: PageResult[T] | None = None
        self._error: AdminConsoleError | None = None
        self._loading = False
        self._seq = 0
        self._listeners: list[StateListener] = []

    @property
    def request(self) -> PageRequest:
        return self._request

    def current(self) -> ListState[T]:
        return ListState(
            request=self._request,
            data=self._data,
            loading=self._loading,
            error=self._error,
        )

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` after every applied change. Returns an unsubscribe function."""

        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def set_filters(self, patch: dict[str, str | None]) -> ListState[T]:
        self._request = self._request.with_filters(patch)
        return await self._fetch()

    async def set_sort(self, sort: str | None) -> ListState[T]:
        self._request = self._request.with_sort(sort)
        return await self._fetch()

    async def set_page(self, page: int) -> ListState[T]:
        self._request = self._request.with_page(page)
        return await self._fetch()

    async def set_limit(self, limit: int) -> ListState[T]:
        self._request = self._request.with_limit(limit)
        return await self._fetch()

    async def refresh(self) -> ListState[T]:
        """Repeat the last request without touching paging or filters."""

        return await self._fetch()

    async def _fetch(self) -> ListState[T]:
        self._seq += 1
        seq = self._seq
        request = self._request
        self._loading = True
        self._notify()

        logger.debug("Fetching page", extra={"resource": self.name, "seq": seq, "page": request.page})
        try:
            result = await self._fetcher(request)
        except AdminConsoleError as exc:
            if self._is_stale(seq):
                return self.current()
            logger.info("Fetch failed", extra={"resource": self.name, "error": exc.message})
            self._error = exc
        except Exception:
            if not self._is_stale(seq):
                self._loading = False
                self._notify()
            raise
        else:
            if self._is_stale(seq):
                return self.current()
            self._data = result
            self._error = None

        self._loading = False
        self._notify()
        return self.current()

    def _is_stale(self, seq: int) -> bool:
        if seq == self._seq:
            return False
        logger.debug(
            "Discarding stale response",
            extra={"resource": self.name, "seq": seq, "latest": self._seq},
        )
        return True

    def _notify(self) -> None:
        state = self.current()
        for listener in list(self._listeners):
            listener(state)


def configure(
    fetcher: PageFetcher[T],
    initial_request: PageRequest | None = None,
    *,
    name: str = "resource",
) -> ResourceListController[T]:
    """Build a controller for one resource type."""

    return ResourceListController(fetcher, initial_request, name=name)
