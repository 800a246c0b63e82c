# ABOUTME: Generic ordered, filterable record store bound to a single folder
# ABOUTME: Keeps the unfiltered snapshot apart from the filtered live view and drops stale loads
"""Generic ordered, filterable record store."""

import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator
from typing import Any

from mailthread.exceptions import DataError
from mailthread.models import MessageRecord

logger = logging.getLogger(__name__)

Loader = Callable[[str | None, dict[str, Any]], Awaitable[Iterable[MessageRecord]]]
Listener = Callable[..., None]


class ListStore:
    """Ordered records of one folder with an optional client-side filter.

    snapshot always holds the full batch as loaded, in server order. The live
    view (iteration, len, index_of, get_range, get_at) holds the records that
    pass the installed filter.
    """

    def __init__(self, folder_id: str | None = None, loader: Loader | None = None):
        self.folder_id = folder_id
        self.loader = loader
        self.snapshot: list[MessageRecord] = []
        self._live: list[MessageRecord] = []
        self._predicate: Callable[[MessageRecord], bool] | None = None
        self._listeners: dict[str, list[Listener]] = {}
        self._request_seq = 0
        self.last_params: dict[str, Any] = {}

    # --- Events ---

    def on(self, event: str, listener: Listener) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def un(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def fire(self, event: str, *args) -> None:
        for listener in list(self._listeners.get(event, [])):
            listener(self, *args)

    # --- Live view ---

    def __iter__(self) -> Iterator[MessageRecord]:
        return iter(self._live)

    def __len__(self) -> int:
        return len(self._live)

    def get_at(self, index: int) -> MessageRecord | None:
        if 0 <= index < len(self._live):
            return self._live[index]
        return None

    def index_of(self, record: MessageRecord) -> int:
        """Row index of the record in the live view by id, or -1."""
        for i, candidate in enumerate(self._live):
            if candidate.id == record.id:
                return i
        return -1

    def get_range(self, start: int = 0, end: int | None = None) -> list[MessageRecord]:
        """Records of the live view from start to end, both inclusive."""
        if end is None:
            end = len(self._live) - 1
        return self._live[max(0, start):end + 1]

    def get_store_length(self) -> int:
        """Number of messages the store represents (the unfiltered batch)."""
        return len(self.snapshot)

    # --- Filtering ---

    @property
    def is_filtered(self) -> bool:
        return self._predicate is not None

    def filter_by(self, predicate: Callable[[MessageRecord], bool]) -> None:
        self._predicate = predicate
        self._live = [record for record in self.snapshot if predicate(record)]
        self.fire("filterchange")

    def clear_filter(self, suppress_event: bool = False) -> None:
        self._predicate = None
        self._live = list(self.snapshot)
        if not suppress_event:
            self.fire("filterchange")

    # --- Loading ---

    def load_records(self, records: Iterable[MessageRecord]) -> None:
        """Replace the batch with records and notify 'load' listeners.

        Any filter is cleared; subclasses reinstall theirs in on_load.
        """
        self.snapshot = list(records)
        self.clear_filter(suppress_event=True)
        self.on_load(self.snapshot)
        self.fire("load", self.snapshot)

    def on_load(self, records: list[MessageRecord]) -> None:
        """Hook run after a batch replaced the snapshot, before 'load' fires."""

    async def load(
        self, params: dict[str, Any] | None = None, cancel_previous_request: bool = True
    ) -> list[MessageRecord] | None:
        """Fetch a fresh batch through the loader.

        With cancel_previous_request a response that is no longer the most
        recent request is dropped and None is returned.
        """
        if self.loader is None:
            raise DataError(
                "Store has no loader configured",
                recovery_hint="Pass loader= when creating the store, or use load_records()",
            )

        self._request_seq += 1
        request_id = self._request_seq
        params = dict(params or {})
        self.last_params = params

        try:
            records = list(await self.loader(self.folder_id, params))
        except Exception as e:
            logger.error(f"Loading folder {self.folder_id} failed: {e}")
            raise

        if cancel_previous_request and request_id != self._request_seq:
            logger.debug(f"Dropping stale load {request_id} (latest is {self._request_seq})")
            return None

        self.load_records(records)
        return self.snapshot

    async def reload(self, params: dict[str, Any] | None = None) -> list[MessageRecord] | None:
        """Repeat the last load, with params merged over the previous ones."""
        merged = dict(self.last_params)
        merged.update(params or {})
        return await self.load(merged)
