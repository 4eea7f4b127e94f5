"""
Observable in-memory store of records.

A ``RecordStore`` holds the latest known records of one entity kind plus
a loading flag and the last error message. It performs no I/O; only the
repository that owns it mutates it, and readers either take a
``snapshot()`` or ``subscribe()`` to changes.

Lifecycle: a store starts empty when constructed and is simply dropped
with the process. Nothing is persisted.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from .logging_config import get_logger
from .models import BaseRecord, RecordId

logger = get_logger(__name__)

Subscriber = Callable[["StoreSnapshot"], None]


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of a store at one point in time."""

    records: Tuple[BaseRecord, ...] = ()
    loading: bool = False
    error: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.records)

    def with_status(self, status: str) -> List[BaseRecord]:
        """Records currently in the given status."""
        return [record for record in self.records if record.status == status]


class RecordStore:
    """
    Mutable holder of the record sequence, loading flag and error slot.

    The sequence mirrors the last successful fetch and is then changed
    incrementally: prepend on create, replace by id on update, remove by
    id on delete.
    """

    def __init__(self, name: str = "records"):
        self.name = name
        self._records: List[BaseRecord] = []
        self._error: Optional[str] = None
        self._in_flight = 0
        self._subscribers: List[Subscriber] = []

    @property
    def records(self) -> Tuple[BaseRecord, ...]:
        return tuple(self._records)

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def count(self) -> int:
        return len(self._records)

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            records=tuple(self._records), loading=self.loading, error=self._error
        )

    def get(self, record_id: RecordId) -> Optional[BaseRecord]:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def with_status(self, status: str) -> List[BaseRecord]:
        return [record for record in self._records if record.status == status]

    @property
    def pending(self) -> List[BaseRecord]:
        return self.with_status("pending")

    # Subscriptions

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a reader called with a fresh snapshot after every change.

        Returns:
            A callable that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                # A broken reader must not undo a mutation already applied
                logger.error("store_subscriber_failed", store=self.name, error=str(e))

    # Loading flag

    @contextmanager
    def track_call(self) -> Iterator[None]:
        """
        Mark a repository call as outstanding for the duration of the block.

        Overlapping calls are counted, so ``loading`` stays true until the
        last of them exits, whatever the exit path.
        """
        self._in_flight += 1
        self._notify()
        try:
            yield
        finally:
            self._in_flight -= 1
            self._notify()

    # Sequence mutations

    def replace_all(self, records: Sequence[BaseRecord]) -> None:
        self._records = list(records)
        self._notify()

    def prepend(self, record: BaseRecord) -> None:
        self._records.insert(0, record)
        self._notify()

    def replace_by_id(self, record: BaseRecord) -> bool:
        """
        Replace the cached record sharing ``record.id`` at its current index.

        Returns:
            False when no cached record has that id (sequence unchanged)
        """
        for index, existing in enumerate(self._records):
            if existing.id == record.id:
                self._records[index] = record
                self._notify()
                return True
        return False

    def remove_by_id(self, record_id: RecordId) -> bool:
        """
        Drop every cached record with the given id.

        Returns:
            False when the id was not cached (sequence unchanged)
        """
        remaining = [record for record in self._records if record.id != record_id]
        removed = len(remaining) != len(self._records)
        self._records = remaining
        if removed:
            self._notify()
        return removed

    # Error slot

    def set_error(self, message: str) -> None:
        self._error = message
        self._notify()

    def clear_error(self) -> None:
        self._error = None
        self._notify()
