"""Data models for procmon."""

from collections.abc import Iterator
from dataclasses import dataclass

from procmon.config import MAX_PROCESSES, UNKNOWN_NAME, UNKNOWN_STATE, UNKNOWN_USER


def bounded(text: str, capacity: int) -> str:
    """Truncate text to at most capacity characters."""
    return text[: max(0, capacity)]


@dataclass(slots=True, frozen=True)
class ProcessSnapshotEntry:
    """Immutable record of one process at snapshot time."""

    pid: int
    name: str = UNKNOWN_NAME
    state: str = UNKNOWN_STATE  # Reserved, never read from the process
    username: str = UNKNOWN_USER
    cpu_usage: float = 0.0  # Reserved, always 0.0
    memory_usage: int = 0  # Resident set size in KB


class ProcessSnapshot:
    """
    Ordered, bounded sequence of ProcessSnapshotEntry.

    Entries keep the order they were appended in. Once capacity is reached
    further appends are refused, so a snapshot never holds more than
    capacity entries.
    """

    __slots__ = ("_capacity", "_entries")

    def __init__(self, capacity: int = MAX_PROCESSES) -> None:
        """
        Initialize an empty snapshot.

        Args:
            capacity: Maximum number of entries. Must not be negative.
        """
        if capacity < 0:
            raise ValueError(f"capacity must not be negative, got {capacity}")
        self._capacity = capacity
        self._entries: list[ProcessSnapshotEntry] = []

    @property
    def capacity(self) -> int:
        """Get the maximum number of entries."""
        return self._capacity

    @property
    def is_full(self) -> bool:
        """Check if no more entries can be appended."""
        return len(self._entries) >= self._capacity

    @property
    def entries(self) -> tuple[ProcessSnapshotEntry, ...]:
        """Get a read-only view of the entries."""
        return tuple(self._entries)

    def append(self, entry: ProcessSnapshotEntry) -> bool:
        """Append an entry, returning False if the snapshot is already full."""
        if self.is_full:
            return False
        self._entries.append(entry)
        return True

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ProcessSnapshotEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> ProcessSnapshotEntry:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"ProcessSnapshot(count={len(self._entries)}, capacity={self._capacity})"
