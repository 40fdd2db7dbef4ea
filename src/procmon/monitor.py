"""Process enumeration engine for procmon."""

import os
import re

import structlog

from procmon.config import MAX_PROCESSES, PROC_ROOT
from procmon.models import ProcessSnapshot
from procmon.reader import AttributeReader

log = structlog.get_logger(__name__)

_LEADING_DIGITS = re.compile(r"[0-9]+")


class ProcmonError(Exception):
    """Base class for procmon errors."""


class ProcessListingError(ProcmonError):
    """The process listing could not be opened."""

    def __init__(self, proc_root: str, reason: str) -> None:
        super().__init__(f"{proc_root}: {reason}")
        self.proc_root = proc_root
        self.reason = reason


def parse_pid(name: str) -> int | None:
    """
    Extract a PID from a listing entry name.

    Only names starting with an ASCII decimal digit are PID entries; the PID
    is the leading run of such digits. Returns None for anything else,
    including 0.
    """
    match = _LEADING_DIGITS.match(name)
    if match is None:
        return None
    pid = int(match.group())
    return pid if pid > 0 else None


class ProcessMonitor:
    """
    Process monitor that builds one bounded snapshot per collection.

    Walks the process listing in the order the OS yields it and reads each
    process through an AttributeReader. Processes with no readable resident
    memory are left out, and enumeration stops silently once the snapshot
    is full.
    """

    def __init__(
        self,
        proc_root: str | os.PathLike[str] = PROC_ROOT,
        capacity: int = MAX_PROCESSES,
        reader: AttributeReader | None = None,
    ) -> None:
        """
        Initialize the ProcessMonitor.

        Args:
            proc_root: Directory holding one subdirectory per process.
            capacity: Maximum number of entries per snapshot. Default 1024.
            reader: Attribute reader to use. Defaults to one over proc_root.
        """
        self._proc_root = os.fspath(proc_root)
        self._capacity = capacity
        self._reader = reader if reader is not None else AttributeReader(self._proc_root)

    @property
    def proc_root(self) -> str:
        """Get the process listing root."""
        return self._proc_root

    @property
    def capacity(self) -> int:
        """Get the snapshot capacity."""
        return self._capacity

    def collect(self) -> ProcessSnapshot:
        """
        Collect a fresh snapshot of the live processes.

        Raises:
            ProcessListingError: If the process listing cannot be opened.
        """
        snapshot = ProcessSnapshot(self._capacity)
        seen: set[int] = set()
        skipped = 0

        try:
            listing = os.scandir(self._proc_root)
        except OSError as exc:
            raise ProcessListingError(self._proc_root, exc.strerror or str(exc)) from exc

        with listing:
            while not snapshot.is_full:
                try:
                    entry = next(listing)
                except StopIteration:
                    break
                except OSError as exc:
                    # A failed read ends the listing; keep what was collected
                    log.debug("listing_read_failed", proc_root=self._proc_root, error=str(exc))
                    break

                pid = parse_pid(entry.name)
                if pid is None or pid in seen:
                    continue

                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    # Entry vanished mid-scan
                    skipped += 1
                    continue
                if not is_dir:
                    continue

                seen.add(pid)
                process = self._reader.read(pid)
                if process.memory_usage > 0:
                    snapshot.append(process)
                else:
                    skipped += 1

        log.debug(
            "snapshot_collected",
            kept=len(snapshot),
            skipped=skipped,
            full=snapshot.is_full,
        )
        return snapshot
