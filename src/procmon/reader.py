"""Per-process attribute extraction from the /proc tree."""

import os
import pwd

import structlog

from procmon.config import MAX_LINE, NAME_CAPACITY, PROC_ROOT, USERNAME_CAPACITY
from procmon.models import ProcessSnapshotEntry, bounded

log = structlog.get_logger(__name__)


def resolve_username(uid: int) -> str | None:
    """Look up the login name for a UID, returning None when there is no mapping."""
    try:
        return pwd.getpwuid(uid).pw_name
    except (KeyError, OverflowError):
        return None


def _first_token(value: str) -> str:
    """Return the first whitespace-separated token of a record value."""
    parts = value.split()
    if not parts:
        raise ValueError("empty value")
    return parts[0]


class AttributeReader:
    """
    Reads the attributes of a single process.

    Each record is read at most once per call. A process may exit between
    discovery and the read; every failure leaves the affected field at its
    default and is never raised to the caller.
    """

    def __init__(self, proc_root: str | os.PathLike[str] = PROC_ROOT) -> None:
        """
        Initialize the AttributeReader.

        Args:
            proc_root: Directory holding one subdirectory per process.
        """
        self._proc_root = os.fspath(proc_root)

    @property
    def proc_root(self) -> str:
        """Get the process listing root."""
        return self._proc_root

    def read(self, pid: int) -> ProcessSnapshotEntry:
        """
        Build a best-effort entry for pid.

        Fields that cannot be read keep their defaults: name and username
        "unknown", state "?", cpu_usage 0.0 and memory_usage 0.
        """
        fields: dict[str, object] = {}

        name = self._read_name(pid)
        if name is not None:
            fields["name"] = name

        username, memory_usage = self._read_status(pid)
        if username is not None:
            fields["username"] = username
        if memory_usage is not None:
            fields["memory_usage"] = memory_usage

        return ProcessSnapshotEntry(pid=pid, **fields)

    def _record_path(self, pid: int, record: str) -> str:
        """Path of one of a process's records under the listing root."""
        return os.path.join(self._proc_root, str(pid), record)

    def _read_name(self, pid: int) -> str | None:
        """Read the short command name from the comm record."""
        try:
            with open(
                self._record_path(pid, "comm"), encoding="utf-8", errors="replace"
            ) as f:
                line = f.readline(MAX_LINE - 1)
        except OSError as exc:
            log.debug("comm_unreadable", pid=pid, error=str(exc))
            return None

        if not line:
            return None
        return bounded(line.rstrip("\n"), NAME_CAPACITY)

    def _read_status(self, pid: int) -> tuple[str | None, int | None]:
        """
        Scan the status record for the owner and resident memory.

        Returns:
            (username, memory_usage), either of which is None if not found.
        """
        username: str | None = None
        memory_usage: int | None = None

        try:
            with open(
                self._record_path(pid, "status"), encoding="utf-8", errors="replace"
            ) as f:
                for line in f:
                    key, sep, value = line.partition(":")
                    if not sep:
                        continue
                    if key == "Uid":
                        username = self._parse_uid(pid, value)
                    elif key == "VmRSS":
                        memory_usage = self._parse_rss(pid, value)
        except OSError as exc:
            log.debug("status_unreadable", pid=pid, error=str(exc))

        return username, memory_usage

    def _parse_uid(self, pid: int, value: str) -> str | None:
        """Resolve the real UID (first token) to a bounded username."""
        try:
            uid = int(_first_token(value))
        except ValueError:
            log.debug("uid_malformed", pid=pid, value=value.strip())
            return None

        name = resolve_username(uid)
        if name is None:
            log.debug("uid_unresolved", pid=pid, uid=uid)
            return None
        return bounded(name, USERNAME_CAPACITY)

    def _parse_rss(self, pid: int, value: str) -> int | None:
        """Parse a VmRSS value, which the kernel already reports in kB."""
        try:
            rss = int(_first_token(value))
        except ValueError:
            log.debug("rss_malformed", pid=pid, value=value.strip())
            return None

        if rss < 0:
            log.debug("rss_negative", pid=pid, value=rss)
            return None
        return rss
