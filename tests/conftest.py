"""Shared fixtures for procmon tests."""

from pathlib import Path

import pytest


class FakeProc:
    """Builds a /proc-like directory tree for tests."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def add(
        self,
        pid: int | str,
        comm: str | None = "proc\n",
        status: str | None = None,
        with_status: bool = True,
        uid: int = 0,
        rss_kb: int | None = 1000,
    ) -> Path:
        """
        Add a process directory.

        Passing None for comm leaves that record out, as does
        with_status=False for status. When status is not given one is
        generated from uid and rss_kb.
        """
        proc_dir = self.root / str(pid)
        proc_dir.mkdir()
        if comm is not None:
            (proc_dir / "comm").write_text(comm)
        if with_status:
            if status is None:
                status = make_status(uid=uid, rss_kb=rss_kb)
            (proc_dir / "status").write_text(status)
        return proc_dir


def make_status(uid: int = 0, rss_kb: int | None = 1000, name: str = "proc") -> str:
    """Render a status record the way the kernel lays it out."""
    lines = [
        f"Name:\t{name}",
        "Umask:\t0022",
        "State:\tS (sleeping)",
        f"Uid:\t{uid}\t{uid}\t{uid}\t{uid}",
        f"Gid:\t{uid}\t{uid}\t{uid}\t{uid}",
        "VmPeak:\t   10000 kB",
        "VmSize:\t    9000 kB",
    ]
    if rss_kb is not None:
        lines.append(f"VmRSS:\t{rss_kb:>8} kB")
    lines.append("Threads:\t1")
    return "\n".join(lines) + "\n"


@pytest.fixture
def fake_proc(tmp_path: Path) -> FakeProc:
    """An empty fake /proc tree."""
    root = tmp_path / "proc"
    root.mkdir()
    return FakeProc(root)
