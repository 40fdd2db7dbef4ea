"""procmon - Main Textual application."""

import sys

import structlog
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.timer import Timer
from textual.widgets import DataTable, Footer, Static

from procmon.config import COLUMN_WIDTHS, REFRESH_INTERVAL, TITLE
from procmon.log import close_logging, configure_logging
from procmon.models import ProcessSnapshot, ProcessSnapshotEntry
from procmon.monitor import ProcessListingError, ProcessMonitor

log = structlog.get_logger(__name__)


def visible_rows(snapshot: ProcessSnapshot, height: int) -> list[ProcessSnapshotEntry]:
    """Return the leading entries of a snapshot that fit in height rows."""
    return list(snapshot.entries[: max(0, height)])


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "none"

        table.add_column("PID", key="pid", width=COLUMN_WIDTHS["pid"])
        table.add_column("NAME", key="name", width=COLUMN_WIDTHS["name"])
        table.add_column("USER", key="user", width=COLUMN_WIDTHS["user"])
        table.add_column("MEM(KB)", key="mem", width=COLUMN_WIDTHS["mem"])

    @property
    def row_capacity(self) -> int:
        """Get how many rows fit below the column header."""
        return max(0, self.content_size.height - 1)

    def update_snapshot(self, snapshot: ProcessSnapshot) -> None:
        """
        Replace the table contents with a snapshot.

        Only as many rows as fit in the visible area are drawn; the rest of
        the snapshot is kept but not shown.
        """
        table = self.query_one("#process-table", DataTable)
        table.clear()
        for proc in visible_rows(snapshot, self.row_capacity):
            table.add_row(
                str(proc.pid),
                proc.name[: COLUMN_WIDTHS["name"]],
                proc.username[: COLUMN_WIDTHS["user"]],
                str(proc.memory_usage),
            )


class ProcmonApp(App):
    """Main procmon application."""

    TITLE = "procmon"

    CSS = """
    Screen {
        layout: vertical;
    }

    #title {
        dock: top;
        height: 1;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        Binding("Q", "quit", "Quit", show=False),
    ]

    def __init__(
        self,
        monitor: ProcessMonitor | None = None,
        refresh_interval: float = REFRESH_INTERVAL,
    ) -> None:
        """
        Initialize the ProcmonApp.

        Args:
            monitor: Process monitor to collect snapshots from.
            refresh_interval: Seconds between ticks. Default 1.0s.
        """
        super().__init__()
        self._monitor = monitor if monitor is not None else ProcessMonitor()
        self._tick_interval = refresh_interval
        self._snapshot: ProcessSnapshot | None = None
        self._tick_timer: Timer | None = None
        self.fatal_error: ProcessListingError | None = None

    @property
    def snapshot(self) -> ProcessSnapshot | None:
        """Get the snapshot from the latest tick."""
        return self._snapshot

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Static(TITLE, id="title")
        yield ProcessTable()
        yield Footer()

    def on_mount(self) -> None:
        """Start ticking once the first layout is done."""
        self.call_after_refresh(self._tick)
        self._tick_timer = self.set_interval(self._tick_interval, self._tick)

    def _tick(self) -> None:
        """Collect a snapshot and render it."""
        if self.fatal_error is not None:
            return

        try:
            snapshot = self._monitor.collect()
        except ProcessListingError as exc:
            log.error("process_listing_failed", proc_root=exc.proc_root, reason=exc.reason)
            self.fatal_error = exc
            if self._tick_timer is not None:
                self._tick_timer.stop()
            self.exit(return_code=1)
            return

        self._snapshot = snapshot
        self.query_one(ProcessTable).update_snapshot(snapshot)

    def action_quit(self) -> None:
        """Handle quit action."""
        if self._tick_timer is not None:
            self._tick_timer.stop()
        self.exit()


def main() -> None:
    """Entry point for procmon application."""
    configure_logging()
    app = ProcmonApp()
    try:
        app.run()
    finally:
        close_logging()
    if app.fatal_error is not None:
        print(f"procmon: {app.fatal_error}", file=sys.stderr)
    sys.exit(app.return_code or 0)


if __name__ == "__main__":
    main()
