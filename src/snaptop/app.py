"""snaptop - Main Textual application."""

import logging
import sys
from datetime import datetime

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.css.query import NoMatches
from textual.logging import TextualHandler
from textual.message import Message
from textual.widgets import DataTable, Static

from snaptop.config import (
    APP_NAME,
    COLUMNS,
    DEFAULT_SETTINGS,
    DEFAULT_THEME,
    Settings,
    Theme,
)
from snaptop.engine import UpdateEngine
from snaptop.loop import (
    Command,
    Event,
    KeyPress,
    Quit,
    Redraw,
    RequestSnapshot,
    Resize,
    ScheduleTick,
    SnapshotReady,
    Tick,
    UpdateLoop,
)
from snaptop.models import Snapshot
from snaptop.monitor import SnapshotSource
from snaptop.render import HELP_TEXT, HeaderView, RenderRequest

logger = logging.getLogger(__name__)


class SnapshotSampled(Message):
    """Posted by a sampling worker when its snapshot is ready."""

    def __init__(self, snapshot: Snapshot) -> None:
        super().__init__()
        self.snapshot = snapshot


def render_header(header: HeaderView, theme: Theme = DEFAULT_THEME) -> Text:
    """Turn header lines into styled text."""
    text = Text()
    text.append(f" {header.title} ", style=theme.title)
    text.append("\n\n")

    for i, part in enumerate(header.system_info()):
        if i:
            text.append("  ")
        text.append(part, style=theme.system_info)
    text.append("\n")

    if header.cpu:
        text.append(header.cpu, style=theme.system_info)
        text.append("\n")

    if header.memory:
        text.append(header.memory, style=theme.system_info)
        text.append("\n")

    text.append("\n")
    text.append(header.sort)
    return text


class SnaptopApp(App):
    """Main snaptop application."""

    TITLE = APP_NAME

    CSS = """
    Screen {
        layout: vertical;
    }

    #header {
        height: auto;
        padding: 0 1;
    }

    #table-region {
        height: auto;
        padding: 1 1 0 1;
    }

    #process-table {
        height: 15;
    }

    #help {
        height: 1;
        padding: 1 1 0 1;
    }
    """

    BINDINGS = [
        Binding("q", "send_key('q')", "Quit", show=False),
        Binding("ctrl+c", "send_key('ctrl+c')", "Quit", show=False, priority=True),
        Binding("c", "send_key('c')", "CPU sort", show=False),
        Binding("m", "send_key('m')", "Memory sort", show=False),
        Binding("p", "send_key('p')", "PID sort", show=False),
        Binding("n", "send_key('n')", "Name sort", show=False),
    ]

    def __init__(
        self,
        source: SnapshotSource | None = None,
        settings: Settings = DEFAULT_SETTINGS,
        theme: Theme = DEFAULT_THEME,
        cpu_count: int | None = None,
    ) -> None:
        """
        Initialize the SnaptopApp.

        Args:
            source: Where snapshots come from. Defaults to psutil sampling.
            settings: Poll interval, row cap and table margins.
            theme: Styles for the header, table and help line.
            cpu_count: Logical CPU count shown in the header.
        """
        super().__init__()
        self._source = source or SnapshotSource()
        self._colors = theme
        self._updates = UpdateLoop(UpdateEngine(settings), settings, cpu_count)

    @property
    def update_loop(self) -> UpdateLoop:
        return self._updates

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Static(id="header")
        yield Container(DataTable(id="process-table"), id="table-region")
        yield Static(Text(HELP_TEXT, style=self._colors.help), id="help")

    def on_mount(self) -> None:
        """Set up the table and start the update loop."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"
        table.styles.border = ("solid", self._colors.table_border)
        for column in COLUMNS:
            table.add_column(column.title, key=column.key, width=column.width)

        self._apply(self._updates.start())

    def route_event(self, event: Event) -> None:
        """Feed one event to the update loop and carry out its effects."""
        self._apply(self._updates.handle(event))

    def _apply(self, commands: list[Command]) -> None:
        for command in commands:
            match command:
                case ScheduleTick(delay=delay):
                    self.set_timer(delay, self._tick_fired)
                case RequestSnapshot():
                    self.run_worker(
                        self._sample,
                        name="sample",
                        group="sampling",
                        thread=True,
                        exit_on_error=False,
                    )
                case Redraw(request=request):
                    self._repaint(request)
                case Quit():
                    self.exit()

    def _tick_fired(self) -> None:
        self.route_event(Tick(datetime.now()))

    def _sample(self) -> None:
        """Run one sampling pass. Called in a worker thread."""
        try:
            snapshot = self._source.sample()
        except Exception:
            logger.warning("Sampling pass failed", exc_info=True)
            return
        if not self.post_message(SnapshotSampled(snapshot)):
            logger.debug("Discarding snapshot, app is closing")

    def on_snapshot_sampled(self, message: SnapshotSampled) -> None:
        self.route_event(SnapshotReady(message.snapshot))

    def on_resize(self, event: events.Resize) -> None:
        self.route_event(Resize(event.size.width, event.size.height))

    def action_send_key(self, key: str) -> None:
        """Forward a bound key to the update loop."""
        self.route_event(KeyPress(key))

    async def action_quit(self) -> None:
        """Quit through the update loop so late snapshots are ignored."""
        self.route_event(KeyPress("q"))

    def _repaint(self, request: RenderRequest) -> None:
        try:
            header = self.query_one("#header", Static)
            table = self.query_one("#process-table", DataTable)
        except NoMatches:
            return  # Not composed yet

        header.update(render_header(request.header, self._colors))
        table.styles.height = request.table_height
        if request.table_width > 0:
            table.styles.width = request.table_width
        table.clear()
        table.add_rows(row.cells() for row in request.rows)


def main() -> int:
    """Entry point for snaptop application."""
    logging.basicConfig(level=logging.INFO, handlers=[TextualHandler()])
    try:
        app = SnaptopApp()
        app.run()
    except Exception as exc:
        print(f"Error running program: {exc}", file=sys.stderr)
        return 1
    return app.return_code or 0


if __name__ == "__main__":
    sys.exit(main())
