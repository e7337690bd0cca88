"""Event handling for snaptop.

The dashboard is driven by four kinds of events: timer ticks, finished
sampling passes, key presses and terminal resizes. UpdateLoop.handle() takes
one event at a time and answers with the effects the runtime must carry
out: schedule the next tick, start a sampling pass, redraw, or quit.
"""

import logging
import os
from dataclasses import dataclass
from datetime import datetime

from snaptop.config import DEFAULT_SETTINGS, Settings
from snaptop.engine import UpdateEngine
from snaptop.models import Snapshot, SortCriterion
from snaptop.render import RenderRequest, build_header

logger = logging.getLogger(__name__)

QUIT_KEYS = frozenset({"q", "ctrl+c"})

SORT_KEY_MAP: dict[str, SortCriterion] = {
    "c": SortCriterion.CPU,
    "m": SortCriterion.MEMORY,
    "p": SortCriterion.PID,
    "n": SortCriterion.NAME,
}


# Events


@dataclass(slots=True, frozen=True)
class Tick:
    at: datetime


@dataclass(slots=True, frozen=True)
class SnapshotReady:
    snapshot: Snapshot


@dataclass(slots=True, frozen=True)
class KeyPress:
    key: str


@dataclass(slots=True, frozen=True)
class Resize:
    width: int
    height: int


Event = Tick | SnapshotReady | KeyPress | Resize


# Effects


@dataclass(slots=True, frozen=True)
class ScheduleTick:
    delay: float


@dataclass(slots=True, frozen=True)
class RequestSnapshot:
    pass


@dataclass(slots=True, frozen=True)
class Redraw:
    request: RenderRequest


@dataclass(slots=True, frozen=True)
class Quit:
    pass


Command = ScheduleTick | RequestSnapshot | Redraw | Quit


@dataclass(slots=True, frozen=True)
class Viewport:
    """Size of the process table region."""

    width: int
    height: int


class UpdateLoop:
    """
    Routes events into the UpdateEngine and decides what happens next.

    Holds no metrics of its own, only the viewport and whether the loop is
    still running. Once quit, every further event is ignored, including
    snapshots from sampling passes that were still in flight.
    """

    def __init__(
        self,
        engine: UpdateEngine | None = None,
        settings: Settings = DEFAULT_SETTINGS,
        cpu_count: int | None = None,
    ) -> None:
        """
        Initialize the UpdateLoop.

        Args:
            engine: Engine to drive. A fresh one is made if not given.
            settings: Poll interval and table margins.
            cpu_count: Logical CPU count shown in the header. Defaults to
                the host's count.
        """
        self._settings = settings
        self._engine = engine or UpdateEngine(settings)
        self._cpu_count = cpu_count if cpu_count is not None else (os.cpu_count() or 0)
        self._viewport = Viewport(width=0, height=settings.default_table_height)
        self._running = True
        self._last_update: datetime | None = None

    @property
    def engine(self) -> UpdateEngine:
        return self._engine

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def running(self) -> bool:
        return self._running

    @property
    def last_update(self) -> datetime | None:
        """When the most recent tick fired."""
        return self._last_update

    def start(self) -> list[Command]:
        """Effects to run at startup: first tick and an immediate sample."""
        logger.info("Starting update loop (every %.1fs)", self._settings.poll_interval)
        return [
            ScheduleTick(self._settings.poll_interval),
            RequestSnapshot(),
            Redraw(self.render_request()),
        ]

    def handle(self, event: Event) -> list[Command]:
        """Handle one event and return the effects it causes."""
        if not self._running:
            logger.debug("Ignoring %s after quit", type(event).__name__)
            return []

        commands: list[Command] = []
        match event:
            case Tick(at=at):
                self._last_update = at
                commands += [ScheduleTick(self._settings.poll_interval), RequestSnapshot()]
            case SnapshotReady(snapshot=snapshot):
                self._engine.apply_snapshot(snapshot)
            case KeyPress(key=key) if key in QUIT_KEYS:
                logger.info("Quit requested")
                self._running = False
                return [Quit()]
            case KeyPress(key=key) if key in SORT_KEY_MAP:
                self._engine.set_sort_criterion(SORT_KEY_MAP[key])
            case KeyPress():
                pass
            case Resize(width=width, height=height):
                self._viewport = Viewport(
                    width=max(0, width - self._settings.table_margin_width),
                    height=max(1, height - self._settings.table_margin_height),
                )

        commands.append(Redraw(self.render_request()))
        return commands

    def render_request(self) -> RenderRequest:
        """Current header, rows and table size for the display."""
        return RenderRequest(
            header=build_header(
                self._engine.snapshot,
                self._engine.directive,
                self._cpu_count,
                self._settings,
            ),
            rows=tuple(self._engine.rows),
            table_width=self._viewport.width,
            table_height=self._viewport.height,
        )
