"""Update engine: turns the latest snapshot and sort state into table rows."""

import logging
from collections.abc import Callable, Iterable

from snaptop.config import DEFAULT_SETTINGS, Settings
from snaptop.models import (
    DisplayRow,
    ProcessSample,
    Snapshot,
    SortCriterion,
    SortDirective,
)

logger = logging.getLogger(__name__)

SORT_KEYS: dict[SortCriterion, Callable[[ProcessSample], float | int | str]] = {
    SortCriterion.CPU: lambda p: p.cpu_percent,
    SortCriterion.MEMORY: lambda p: p.memory_percent,
    SortCriterion.PID: lambda p: p.pid,
    SortCriterion.NAME: lambda p: p.name,
}


def truncate_name(name: str, settings: Settings = DEFAULT_SETTINGS) -> str:
    """Cut a process name to the table width, marking the cut."""
    if len(name) > settings.name_width:
        return name[: settings.name_width] + settings.truncation_marker
    return name


def format_row(proc: ProcessSample, settings: Settings = DEFAULT_SETTINGS) -> DisplayRow:
    """Format one process sample for the table."""
    return DisplayRow(
        pid=str(proc.pid),
        user=proc.user,
        cpu=f"{proc.cpu_percent:.1f}",
        memory=f"{proc.memory_percent:.1f}",
        status=proc.status,
        command=truncate_name(proc.name, settings),
    )


def sort_processes(
    processes: Iterable[ProcessSample], directive: SortDirective
) -> list[ProcessSample]:
    """
    Order processes by the directive.

    PIDs are unique within a snapshot, so using the PID as a second key
    makes the order total: the result does not depend on input order.
    """
    key = SORT_KEYS[directive.criterion]
    return sorted(
        processes,
        key=lambda p: (key(p), p.pid),
        reverse=not directive.ascending,
    )


def derive_rows(
    snapshot: Snapshot,
    directive: SortDirective,
    settings: Settings = DEFAULT_SETTINGS,
) -> list[DisplayRow]:
    """
    Derive the rows to display from a snapshot and a sort directive.

    Nameless processes are dropped, the rest are sorted, cut to the row cap
    and formatted. Pure: the same inputs always give the same rows.
    """
    named = (proc for proc in snapshot.processes if proc.name)
    ordered = sort_processes(named, directive)
    return [format_row(proc, settings) for proc in ordered[: settings.max_rows]]


class UpdateEngine:
    """
    Owns the current snapshot and sort directive.

    Every change to either re-derives the row list. Handlers are called from
    a single thread, one message at a time, so no locking is done here.
    """

    def __init__(self, settings: Settings = DEFAULT_SETTINGS) -> None:
        """
        Initialize the UpdateEngine.

        Args:
            settings: Row cap and column widths to derive rows with.
        """
        self._settings = settings
        self._snapshot = Snapshot()
        self._directive = SortDirective()
        self._rows: list[DisplayRow] = []

    @property
    def snapshot(self) -> Snapshot:
        """The most recently applied snapshot."""
        return self._snapshot

    @property
    def directive(self) -> SortDirective:
        """A copy of the current sort directive."""
        return SortDirective(self._directive.criterion, self._directive.ascending)

    @property
    def rows(self) -> list[DisplayRow]:
        """Rows derived from the current snapshot and directive."""
        return list(self._rows)

    def apply_snapshot(self, snapshot: Snapshot) -> None:
        """Replace the stored snapshot and re-derive the rows."""
        self._snapshot = snapshot
        self._rederive()

    def set_sort_criterion(self, criterion: SortCriterion) -> None:
        """
        Select the sort criterion and flip the direction.

        The direction flips on every call, whether or not the criterion
        changed. Rows are re-derived from the stored snapshot.
        """
        self._directive.criterion = criterion
        self._directive.ascending = not self._directive.ascending
        logger.debug(
            "Sorting by %s (%s)", criterion.value, self._directive.direction
        )
        self._rederive()

    def _rederive(self) -> None:
        self._rows = derive_rows(self._snapshot, self._directive, self._settings)
