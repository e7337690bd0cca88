"""Header formatting and render requests for snaptop."""

from dataclasses import dataclass

from snaptop.config import DEFAULT_SETTINGS, TITLE, Settings
from snaptop.models import DisplayRow, LoadAverage, MemoryStats, Snapshot, SortDirective

GIB = 1024**3

HELP_TEXT = (
    "Controls: [c] CPU sort • [m] Memory sort • [p] PID sort • "
    "[n] Name sort • [q] Quit"
)


def format_uptime(seconds: float) -> str:
    """Format an uptime as '1d 2h 3m', '2h 3m' or '3m'."""
    total_minutes = int(seconds) // 60
    days, rem = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rem, 60)
    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def format_load(load: LoadAverage) -> str:
    return f"Load: {load.load1:.2f} {load.load5:.2f} {load.load15:.2f}"


def format_cores(count: int) -> str:
    return f"CPUs: {count}"


def format_cpu_line(per_core: tuple[float, ...], limit: int = 8) -> str:
    """List per-core usage, showing at most `limit` cores."""
    shown = " ".join(f"{usage:.1f}%" for usage in per_core[:limit])
    line = f"CPU: {shown}"
    if len(per_core) > limit:
        line += f" (+{len(per_core) - limit} more)"
    return line


def format_memory(memory: MemoryStats) -> str:
    used = memory.used_bytes / GIB
    total = memory.total_bytes / GIB
    return f"Memory: {used:.1f}G/{total:.1f}G ({memory.used_percent:.1f}%)"


def format_sort_indicator(directive: SortDirective) -> str:
    return f"Sorted by: {directive.criterion.value} ({directive.direction})"


@dataclass(slots=True, frozen=True)
class HeaderView:
    """Formatted header lines. Absent metrics are None and not drawn."""

    title: str
    uptime: str | None
    load: str | None
    cores: str
    cpu: str | None
    memory: str | None
    sort: str

    def system_info(self) -> list[str]:
        """The uptime/load/core-count parts that share one line."""
        return [part for part in (self.uptime, self.load, self.cores) if part]


def build_header(
    snapshot: Snapshot,
    directive: SortDirective,
    cpu_count: int,
    settings: Settings = DEFAULT_SETTINGS,
) -> HeaderView:
    """Build the header lines for a snapshot."""
    return HeaderView(
        title=TITLE,
        uptime=(
            f"Uptime: {format_uptime(snapshot.uptime_seconds)}"
            if snapshot.uptime_seconds > 0
            else None
        ),
        load=format_load(snapshot.load_average) if snapshot.load_average else None,
        cores=format_cores(cpu_count),
        cpu=(
            format_cpu_line(snapshot.cpu_usage_per_core, settings.max_cores_shown)
            if snapshot.cpu_usage_per_core
            else None
        ),
        memory=format_memory(snapshot.memory) if snapshot.memory else None,
        sort=format_sort_indicator(directive),
    )


@dataclass(slots=True, frozen=True)
class RenderRequest:
    """Everything the display needs for one redraw."""

    header: HeaderView
    rows: tuple[DisplayRow, ...]
    table_width: int
    table_height: int
