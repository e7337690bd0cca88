"""Data models for snaptop."""

from dataclasses import dataclass, field
from enum import Enum

from snaptop.config import USER_WIDTH


@dataclass(slots=True, frozen=True)
class ProcessSample:
    """Immutable sample of one process taken during a sampling pass.

    The username is cut to 8 characters and missing or negative CPU/memory
    readings are stored as 0.0, so every sample is display-ready on creation.
    """

    pid: int
    name: str
    cpu_percent: float = 0.0
    memory_percent: float = 0.0
    status: str = ""
    user: str = ""

    def __post_init__(self) -> None:
        user = self.user or ""
        object.__setattr__(self, "user", user[:USER_WIDTH])
        object.__setattr__(self, "name", self.name or "")
        object.__setattr__(self, "status", self.status or "")
        object.__setattr__(self, "cpu_percent", _non_negative(self.cpu_percent))
        object.__setattr__(self, "memory_percent", _non_negative(self.memory_percent))


def _non_negative(value: float | None) -> float:
    if value is None or value < 0:
        return 0.0
    return float(value)


@dataclass(slots=True, frozen=True)
class LoadAverage:
    """1, 5 and 15 minute load averages."""

    load1: float
    load5: float
    load15: float


@dataclass(slots=True, frozen=True)
class MemoryStats:
    """Virtual memory usage."""

    used_bytes: int
    total_bytes: int
    used_percent: float


@dataclass(slots=True, frozen=True)
class Snapshot:
    """
    Point-in-time bundle of host and process metrics.

    Produced whole by one sampling pass and replaced whole by the next.
    Any field may be empty or absent when the host could not provide it.
    """

    uptime_seconds: float = 0.0
    load_average: LoadAverage | None = None
    cpu_usage_per_core: tuple[float, ...] = ()
    memory: MemoryStats | None = None
    processes: tuple[ProcessSample, ...] = field(default_factory=tuple)


class SortCriterion(Enum):
    """Keys the process table can be ordered by."""

    CPU = "cpu"
    MEMORY = "memory"
    PID = "pid"
    NAME = "name"


@dataclass(slots=True)
class SortDirective:
    """Current ordering of the process table. Starts as CPU, descending."""

    criterion: SortCriterion = SortCriterion.CPU
    ascending: bool = False

    @property
    def direction(self) -> str:
        return "ascending" if self.ascending else "descending"


@dataclass(slots=True, frozen=True)
class DisplayRow:
    """One formatted row of the process table."""

    pid: str
    user: str
    cpu: str
    memory: str
    status: str
    command: str

    def cells(self) -> tuple[str, str, str, str, str, str]:
        """Return the cells in column order."""
        return (self.pid, self.user, self.cpu, self.memory, self.status, self.command)
