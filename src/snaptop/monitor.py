"""Metrics sampling for snaptop."""

import logging
import time

import psutil

from snaptop.models import LoadAverage, MemoryStats, ProcessSample, Snapshot

logger = logging.getLogger(__name__)

# Attributes fetched for every process in one pass
PROCESS_ATTRS = [
    "pid",
    "name",
    "username",
    "status",
    "cpu_percent",
    "memory_percent",
]

# Errors that mean "this metric is unavailable right now"
METRIC_ERRORS = (psutil.Error, OSError, AttributeError, RuntimeError)


class SnapshotSource:
    """
    Samples host and process metrics using psutil.

    Each call to sample() is one sampling pass. Every metric is fetched on
    its own so that one failing lookup only blanks that field of the
    snapshot. sample() may block for a while and is meant to be called off
    the UI thread.
    """

    def __init__(self) -> None:
        """Initialize the SnapshotSource."""
        # Prime the CPU counters (first call returns 0.0)
        try:
            psutil.cpu_percent(percpu=True)
        except METRIC_ERRORS:
            logger.debug("Could not prime CPU counters", exc_info=True)

    def sample(self) -> Snapshot:
        """Collect a snapshot of the current system state."""
        started = time.perf_counter()
        snapshot = Snapshot(
            uptime_seconds=self._uptime(),
            load_average=self._load_average(),
            cpu_usage_per_core=self._cpu_per_core(),
            memory=self._memory(),
            processes=tuple(collect_processes()),
        )
        logger.debug(
            "Sampled %d processes in %.3fs",
            len(snapshot.processes),
            time.perf_counter() - started,
        )
        return snapshot

    def _uptime(self) -> float:
        try:
            return max(0.0, time.time() - psutil.boot_time())
        except METRIC_ERRORS:
            logger.debug("Uptime unavailable", exc_info=True)
            return 0.0

    def _load_average(self) -> LoadAverage | None:
        try:
            load1, load5, load15 = psutil.getloadavg()
        except METRIC_ERRORS:
            logger.debug("Load average unavailable", exc_info=True)
            return None
        return LoadAverage(load1, load5, load15)

    def _cpu_per_core(self) -> tuple[float, ...]:
        # Non-blocking, measured against the previous call
        try:
            return tuple(psutil.cpu_percent(percpu=True))
        except METRIC_ERRORS:
            logger.debug("Per-core CPU usage unavailable", exc_info=True)
            return ()

    def _memory(self) -> MemoryStats | None:
        try:
            mem = psutil.virtual_memory()
        except METRIC_ERRORS:
            logger.debug("Memory statistics unavailable", exc_info=True)
            return None
        return MemoryStats(
            used_bytes=mem.used,
            total_bytes=mem.total,
            used_percent=mem.percent,
        )


def collect_processes() -> list[ProcessSample]:
    """
    Collect samples of all running processes.

    Processes without a name are dropped. Attributes psutil cannot read
    (access denied, zombie) come back as None and fall back to defaults in
    ProcessSample; processes that vanish mid-iteration are skipped.
    """
    processes: list[ProcessSample] = []

    try:
        iterator = psutil.process_iter(attrs=PROCESS_ATTRS)
    except METRIC_ERRORS:
        logger.debug("Process list unavailable", exc_info=True)
        return processes

    for proc in iterator:
        try:
            info = proc.info
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue

        name = info.get("name") or ""
        if not name:
            continue

        processes.append(
            ProcessSample(
                pid=info.get("pid", proc.pid),
                name=name,
                cpu_percent=info.get("cpu_percent"),
                memory_percent=info.get("memory_percent"),
                status=info.get("status") or "",
                user=info.get("username") or "",
            )
        )

    return processes
