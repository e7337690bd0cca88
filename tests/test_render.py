"""Tests for header formatting."""

import pytest

from snaptop.config import TITLE
from snaptop.models import LoadAverage, MemoryStats, Snapshot, SortCriterion, SortDirective
from snaptop.render import (
    build_header,
    format_cpu_line,
    format_load,
    format_memory,
    format_sort_indicator,
    format_uptime,
)


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0, "0m"),
        (59, "0m"),
        (125, "2m"),
        (3 * 3600 + 4 * 60, "3h 4m"),
        (2 * 86400 + 5 * 3600 + 6 * 60 + 30, "2d 5h 6m"),
        (86400, "1d 0h 0m"),
    ],
)
def test_format_uptime(seconds, expected):
    assert format_uptime(seconds) == expected


def test_format_load():
    assert format_load(LoadAverage(1.0, 0.5, 0.25)) == "Load: 1.00 0.50 0.25"


class TestCpuLine:
    """Tests for the per-core CPU line."""

    def test_few_cores(self):
        assert format_cpu_line((10.0, 33.3)) == "CPU: 10.0% 33.3%"

    def test_exactly_eight_cores_has_no_suffix(self):
        line = format_cpu_line(tuple(float(i) for i in range(8)))
        assert "more" not in line
        assert line.count("%") == 8

    def test_more_than_eight_cores_shows_suffix(self):
        line = format_cpu_line(tuple(float(i) for i in range(12)))
        assert line.endswith("7.0% (+4 more)")
        assert line.count("%") == 8


def test_format_memory():
    memory = MemoryStats(used_bytes=8 * 1024**3, total_bytes=16 * 1024**3, used_percent=50.0)
    assert format_memory(memory) == "Memory: 8.0G/16.0G (50.0%)"


def test_format_sort_indicator():
    assert format_sort_indicator(SortDirective()) == "Sorted by: cpu (descending)"
    assert (
        format_sort_indicator(SortDirective(SortCriterion.NAME, ascending=True))
        == "Sorted by: name (ascending)"
    )


class TestBuildHeader:
    """Tests for build_header."""

    def test_full_snapshot(self):
        snapshot = Snapshot(
            uptime_seconds=3600.0,
            load_average=LoadAverage(1.0, 0.5, 0.25),
            cpu_usage_per_core=(10.0, 20.0),
            memory=MemoryStats(used_bytes=1024**3, total_bytes=2 * 1024**3, used_percent=50.0),
        )

        header = build_header(snapshot, SortDirective(), cpu_count=2)

        assert header.title == TITLE
        assert header.uptime == "Uptime: 1h 0m"
        assert header.load == "Load: 1.00 0.50 0.25"
        assert header.cores == "CPUs: 2"
        assert header.cpu == "CPU: 10.0% 20.0%"
        assert header.memory == "Memory: 1.0G/2.0G (50.0%)"
        assert header.sort == "Sorted by: cpu (descending)"
        assert header.system_info() == ["Uptime: 1h 0m", "Load: 1.00 0.50 0.25", "CPUs: 2"]

    def test_absent_fields_are_omitted(self):
        header = build_header(Snapshot(), SortDirective(), cpu_count=4)

        assert header.uptime is None
        assert header.load is None
        assert header.cpu is None
        assert header.memory is None
        assert header.system_info() == ["CPUs: 4"]
