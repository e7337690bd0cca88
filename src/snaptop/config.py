"""Static settings and styles for snaptop.

There are no config files, flags or environment switches. The objects below
are built once at import time and handed to the engine, loop and app, which
treat them as read-only.
"""

from dataclasses import dataclass

APP_NAME = "snaptop"
TITLE = f"{APP_NAME} - System Monitor"

POLL_INTERVAL = 2.0  # Seconds between sampling passes
MAX_ROWS = 50
NAME_WIDTH = 28
TRUNCATION_MARKER = ".."
USER_WIDTH = 8
MAX_CORES_SHOWN = 8


@dataclass(slots=True, frozen=True)
class Settings:
    """Behavioural limits of the dashboard."""

    poll_interval: float = POLL_INTERVAL
    max_rows: int = MAX_ROWS
    name_width: int = NAME_WIDTH
    truncation_marker: str = TRUNCATION_MARKER
    max_cores_shown: int = MAX_CORES_SHOWN
    # Space around the process table taken by the header, borders and help
    table_margin_width: int = 4
    table_margin_height: int = 12
    default_table_height: int = 15


@dataclass(slots=True, frozen=True)
class Column:
    """A process table column."""

    title: str
    key: str
    width: int


COLUMNS: tuple[Column, ...] = (
    Column("PID", "pid", 8),
    Column("USER", "user", 10),
    Column("CPU%", "cpu", 8),
    Column("MEM%", "mem", 8),
    Column("STATUS", "status", 10),
    Column("COMMAND", "command", 30),
)


@dataclass(slots=True, frozen=True)
class Theme:
    """Rich style strings used when drawing the screen."""

    title: str = "bold #ffffff on #5f00ff"
    system_info: str = "bold #00ff00"
    help: str = "dim"
    table_border: str = "#585858"


DEFAULT_SETTINGS = Settings()
DEFAULT_THEME = Theme()
