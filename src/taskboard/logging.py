"""Rich-based logging configuration for Taskboard.

Colored console output for local development, plain line-oriented output
when stdout is not a terminal (containers, CI). Log messages are prefixed
with a component tag rendered by `format_component`.
"""

from __future__ import annotations

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Component color mapping for log prefixes
COMPONENT_STYLES = {
    "API": "blue bold",
    "AUTH": "green bold",
    "TASK": "cyan",
    "COMMENT": "cyan",
    "CACHE": "magenta",
    "USERS": "yellow",
    "ERROR": "red bold",
}

TASKBOARD_THEME = Theme({
    "logging.level.debug": "blue",
    "logging.level.info": "green",
    "logging.level.warning": "yellow",
    "logging.level.error": "red bold",
    "logging.level.critical": "red bold reverse",
    **{component.lower(): style for component, style in COMPONENT_STYLES.items()},
})

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest", "gotrue", "supabase", "uvicorn.access")

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def is_tty() -> bool:
    """Check if stdout is a TTY (interactive terminal)."""
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def should_use_rich() -> bool:
    """TASKBOARD_RICH_LOGS forces Rich on (1/true/yes) or off (0/false/no); otherwise use it in a TTY."""
    env_value = os.environ.get("TASKBOARD_RICH_LOGS", "").lower()

    if env_value in ("1", "true", "yes"):
        return True
    if env_value in ("0", "false", "no"):
        return False

    return is_tty()


def _rich_handler() -> logging.Handler:
    handler = RichHandler(
        console=Console(theme=TASKBOARD_THEME, force_terminal=True),
        show_time=True,
        show_level=True,
        show_path=False,
        rich_tracebacks=True,
        markup=True,
        log_time_format="[%Y-%m-%d %H:%M:%S]",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def _plain_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def configure_logging(
    level: int | str = logging.INFO,
    force_rich: bool | None = None,
) -> None:
    """Install a single console handler on the root logger.

    Args:
        level: Logging level, as a number or a name such as "DEBUG" (default: INFO)
        force_rich: Override auto-detection. None = auto-detect.
    """
    use_rich = force_rich if force_rich is not None else should_use_rich()

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_rich_handler() if use_rich else _plain_handler())
    root.setLevel(level.upper() if isinstance(level, str) else level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def format_component(component: str) -> str:
    """Format a component name with Rich markup.

    Usage in log messages:
        logger.info(f"{format_component('TASK')} Created task {task_id}")

    Unknown components are rendered in white.
    """
    style = COMPONENT_STYLES.get(component.upper(), "white")
    return f"[{style}][{component}][/{style}]"
