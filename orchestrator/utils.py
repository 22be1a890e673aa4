"""Utility functions for the dashboard commands."""
import json
import logging
import os
import typing as t
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)

LOG_LEVEL = os.getenv("SCHEDULE_LOG_LEVEL", "INFO")


def configure_logging(level: t.Optional[str] = None) -> None:
    """Route log records through rich, at ``level`` or SCHEDULE_LOG_LEVEL."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def load_json_file(path_str: str) -> t.Any:
    """Read a JSON snapshot file.

    Args:
        path_str: Path to the JSON file

    Returns:
        The decoded JSON value

    Raises:
        SystemExit: If the file does not exist or is not valid JSON
    """
    path = Path(path_str)

    if not path.is_file():
        err_console.print(f"[red]Error:[/red] File '{path_str}' does not exist.")
        raise SystemExit(1)

    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        err_console.print(f"[red]Error:[/red] '{path_str}' is not valid JSON: {e}")
        raise SystemExit(1)
