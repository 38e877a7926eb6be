"""Shared CLI utilities."""

import asyncio
import logging
from functools import wraps
from pathlib import Path

import click

from .. import config
from ..db import get_db_path


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr at the configured level."""
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_data_dir() -> Path:
    """Get the data directory path."""
    return config.DATA_DIR


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    if not get_db_path().exists():
        echo_error("Project not initialized. Run 'guided-lift init' first.")
        ctx.exit(1)


def echo_success(message: str) -> None:
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    click.echo(click.style("[ERROR] ", fg="red") + message, err=True)


def echo_info(message: str) -> None:
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_duration(seconds: int) -> str:
    """Format seconds as M:SS, or H:MM:SS past the hour."""
    hours, rest = divmod(max(seconds, 0), 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_weight(weight: float | None) -> str:
    """Format a weight in the configured unit, dropping a trailing .0."""
    if weight is None:
        return "-"
    value = f"{weight:.1f}".rstrip("0").rstrip(".")
    return f"{value} {config.WEIGHT_UNIT}"


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format rows as a left-aligned plain-text table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(line.rstrip() for line in lines)
