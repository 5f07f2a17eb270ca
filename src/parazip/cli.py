"""Command-line interface for parazip."""

from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape

from .api import format_duration, run
from .config import load_config, write_default_config
from .errors import ParazipError, UsageError
from .log import setup_logger
from .model import CompressResult


app = typer.Typer(
    name="parazip",
    help="High-throughput zip utility with parallel reads",
    add_completion=False,
)
console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)

USAGE = """parazip - High-throughput zip utility

Usage:
  parazip zip   <file_or_folder>
  parazip unzip <file.zip>

Commands:
  zip | compress | z     compress a file or folder into <name>.zip next to it
  unzip | extract | x    extract <name>.zip into the folder <name> next to it

Examples:
  parazip zip   my_project/
  parazip zip   report.docx
  parazip unzip archive.zip

Run 'parazip --help' for all options."""


def print_usage() -> None:
    """打印用法到 stderr"""
    err_console.print(escape(USAGE))


@app.command()
def main(
    command: Optional[str] = typer.Argument(
        None,
        help="zip|compress|z or unzip|extract|x",
    ),
    path: Optional[str] = typer.Argument(
        None,
        help="File or folder to compress, or archive to extract",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers", "-w",
        help="Number of reader threads (default: CPU count)",
    ),
    level: Optional[int] = typer.Option(
        None,
        "--level", "-l",
        help="Deflate compression level 0-9 (default: 6)",
    ),
    fail_fast: bool = typer.Option(
        False,
        "--fail-fast",
        help="Abort when any file cannot be read instead of skipping it",
    ),
    no_overwrite: bool = typer.Option(
        False,
        "--no-overwrite",
        help="Never overwrite an existing archive or extracted file",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to a TOML config file",
    ),
    init_config: Optional[Path] = typer.Option(
        None,
        "--init-config",
        help="Write the default config to this path and exit",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose", "-v",
        help="Show debug logs on stderr",
    ),
    log_file: Optional[str] = typer.Option(
        None,
        "--log-file",
        help="Also write debug logs to this file",
    ),
):
    """Compress a file or folder into a zip archive, or extract one."""
    if init_config is not None:
        written = write_default_config(init_config)
        console.print(f"Default config written to {escape(str(written))}")
        raise typer.Exit(code=0)

    if not command or not path:
        print_usage()
        raise typer.Exit(code=1)

    try:
        options = load_config(config).merged(
            workers=workers,
            compression_level=level,
            fail_fast=True if fail_fast else None,
            overwrite=False if no_overwrite else None,
            log_level="DEBUG" if verbose else None,
            log_file=log_file,
        )
    except ParazipError as e:
        err_console.print(f"Error: {escape(str(e))}")
        raise typer.Exit(code=1)

    setup_logger(options.log_level, options.log_file)

    try:
        result = run(command, path, options)
    except UsageError as e:
        err_console.print(f"{escape(str(e))}\n")
        print_usage()
        raise typer.Exit(code=1)
    except ParazipError as e:
        logger.debug(f"操作失败: {e!r}")
        err_console.print(f"Error: {escape(str(e))}")
        raise typer.Exit(code=1)

    duration = format_duration(result.elapsed)
    if isinstance(result, CompressResult):
        console.print(f"Created: {escape(str(result.output))} ({duration})")
    else:
        console.print(f"Extracted to: {escape(str(result.output))} ({duration})")

    if result.skipped:
        err_console.print(f"[yellow]Skipped {len(result.skipped)} entries[/yellow]")


if __name__ == "__main__":
    app()
