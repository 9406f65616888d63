"""
Main CLI Application
Typer application wiring commands, logging and the interactive mode
"""

import asyncio
from typing import Annotated, Optional

import typer

from imgconv.cli import __version__
from imgconv.cli.commands.batch import batch_command
from imgconv.cli.commands.bench import bench_command
from imgconv.cli.commands.convert import convert_command
from imgconv.cli.commands.formats import formats_command
from imgconv.cli.console import ConsolePort, RichConsolePort
from imgconv.cli.interactive import run_interactive
from imgconv.config import settings
from imgconv.utils.logging import setup_logging

app = typer.Typer(
    name="imgconv",
    help="Convert images between JPEG, WebP, AVIF, JPEG XL, HEIC and BMP",
    no_args_is_help=False,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
    context_settings={"help_option_names": ["--help"]},
)


def make_port() -> ConsolePort:
    return RichConsolePort()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool], typer.Option("--version", "-v", help="Show version")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Log conversion progress")
    ] = False,
    debug: Annotated[
        bool, typer.Option("--debug", help="Log codec details")
    ] = False,
):
    """
    Image converter

    Run without a command to convert a whole folder interactively.

    [bold green]Quick Start:[/bold green]

      [cyan]imgconv convert photo.jpg out/photo.webp webp 80[/cyan]
      [cyan]imgconv batch photos avif --backend vips[/cyan]
      [cyan]imgconv[/cyan]  (interactive)
    """
    port = make_port()
    ctx.obj = {"port": port}

    if version:
        port.write_line(f"imgconv {__version__}")
        raise typer.Exit()

    log_level = settings.log_level
    if verbose:
        log_level = "INFO"
    if debug:
        log_level = "DEBUG"
    setup_logging(
        log_level=log_level,
        json_logs=settings.json_logs,
        enable_file_logging=settings.logging_enabled,
        log_dir=settings.log_dir,
        max_log_size_mb=settings.max_log_size_mb,
        backup_count=settings.log_backup_count,
        anonymize=settings.anonymize_logs,
    )

    if ctx.invoked_subcommand is None:
        asyncio.run(run_interactive(port))


app.command("convert", help="Convert a single image")(convert_command)
app.command("batch", help="Convert every matching image in a directory")(batch_command)
app.command("bench", help="Benchmark formats and sizes for one image")(bench_command)
app.command("formats", help="List output formats per backend")(formats_command)


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
