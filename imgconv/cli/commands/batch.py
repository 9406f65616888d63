"""
Batch Command
Convert every matching file of a directory concurrently
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from imgconv.cli.console import report_item, report_summary
from imgconv.config import settings
from imgconv.core.batch import BatchConverter
from imgconv.core.exceptions import InputNotFoundError
from imgconv.models.conversion import Backend, ImageFormat


def batch_command(
    ctx: typer.Context,
    input_dir: Annotated[Path, typer.Argument(help="Directory containing the images")],
    format_text: Annotated[
        Optional[str],
        typer.Argument(metavar="FORMAT", help="Output format for all files (default: bmp)"),
    ] = None,
    quality: Annotated[
        Optional[int],
        typer.Option("-q", "--quality", min=0, max=100, help="Quality (0-100)"),
    ] = None,
    backend: Annotated[
        Optional[Backend],
        typer.Option("--backend", "-b", case_sensitive=False, help="Codec backend"),
    ] = None,
    pattern: Annotated[
        Optional[str],
        typer.Option("--pattern", "-p", help="Glob for input files (default: *.jpg)"),
    ] = None,
    output_dir: Annotated[
        Optional[Path],
        typer.Option(
            "-o", "--output-dir", help="Output directory (default: ConvertedImages_<FORMAT>)"
        ),
    ] = None,
    jobs: Annotated[
        Optional[int],
        typer.Option("--jobs", "-j", min=0, help="Parallel conversions (0 = unbounded)"),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="Per-file timeout in seconds"),
    ] = None,
):
    """
    Convert every matching image in a directory

    Examples:
      imgconv batch photos webp
      imgconv batch photos avif -q 60 --backend vips -j 4
      imgconv batch scans jpeg --pattern "*.png" -o converted/
    """
    port = ctx.obj["port"]
    format_text = format_text or settings.default_format

    try:
        image_format = ImageFormat.parse(format_text)
    except ValueError:
        port.write_line(f"[red]Invalid format {escape(format_text)}.[/red]")
        return

    overrides = {}
    if jobs is not None:
        overrides["max_concurrent_conversions"] = jobs
    if timeout is not None:
        overrides["conversion_timeout"] = timeout
    config = settings.model_copy(update=overrides)

    batch = BatchConverter(config=config)
    try:
        report = asyncio.run(
            batch.convert_directory(
                input_dir,
                image_format,
                output_dir=output_dir,
                pattern=pattern,
                quality=quality,
                backend=backend,
                on_item=partial(report_item, port),
            )
        )
    except InputNotFoundError as e:
        port.write_line(f"[red]{escape(e.message)}[/red]")
        return

    report_summary(port, report)
