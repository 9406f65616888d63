"""
Bench Command
Convert one image to every benchmark format and size, timing each run
"""

from datetime import datetime
from pathlib import Path
from typing import Annotated, List, Optional, Tuple

import typer
from rich.markup import escape

from imgconv.config import settings
from imgconv.core.constants import (
    BENCH_FORMATS,
    BENCH_OUTPUT_DIR_PREFIX,
    BENCH_SIZES,
    BENCH_TIMESTAMP_FORMAT,
)
from imgconv.core.conversion.converter import ImageConverter
from imgconv.models.conversion import Backend, ConversionResult, ImageFormat


def bench_output_dir(input_path: Path, backend: Backend, now: Optional[datetime] = None) -> Path:
    stamp = (now or datetime.now()).strftime(BENCH_TIMESTAMP_FORMAT)
    return input_path.parent / f"{BENCH_OUTPUT_DIR_PREFIX}{backend.value}_{stamp}"


def run_bench(
    input_path: Path,
    backend: Backend,
    quality: int,
    converter: Optional[ImageConverter] = None,
    sizes: Optional[List[Tuple[int, int]]] = None,
    formats: Optional[List[ImageFormat]] = None,
) -> Tuple[Path, List[Tuple[Tuple[int, int], ImageFormat, ConversionResult]]]:
    """Run the format x size matrix sequentially."""
    converter = converter or ImageConverter()
    sizes = sizes or BENCH_SIZES
    formats = formats or [ImageFormat.parse(name) for name in BENCH_FORMATS]
    output_dir = bench_output_dir(input_path, backend)
    output_dir.mkdir(parents=True, exist_ok=True)

    results = []
    for width, height in sizes:
        for image_format in formats:
            output_path = output_dir / (
                f"{input_path.stem}_{width}x{height}.{image_format.extension}"
            )
            request = converter.build_request(
                input_path,
                output_path,
                image_format,
                quality=quality,
                target_width=width,
                target_height=height,
                backend=backend,
            )
            results.append(((width, height), image_format, converter.convert_sync(request)))
    return output_dir, results


def bench_command(
    ctx: typer.Context,
    input_file: Annotated[Path, typer.Argument(help="Source image")],
    backend: Annotated[
        Backend,
        typer.Option("--backend", "-b", case_sensitive=False, help="Codec backend"),
    ] = Backend.VIPS,
    quality: Annotated[
        Optional[int],
        typer.Option("-q", "--quality", min=0, max=100, help="Quality (0-100)"),
    ] = None,
):
    """
    Benchmark formats and sizes for one image

    Examples:
      imgconv bench photo.jpg
      imgconv bench photo.jpg --backend pillow -q 90
    """
    port = ctx.obj["port"]
    if not input_file.is_file():
        port.write_line(f"[red]The file {escape(str(input_file))} does not exist.[/red]")
        return

    port.write_line(
        f"Convert from {escape(input_file.name)} "
        f"Size: {input_file.stat().st_size / 1024.0:.2f} KB"
    )
    quality = settings.default_quality if quality is None else quality
    output_dir, results = run_bench(input_file, backend, quality)

    current_size = None
    for size, image_format, result in results:
        if size != current_size:
            if current_size is not None:
                port.write_line()
            port.write_line(f"Converting to {size[0]}x{size[1]}...")
            current_size = size
        if result.success:
            size_text = f"Size: {result.output_path.stat().st_size / 1024.0:.2f} KB"
        else:
            size_text = "[red]Failed![/red]"
        port.write_line(f"{image_format.name}\t{result.elapsed:.2f} seconds\t{size_text}")

    port.write_line()
    port.write_line(f"[green]Done. Output in {escape(str(output_dir))}[/green]")
