"""
Convert Command
Single image conversion with positional arguments
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from imgconv.cli.console import ConsolePort
from imgconv.config import settings
from imgconv.core.conversion.converter import ImageConverter
from imgconv.models.conversion import Backend, ConversionResult, ImageFormat
from imgconv.utils.logging import get_logger

logger = get_logger(__name__)


def _parse_int(text: Optional[str]) -> Optional[int]:
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def derive_output_path(
    input_path: Path,
    image_format: ImageFormat,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> Path:
    """``<input dir>/_output/<stem>[_<W>x<H>].<ext>``, creating the directory."""
    output_dir = input_path.parent / settings.single_output_dir_name
    output_dir.mkdir(parents=True, exist_ok=True)

    size_text = ""
    if width is not None and height is not None:
        size_text = f"_{width}x{height}"
    return output_dir / f"{input_path.stem}{size_text}.{image_format.extension}"


def convert_file(
    port: ConsolePort,
    input_file: str,
    output_file: Optional[str] = None,
    format_text: Optional[str] = None,
    quality_text: Optional[str] = None,
    width_text: Optional[str] = None,
    height_text: Optional[str] = None,
    backend: Optional[Backend] = None,
    converter: Optional[ImageConverter] = None,
) -> Optional[ConversionResult]:
    """Convert one file; returns None when nothing was attempted."""
    input_path = Path(input_file)
    if not input_path.is_file():
        port.write_line(f"[red]The file {escape(input_file)} does not exist.[/red]")
        return None

    output_path = None
    if output_file:
        output_path = Path(output_file)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            port.write_line(f"[red]Failed to create the directory. {escape(str(e))}[/red]")
            return None

    image_format = ImageFormat.parse(settings.default_format)
    if format_text:
        try:
            image_format = ImageFormat.parse(format_text)
        except ValueError:
            port.write_line(f"[red]Invalid format {escape(format_text)}.[/red]")
            return None

    quality = settings.default_quality
    if quality_text:
        parsed = _parse_int(quality_text)
        if parsed is None or not 0 <= parsed <= 100:
            port.write_line(f"[red]Invalid quality {escape(quality_text)}.[/red]")
            return None
        quality = parsed

    # Sizes that do not parse are ignored, as are non-positive ones
    width = _parse_int(width_text)
    height = _parse_int(height_text)
    width = width if width and width > 0 else None
    height = height if height and height > 0 else None

    if output_path is None:
        output_path = derive_output_path(input_path, image_format, width, height)

    if output_path.exists():
        port.write_line(
            f"[yellow]File {escape(str(output_path))} already exists. Skipping.[/yellow]"
        )
        return None

    converter = converter or ImageConverter()
    request_kwargs = {"quality": quality, "target_width": width, "target_height": height}
    if backend is not None:
        request_kwargs["backend"] = backend
    request = converter.build_request(input_path, output_path, image_format, **request_kwargs)

    result = converter.convert_sync(request)
    if result.success:
        port.write_line(
            f"[green]Converted {escape(input_path.name)} to {escape(str(output_path))} "
            f"in {result.elapsed:.2f} seconds.[/green]"
        )
    else:
        logger.info("Single-file conversion failed", error_code=result.error_code)
        port.write_line(f"[red]Conversion failed: {escape(result.error or '')}[/red]")
    return result


def convert_command(
    ctx: typer.Context,
    input_file: Annotated[str, typer.Argument(help="Input image file")],
    output_file: Annotated[
        Optional[str],
        typer.Argument(help="Output file (default: <input dir>/_output/...)"),
    ] = None,
    format_text: Annotated[
        Optional[str],
        typer.Argument(metavar="FORMAT", help="Output format (default: bmp)"),
    ] = None,
    quality_text: Annotated[
        Optional[str],
        typer.Argument(metavar="QUALITY", help="Quality 0-100 (default: 75)"),
    ] = None,
    width_text: Annotated[
        Optional[str], typer.Argument(metavar="WIDTH", help="Bounding box width")
    ] = None,
    height_text: Annotated[
        Optional[str], typer.Argument(metavar="HEIGHT", help="Bounding box height")
    ] = None,
    backend: Annotated[
        Optional[Backend],
        typer.Option("--backend", "-b", case_sensitive=False, help="Codec backend"),
    ] = None,
):
    """
    Convert a single image

    Examples:
      imgconv convert photo.jpg
      imgconv convert photo.jpg out/photo.webp webp 80
      imgconv convert photo.jpg "" avif 60 1280 720 --backend vips
    """
    convert_file(
        ctx.obj["port"],
        input_file,
        output_file,
        format_text,
        quality_text,
        width_text,
        height_text,
        backend,
    )
