"""
Formats Command
Show which backend can write which format
"""

from typing import Annotated, Optional

import typer

from imgconv.core.conversion.backends import get_backend
from imgconv.models.conversion import Backend, ImageFormat


def formats_command(
    ctx: typer.Context,
    backend: Annotated[
        Optional[Backend],
        typer.Option("--backend", "-b", case_sensitive=False, help="Only this backend"),
    ] = None,
):
    """List output formats per backend"""
    port = ctx.obj["port"]
    backends = [backend] if backend else list(Backend)

    for kind in backends:
        codec_backend = get_backend(kind)
        port.write_line(f"[bold]{kind.value}[/bold]")
        for image_format in ImageFormat:
            if codec_backend.supports(image_format):
                port.write_line(f"  {image_format.name:<5} [green]supported[/green]")
            else:
                port.write_line(f"  {image_format.name:<5} [dim]unsupported[/dim]")
