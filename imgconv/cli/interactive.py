"""
Interactive Mode
Prompts for a directory and a format, then converts the whole directory
"""

from functools import partial
from pathlib import Path
from typing import Optional

from rich.markup import escape

from imgconv.cli.console import ConsolePort, report_item, report_summary
from imgconv.core.batch import BatchConverter, BatchReport
from imgconv.models.conversion import ImageFormat

FORMAT_CHOICES = list(ImageFormat)


def prompt_directory(port: ConsolePort) -> Optional[Path]:
    """Ask until the answer names an existing directory."""
    port.write_line("Enter the path of the folder containing the images to convert.")
    while True:
        answer = port.read_line()
        if answer is None:
            return None
        path = Path(answer.strip()).expanduser()
        if answer.strip() and path.is_dir():
            return path
        port.write_line("[red]The folder does not exist. Please enter it again.[/red]")


def parse_format_choice(answer: str) -> Optional[ImageFormat]:
    """Accept a list index or a format name."""
    answer = answer.strip()
    if answer.isdigit():
        index = int(answer)
        if 0 <= index < len(FORMAT_CHOICES):
            return FORMAT_CHOICES[index]
        return None
    try:
        return ImageFormat.parse(answer)
    except ValueError:
        return None


def prompt_format(port: ConsolePort) -> Optional[ImageFormat]:
    """Show the format list and ask until the answer parses."""
    port.write_line("Choose the format to convert to.")
    while True:
        for index, image_format in enumerate(FORMAT_CHOICES):
            port.write_line(f"{index}: {image_format.name}")
        answer = port.read_line()
        if answer is None:
            return None
        image_format = parse_format_choice(answer)
        if image_format is not None:
            return image_format
        port.write_line("[red]Invalid format. Please enter it again.[/red]")


async def run_interactive(
    port: ConsolePort, batch: Optional[BatchConverter] = None
) -> Optional[BatchReport]:
    """Run the prompt-driven directory conversion.

    Returns None when input ends before both answers were given.
    """
    input_dir = prompt_directory(port)
    if input_dir is None:
        return None
    image_format = prompt_format(port)
    if image_format is None:
        return None

    batch = batch or BatchConverter()
    plan = batch.plan(input_dir, image_format)
    port.write_line(
        f"Converting {len(plan.requests)} file(s) into {escape(str(plan.output_dir))}"
    )
    report = await batch.run(plan, on_item=partial(report_item, port))
    report_summary(port, report)
    return report
