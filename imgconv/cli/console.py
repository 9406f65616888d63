"""
Console I/O
Line-based input/output port used by every command and the interactive mode
"""

from typing import Optional, Protocol

from rich.console import Console
from rich.markup import escape

from imgconv.core.batch.models import BatchItem, BatchItemStatus, BatchReport


class ConsolePort(Protocol):
    """Where the CLI reads answers from and writes messages to."""

    def read_line(self) -> Optional[str]:
        """Return the next input line, or None once input is exhausted."""

    def write_line(self, text: str = "") -> None:
        """Write one line of (rich markup) text."""


class RichConsolePort:
    """ConsolePort backed by a rich Console."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def read_line(self) -> Optional[str]:
        try:
            return self.console.input()
        except EOFError:
            return None

    def write_line(self, text: str = "") -> None:
        self.console.print(text, soft_wrap=True)


def report_item(port: ConsolePort, item: BatchItem) -> None:
    """Print the per-file notice for skipped and failed items."""
    if item.status == BatchItemStatus.SKIPPED and item.error_message:
        port.write_line(
            f"[yellow]Skipping {escape(item.filename)}: {escape(item.error_message)}.[/yellow]"
        )
    elif item.status == BatchItemStatus.SKIPPED:
        port.write_line(
            f"[yellow]File {escape(str(item.output_path))} already exists. Skipping.[/yellow]"
        )
    elif item.status == BatchItemStatus.FAILED:
        port.write_line(
            f"[red]Failed to convert {escape(item.filename)}: "
            f"{escape(item.error_message or 'unknown error')}[/red]"
        )


def report_summary(port: ConsolePort, report: BatchReport) -> None:
    style = "green" if report.all_succeeded else "yellow"
    port.write_line(
        f"[{style}]Conversion finished in {report.elapsed_seconds:.2f} seconds: "
        f"{report.completed} converted, {report.failed} failed, "
        f"{report.skipped} skipped.[/{style}]"
    )
