"""Terminal output handling using Rich library.

This module provides the OutputHandler class for all CLI terminal output:
colored status messages, a spinner for the publish run and the final
summary. Supports verbosity levels and the --no-color flag.
"""

from contextlib import contextmanager
from typing import Iterator, List, Optional

from rich.console import Console
from rich.live import Live
from rich.spinner import Spinner


class OutputHandler:
    """Handles all terminal output using Rich library.

    Attributes:
        verbosity: Verbosity level (0=summary, 1=info, 2=debug)
        console: Rich Console instance for output

    Example:
        >>> handler = OutputHandler(verbosity=1, no_color=False)
        >>> handler.success("Operation completed")
        >>> with handler.spinner("Publishing..."):
        ...     pass
    """

    def __init__(self, verbosity: int = 0, no_color: bool = False):
        """Initialize output handler.

        Args:
            verbosity: Verbosity level (0=summary, 1=info, 2=debug)
            no_color: Disable color output if True
        """
        self.verbosity = verbosity
        self.console = Console(
            force_terminal=not no_color,
            no_color=no_color,
            highlight=False,
        )

    def success(self, message: str) -> None:
        """Display success message in green."""
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        """Display error message in red."""
        self.console.print(f"[red]✗[/red] {message}", style="red")

    def warning(self, message: str) -> None:
        """Display warning message in yellow."""
        self.console.print(f"[yellow]⚠[/yellow] {message}", style="yellow")

    def info(self, message: str) -> None:
        """Display info message (only if verbosity >= 1)."""
        if self.verbosity >= 1:
            self.console.print(message)

    def print(self, message: str) -> None:
        self.console.print(message)

    @contextmanager
    def spinner(self, message: str) -> Iterator[None]:
        """Display spinner while a long operation runs.

        Only shown at verbosity 0; at higher levels log lines would
        interleave with the spinner.
        """
        if self.verbosity >= 1:
            yield
            return
        spinner = Spinner("dots", text=message)
        with Live(spinner, console=self.console, refresh_per_second=10, transient=True):
            yield

    def print_summary(
        self,
        created: int = 0,
        updated: int = 0,
        unchanged: int = 0,
        failed: int = 0,
        failed_files: Optional[List[str]] = None,
    ) -> None:
        """Display publish summary with color coding.

        Args:
            created: Number of pages created
            updated: Number of pages updated
            unchanged: Number of pages skipped as unchanged
            failed: Number of documents that failed
            failed_files: Paths of the failed documents
        """
        self.console.print("\n[bold]Publish Summary:[/bold]")

        if created > 0:
            self.console.print(f"  [green]+[/green] Created: {created} page(s)")

        if updated > 0:
            self.console.print(f"  [green]↑[/green] Updated: {updated} page(s)")

        if unchanged > 0:
            self.console.print(f"  [dim]─[/dim] Unchanged: {unchanged} page(s)")

        if failed > 0:
            self.console.print(f"  [red]✗[/red] Failed: {failed} page(s)")
            for file_path in failed_files or []:
                self.console.print(f"    • {file_path}")

        total = created + updated + unchanged + failed
        if total == 0:
            self.console.print("\n[yellow]No pages to publish[/yellow]")
        elif failed > 0:
            self.console.print("\n[red]Publish completed with failures[/red]")
        elif created == 0 and updated == 0:
            self.console.print("\n[green]Everything up to date. No changes published.[/green]")
        else:
            self.console.print("\n[green]Publish completed successfully[/green]")
