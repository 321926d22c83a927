"""Console output for upload runs."""

from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..models.config import PushConfig
from ..models.results import FileUploadResult, UploadSummary


def _path(path: str) -> str:
    """Printable form of a path that may carry surrogate-escaped bytes."""
    return escape(path.encode("utf-8", "backslashreplace").decode("utf-8"))


class Reporter:
    """Prints run progress to stdout and problems to stderr."""

    def __init__(self, console: Console | None = None, err_console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)
        self.err_console = err_console or Console(stderr=True, highlight=False)

    def header(self, config: PushConfig) -> None:
        """Print what the run is about to do."""
        self.console.print(f"[bold]Repository:[/bold] {escape(config.repo)}")
        self.console.print(f"[bold]Branch:[/bold] {escape(config.branch)}")
        self.console.print(f"[bold]Files:[/bold] {len(config.files)}")
        if config.proxy and not config.dry_run:
            self.console.print(f"[bold]Proxy:[/bold] {escape(config.proxy)}")
        if config.dry_run:
            self.console.print("[yellow]Mode: DRY RUN")
        self.console.print()

    def dry_run(self, files: Sequence[str]) -> None:
        """List the files a real run would upload."""
        table = Table(title="Files that would be uploaded", title_justify="left")
        table.add_column("#", justify="right", style="dim")
        table.add_column("Path")

        for index, file in enumerate(files, start=1):
            table.add_row(str(index), _path(file))

        self.console.print(table)

    def branch_creating(self, branch: str, base: str) -> None:
        self.console.print(f"Creating branch '{escape(branch)}' from {escape(base)}...", style="blue")

    def branch_created(self, branch: str) -> None:
        self.console.print(f"[green]✓ Created branch '{escape(branch)}'\n")

    def file_result(self, result: FileUploadResult) -> None:
        """Print the status line for one file."""
        path = _path(result.path)
        if result.uploaded:
            self.console.print(f"[green]✓[/green] {path}")
        elif result.failed:
            self.console.print(f"[red]✗[/red] {path}: {escape(result.detail or 'unknown error')}")
        else:
            self.console.print(f"[yellow]⚠[/yellow] {path} - {escape(result.detail or 'skipped')}, skipping")

    def summary(self, summary: UploadSummary, config: PushConfig) -> None:
        """Print totals and where to look at the result."""
        self.console.print(f"\n[bold green]✓ Done![/bold green] {summary.summary_line()}")
        self.console.print(f"\nView: {escape(config.browse_url)}")

    def warning(self, message: str) -> None:
        self.err_console.print(f"[yellow]Warning: {escape(message)}")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]Error: {escape(message)}")
