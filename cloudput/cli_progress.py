"""Console rendering and progress helpers for the cloudput CLI."""
from __future__ import annotations

from typing import Any, Dict, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)
from rich.table import Table

from .models import UploadTarget
from .orchestrator.models import PutResult
from .protocols import ProgressCallback


console = Console(stderr=True)


def _human_size(value: int) -> str:
    size = float(max(value, 0))
    units = ["B", "KiB", "MiB", "GiB", "TiB"]
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    if unit_idx == 0:
        return f"{int(size)} {units[unit_idx]}"
    return f"{size:.1f} {units[unit_idx]}"


def render_configuration_summary(config: Dict[str, Any]) -> None:
    """Render startup configuration summary."""
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white")

    for key, value in config.items():
        rendered = "-" if value is None else str(value)
        table.add_row(key, rendered)

    panel = Panel(
        table,
        title="[bold green]cloudput[/bold green]",
        subtitle="[dim]put[/dim]",
        border_style="blue",
    )
    console.print(panel)


class PutProgressDisplay:
    """
    One progress bar per file being uploaded.

    Callbacks fire from reader threads; rich.Progress serialises updates.
    """

    def __init__(self, enabled: bool = True):
        self._enabled = enabled and console.is_terminal
        self._progress: Optional[Progress] = None
        if self._enabled:
            self._progress = Progress(
                TextColumn("[bold cyan]Uploading {task.fields[filename]}", justify="left"),
                BarColumn(bar_width=42),
                TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
                DownloadColumn(binary_units=True),
                TransferSpeedColumn(),
                TimeRemainingColumn(),
                expand=False,
                console=console,
            )

    def __enter__(self):
        if self._progress is not None:
            self._progress.start()
        return self

    def __exit__(self, *args):
        if self._progress is not None:
            self._progress.stop()

    def callback_for(self, target: UploadTarget) -> Optional[ProgressCallback]:
        if self._progress is None:
            return None

        task_id = self._progress.add_task(
            "upload",
            filename=target.destination_path[-60:],
            total=max(target.size_bytes, 1),
        )
        progress = self._progress

        def callback(uploaded: int, total: int) -> None:
            if total <= 0:
                progress.update(task_id, completed=1, total=1)
                return
            progress.update(task_id, completed=uploaded, total=total)

        return callback

    def on_finish(self, result: PutResult) -> None:
        for failed in result.failed:
            console.print(f"[red]Failed:[/red] {failed.source_path} - {failed.error}")
        for uploaded in result.uploaded:
            mode = "session" if uploaded.chunked else "single"
            console.print(
                f"[green]Uploaded:[/green] {uploaded.source_path} -> {uploaded.destination_path} "
                f"[dim]({_human_size(uploaded.size_bytes)}, {mode})[/dim]"
            )
        console.print(
            f"[bold]Finished[/bold] uploaded={result.uploaded_files} "
            f"total={result.total_files} failed={result.failed_files}"
        )
