"""Command line interface for codesaver."""

from __future__ import annotations

import asyncio
import fnmatch
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from codesaver.archive.builder import ArchiveBuilder
from codesaver.archive.compressor import ZipCompressor
from codesaver.archive.download import save_artifact
from codesaver.config import AppConfig
from codesaver.detection.detector import Detector
from codesaver.detection.mime import get_file_icon
from codesaver.errors import CodeSaverError
from codesaver.models import FileRecord
from codesaver.rescan.scheduler import RescanScheduler, TriggerState
from codesaver.rescan.watcher import DocumentWatcher
from codesaver.utils.files import iter_document_paths
from codesaver.utils.text import format_file_size
from codesaver.web.app import app as web_app


console = Console()
app = typer.Typer(help="codesaver - save the code blocks of a document as files")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _detect_inputs(inputs: Sequence[Path], detector: Detector) -> List[FileRecord]:
    records: List[FileRecord] = []
    for document in iter_document_paths(inputs):
        records.extend(detector.detect_file(document))
    return records


def _select(
    records: Sequence[FileRecord], include: Sequence[str], exclude: Sequence[str]
) -> List[FileRecord]:
    """Filter records by glob patterns matched against their paths."""
    selected = []
    for record in records:
        path = record.path.replace("\\", "/")
        if include and not any(fnmatch.fnmatch(path, pattern) for pattern in include):
            continue
        if any(fnmatch.fnmatch(path, pattern) for pattern in exclude):
            continue
        selected.append(record)
    return selected


@app.command()
def scan(
    inputs: List[Path] = typer.Argument(
        ..., help="HTML documents or folders containing them.", resolve_path=True
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """List the files detected in one or more documents."""
    _setup_logging(verbose)
    detector = Detector(search_budget=AppConfig().search_budget)
    records = _detect_inputs(inputs, detector)

    if as_json:
        console.print_json(
            data=[
                {
                    "path": record.path,
                    "mime_type": record.mime_type,
                    "size": record.size,
                    "lines": record.line_count,
                }
                for record in records
            ]
        )
        return

    if not records:
        console.print("[yellow]No files detected.[/yellow]")
        return

    total = sum(record.size for record in records)
    table = Table(
        title=f"{len(records)} files ({format_file_size(total)})",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("#")
    table.add_column("Path")
    table.add_column("Type")
    table.add_column("Size")
    table.add_column("Lines")

    for number, record in enumerate(records, start=1):
        table.add_row(
            str(number),
            f"{get_file_icon(record.path)} {record.path}",
            record.mime_type,
            format_file_size(record.size),
            str(record.line_count),
        )

    console.print(table)


@app.command()
def preview(
    document: Path = typer.Argument(..., help="HTML document", exists=True, dir_okay=False),
    files: List[str] = typer.Option([], "--file", "-f", help="Only show these paths"),
) -> None:
    """Show the detected files with syntax highlighting."""
    records = Detector(search_budget=AppConfig().search_budget).detect_file(document)
    if files:
        wanted = set(files)
        records = [record for record in records if record.path in wanted]

    if not records:
        console.print("[yellow]No files detected.[/yellow]")
        return

    for record in records:
        lexer = Syntax.guess_lexer(record.path.replace("\\", "/"), code=record.content)
        console.print(
            Panel(
                Syntax(record.content, lexer, line_numbers=True),
                title=record.path,
                subtitle=f"{format_file_size(record.size)} · {record.line_count} lines",
            )
        )


@app.command()
def pack(
    inputs: List[Path] = typer.Argument(
        ..., help="HTML documents or folders containing them.", resolve_path=True
    ),
    include: List[str] = typer.Option([], "--include", "-i", help="Glob of paths to keep"),
    exclude: List[str] = typer.Option([], "--exclude", "-x", help="Glob of paths to drop"),
    out: Path = typer.Option(None, "--out", "-o", help="Directory to save the archive in"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Save the detected files of one or more documents as a zip archive."""
    _setup_logging(verbose)
    config = AppConfig(output_dir=out if out is not None else AppConfig().output_dir)

    records = _detect_inputs(inputs, Detector(search_budget=config.search_budget))
    selected = _select(records, include, exclude)
    if not selected:
        console.print("[yellow]No files selected.[/yellow]")
        return

    builder = ArchiveBuilder(
        ZipCompressor(),
        manifest_name=config.manifest_name,
        compression_level=config.compression_level,
        archive_prefix=config.archive_prefix,
    )

    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
        transient=True,
    ) as bar:
        task = bar.add_task(f"Compressing {len(selected)} files...", total=100)
        try:
            artifact = asyncio.run(
                builder.build(selected, progress=lambda pct: bar.update(task, completed=pct))
            )
        except CodeSaverError as exc:
            console.print(f"[red]Save failed: {exc}[/red]")
            raise typer.Exit(code=1)

    result = save_artifact(artifact, config.resolve_output_dir(Path.cwd()))
    if not result.success:
        console.print(f"[red]Save failed: {result.error}[/red]")
        raise typer.Exit(code=1)

    console.print(
        f"[green]Saved {len(selected)} files ({format_file_size(artifact.size)}) "
        f"to {result.download_id}[/green]"
    )


@app.command()
def watch(
    document: Path = typer.Argument(..., help="HTML document", exists=True, dir_okay=False),
    delay: float = typer.Option(AppConfig().debounce_seconds, help="Quiet period before rescanning"),
    interval: float = typer.Option(AppConfig().poll_interval, help="Seconds between file checks"),
    timeout: Optional[float] = typer.Option(None, help="Stop after this many seconds"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rescan a document whenever it changes."""
    _setup_logging(verbose)
    detector = Detector(search_budget=AppConfig().search_budget)

    def on_update(trigger: TriggerState, added: List[FileRecord]) -> None:
        console.print(f"Save {trigger.count} files")
        for record in added:
            console.print(f"  + {record.path} ({format_file_size(record.size)})")

    async def _run() -> None:
        scheduler = RescanScheduler(
            lambda: detector.detect_file(document), delay=delay, on_update=on_update
        )
        watcher = DocumentWatcher(document, scheduler, poll_interval=interval)
        stop = asyncio.Event()
        if timeout is not None:
            asyncio.get_running_loop().call_later(timeout, stop.set)
        scheduler.notify()
        await watcher.run(stop)

    console.print(f"Watching [bold]{document}[/bold] (Ctrl+C to stop)")
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("Stopped.")


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
) -> None:
    """Start the web interface."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover - defensive
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    console.print(f"Starting web interface on http://{host}:{port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
