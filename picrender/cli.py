"""CLI entry point for picrender."""

from __future__ import annotations

import json
import logging
import shutil
import sys
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from picrender.config import PicrenderConfig, load_config
from picrender.config.loader import DEFAULT_CONFIG_TEMPLATE
from picrender.errors import RenderError, SourceFormatError, ToolUnavailableError
from picrender.models import DiagramFormat, DiagramSource
from picrender.pipeline import RenderPipeline, RenderRequest
from picrender.presenter import FileSink, OutputSink, StreamSink, ViewerSink
from picrender.rasterizer import cairo as cairo_backend
from picrender.tools import install_hint

app = typer.Typer(
    name="picrender",
    help="Render pic and graphviz diagrams to PNG.",
)

config_app = typer.Typer(help="Manage picrender configuration.")
app.add_typer(config_app, name="config")

# Status output goes to stderr so `render --stdout` keeps stdout pure PNG.
console = Console(stderr=True)

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

# Global state
_config: PicrenderConfig | None = None


def _get_config() -> PicrenderConfig:
    if _config is None:
        return load_config()
    return _config


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _configure_logging(cfg: PicrenderConfig, verbose: bool = False) -> None:
    """Attach a single handler to the package logger."""
    pkg_logger = logging.getLogger("picrender")
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)

    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(console=console, show_path=False, markup=False)

    pkg_logger.addHandler(handler)
    pkg_logger.setLevel(logging.DEBUG if verbose else _LOG_LEVELS[cfg.log_level])


def _fail(error: RenderError) -> typer.Exit:
    """Report a pipeline error and return the Exit carrying its code."""
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    if isinstance(error, ToolUnavailableError):
        console.print(f"[dim]Hint:[/dim] {escape(error.hint)}")
    if error.retryable:
        console.print("[dim]This failure may succeed if retried.[/dim]")
    return typer.Exit(error.exit_code)


def _build_pipeline(cfg: PicrenderConfig, backend: str | None) -> RenderPipeline:
    return RenderPipeline.from_config(cfg, backend)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to picrender.yaml")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log debug output")
    ] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _configure_logging(_config, verbose)


@app.command()
def render(
    source: Path = typer.Argument(..., help="Diagram description file (.pic, .dot, .gv)"),
    dpi: int | None = typer.Option(None, "--dpi", "-d", help="Output resolution"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="PNG path (default: SOURCE with .png suffix)"
    ),
    to_stdout: bool = typer.Option(False, "--stdout", help="Write the PNG to stdout"),
    view: bool = typer.Option(False, "--view/--no-view", help="Open the PNG in a viewer"),
    diagram_format: DiagramFormat | None = typer.Option(
        None, "--format", "-f", help="Diagram language (default: from suffix)"
    ),
    backend: str | None = typer.Option(
        None, "--backend", "-b", help="Rasterizer backend: inkscape | cairo"
    ),
) -> None:
    """Render one diagram to PNG."""
    cfg = _get_config()
    if to_stdout and (view or output is not None):
        console.print("[red]Error:[/red] --stdout cannot be combined with --output or --view")
        raise typer.Exit(1)

    target = output or source.with_suffix(".png")
    sink: OutputSink
    if to_stdout:
        sink = StreamSink(sys.stdout.buffer, name="<stdout>")
    elif view:
        sink = ViewerSink(cfg.viewer.command, path=target)
    else:
        sink = FileSink(target)

    try:
        diagram = DiagramSource.from_path(source, diagram_format)
        pipeline = _build_pipeline(cfg, backend)
        request = RenderRequest(
            source=diagram, sink=sink, dpi=dpi if dpi is not None else cfg.default_dpi
        )
        image = pipeline.run(request)
    except RenderError as e:
        raise _fail(e)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if not to_stdout:
        console.print(
            f"[green]Rendered[/green] {escape(str(source))} -> {escape(sink.destination)} "
            f"({image.width}x{image.height} px @ {image.dpi} dpi)"
        )


def _unique_png_name(src: Path, used: set[str]) -> str:
    """Output file name for *src* that no earlier source in the batch took."""
    name = f"{src.stem}.png"
    n = 2
    while name in used:
        name = f"{src.stem}-{n}.png"
        n += 1
    return name


@app.command()
def batch(
    sources: list[Path] = typer.Argument(..., help="Diagram description files"),
    output_dir: Path = typer.Option(..., "--output-dir", "-o", help="Directory for PNGs"),
    dpi: int | None = typer.Option(None, "--dpi", "-d", help="Output resolution"),
    workers: int | None = typer.Option(
        None, "--workers", "-w", min=1, help="Concurrent renders"
    ),
    backend: str | None = typer.Option(
        None, "--backend", "-b", help="Rasterizer backend: inkscape | cairo"
    ),
) -> None:
    """Render several diagrams concurrently into one directory."""
    cfg = _get_config()
    resolution = dpi if dpi is not None else cfg.default_dpi

    requests: list[RenderRequest] = []
    failures: list[tuple[Path, RenderError]] = []
    used_names: set[str] = set()
    for src in sources:
        try:
            diagram = DiagramSource.from_path(src)
        except SourceFormatError as e:
            failures.append((src, e))
            continue
        name = _unique_png_name(src, used_names)
        used_names.add(name)
        sink = FileSink(output_dir / name)
        requests.append(RenderRequest(source=diagram, sink=sink, dpi=resolution))

    try:
        pipeline = _build_pipeline(cfg, backend)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    try:
        outcomes = pipeline.run_many(
            requests, max_workers=workers if workers is not None else cfg.max_workers
        )
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    table = Table(title=f"Rendered {sum(o.ok for o in outcomes)}/{len(sources)}")
    table.add_column("Source", style="cyan")
    table.add_column("Result")
    for src, err in failures:
        table.add_row(escape(str(src)), f"[red]{escape(str(err))}[/red]")
    for outcome in outcomes:
        label = escape(outcome.request.source.label)
        if outcome.ok:
            img = outcome.image
            table.add_row(
                label,
                f"[green]{escape(outcome.request.sink.destination)}[/green] "
                f"({img.width}x{img.height})",
            )
        else:
            table.add_row(label, f"[red]{escape(str(outcome.error))}[/red]")
    console.print(table)

    errors = [err for _, err in failures] + [o.error for o in outcomes if o.error]
    if errors:
        raise typer.Exit(errors[0].exit_code)


def _doctor_rows(cfg: PicrenderConfig) -> list[tuple[str, str, str | None, str]]:
    """(tool, purpose, resolved path or None, hint) for every configured tool."""
    rows: list[tuple[str, str, str | None, str]] = []
    for tool, purpose in (
        (cfg.vectorizer.dpic_path, "pic -> SVG"),
        (cfg.vectorizer.dot_path, "dot -> SVG"),
    ):
        rows.append((tool, purpose, shutil.which(tool), install_hint(tool)))

    if cfg.rasterizer.backend == "inkscape":
        tool = cfg.rasterizer.inkscape_path
        rows.append((tool, "SVG -> PNG", shutil.which(tool), install_hint(tool)))
    else:
        found = "(python module)" if cairo_backend.cairosvg is not None else None
        rows.append(("cairosvg", "SVG -> PNG", found, "pip install cairosvg"))

    viewer = cfg.viewer.command[0]
    rows.append((viewer, "viewer (--view)", shutil.which(viewer), install_hint(viewer)))
    return rows


@app.command()
def doctor() -> None:
    """Check that the external rendering tools are installed."""
    cfg = _get_config()
    rows = _doctor_rows(cfg)

    table = Table(title="Rendering tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Purpose")
    table.add_column("Status")
    table.add_column("Location / fix")
    for tool, purpose, found, hint in rows:
        if found:
            table.add_row(tool, purpose, "[green]ok[/green]", escape(found))
        else:
            table.add_row(tool, purpose, "[red]missing[/red]", escape(hint))
    console.print(table)

    if any(found is None for _, _, found, _ in rows):
        raise typer.Exit(ToolUnavailableError.exit_code)


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a default picrender.yaml to the current directory."""
    dest = Path("picrender.yaml")
    if dest.exists() and not force:
        console.print(f"[yellow]{dest} already exists[/yellow] (use --force to overwrite)")
        raise typer.Exit(1)
    dest.write_text(DEFAULT_CONFIG_TEMPLATE)
    console.print(f"[green]Created[/green] {dest}")


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration as YAML."""
    cfg = _get_config()
    text = yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False)
    rprint(Syntax(text, "yaml"))


if __name__ == "__main__":
    app()
