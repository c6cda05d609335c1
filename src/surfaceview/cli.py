# src/surfaceview/cli.py
"""
SurfaceView Command Line Interface (CLI).

This module implements the terminal front end using `typer` and `rich`. The
terminal takes the place of a web page: a JSON file stands in for
the form, and a rich console stands in for the image view.

Features
--------
- **One-shot render**: send the default parameters (plus overrides) once and
  save the returned image.
- **Watch mode**: treat a JSON object file as the live form. The first render
  happens immediately; after that, every edit to the file is fed field by field
  into the form and debounced exactly like keystrokes in the browser.
- **Defaults**: print the default parameter set, handy as a starting file.

Usage
-----
    $ surfaceview defaults > form.json
    $ surfaceview render func=saddle background=#222222 -o saddle.svg
    $ surfaceview watch form.json --artifact-dir artifacts/renders
"""

from __future__ import annotations

import asyncio
import json
import traceback
from pathlib import Path
from typing import Annotated, Any

import httpx
import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from surfaceview.core.contracts.fields import SurfaceFields
from surfaceview.core.result import RequestOutcome, Success
from surfaceview.core.settings import Settings, load_settings
from surfaceview.form.live import LiveForm
from surfaceview.pipeline.request import RequestPipeline
from surfaceview.render.artifact import ArtifactStore
from surfaceview.render.controller import RenderController
from surfaceview.render.viewport import ConsoleViewPort
from surfaceview.viewer import SurfaceViewer

# Ensure env vars (like SURFACEVIEW_ENDPOINT) are loaded before any logic runs
load_dotenv()

app = typer.Typer(
    help="SurfaceView: render surface plots from live, debounced form parameters.",
    rich_markup_mode="markdown",
)
console = Console()


# --------------------------------------------------------------------------- #
# Helpers
# --------------------------------------------------------------------------- #


def _make_client(cfg: Settings) -> httpx.AsyncClient:
    """Build the HTTP client shared by every request of one command."""
    return httpx.AsyncClient(timeout=cfg.timeout_seconds)


def _parse_assignments(items: list[str]) -> dict[str, str]:
    """Turn ``NAME=VALUE`` arguments into a field mapping."""
    out: dict[str, str] = {}
    for item in items:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected NAME=VALUE, got {item!r}")
        out[name.strip()] = value
    return out


def _load_form_file(path: Path) -> dict[str, str]:
    """Read a JSON object of scalar values as form fields."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path} must contain a JSON object")

    fields: dict[str, str] = {}
    for name, value in data.items():
        if isinstance(value, dict | list) or value is None:
            raise typer.BadParameter(f"field {name!r} must be a scalar value")
        fields[str(name)] = str(value)
    return fields


def _apply_changes(form: LiveForm, fields: dict[str, str]) -> int:
    """Push edited, added and removed fields into ``form``; return the count."""
    changed = 0
    for name, value in fields.items():
        if form.get(name) != value:
            form.set(name, value)
            changed += 1
    for name in form.names():
        if name not in fields:
            form.remove(name)
            changed += 1
    return changed


def _effective_settings(
    endpoint: str | None,
    artifact_dir: Path | None = None,
    debounce_ms: int | None = None,
) -> Settings:
    """Apply command-line overrides on top of the loaded settings."""
    updates: dict[str, Any] = {}
    if endpoint:
        updates["endpoint"] = endpoint
    if artifact_dir is not None:
        updates["artifact_dir"] = artifact_dir
    if debounce_ms is not None:
        updates["debounce_ms"] = debounce_ms
    return load_settings().model_copy(update=updates)


async def _render_once(cfg: Settings, form: LiveForm, view: ConsoleViewPort) -> RequestOutcome:
    """Send the form once and render the result."""
    async with _make_client(cfg) as client:
        pipeline = RequestPipeline(
            client, cfg.endpoint, viewport=view, timeout=cfg.timeout_seconds
        )
        controller = RenderController(view, artifacts=ArtifactStore(cfg.artifact_dir))
        outcome = await pipeline.submit(form.capture_snapshot())
        controller.on_outcome(outcome)
        return outcome


async def _watch(cfg: Settings, form_file: Path, poll_seconds: float) -> None:
    """Re-render whenever ``form_file`` changes, until cancelled."""
    form = LiveForm(_load_form_file(form_file))
    view = ConsoleViewPort(console)
    last_mtime = form_file.stat().st_mtime_ns

    async with _make_client(cfg) as client:
        async with SurfaceViewer.from_settings(cfg, form, view, client):
            while True:
                await asyncio.sleep(poll_seconds)
                try:
                    mtime = form_file.stat().st_mtime_ns
                except OSError:
                    # Save-by-rename leaves no file for a moment.
                    continue
                if mtime == last_mtime:
                    continue
                try:
                    fields = _load_form_file(form_file)
                except OSError:
                    continue
                except typer.BadParameter as e:
                    # A half-saved file is normal while editing; wait for the next save.
                    last_mtime = mtime
                    console.print(
                        f"[dim yellow]Skipping unreadable form file: {escape(str(e))}[/dim yellow]"
                    )
                    continue
                last_mtime = mtime
                changed = _apply_changes(form, fields)
                if changed:
                    console.print(f"[dim]{changed} field(s) changed[/dim]")


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #


@app.command()  # type: ignore[misc]
def defaults() -> None:
    """Print the default form fields as JSON."""
    typer.echo(json.dumps(SurfaceFields().to_fields(), indent=2))


@app.command()  # type: ignore[misc]
def render(
    fields: Annotated[
        list[str] | None,
        typer.Argument(help="Field overrides as NAME=VALUE (e.g. func=saddle)."),
    ] = None,
    endpoint: Annotated[
        str | None,
        typer.Option("--endpoint", "-e", help="Draw endpoint URL (overrides settings)."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Where to save the returned image."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show full error tracebacks for debugging."),
    ] = False,
) -> None:
    """
    Render the default parameters once, with optional overrides.

    Exits with code 1 if the service or the network reports an error.
    """
    overrides = _parse_assignments(fields or [])
    cfg = _effective_settings(endpoint)
    form = LiveForm.with_defaults(**overrides)
    view = ConsoleViewPort(console)

    try:
        outcome = asyncio.run(_render_once(cfg, form, view))
    except Exception as e:
        console.print(f"\n[bold red]❌ Render Error:[/bold red] {e}")
        if verbose:
            traceback.print_exc()
        raise typer.Exit(code=1) from e

    if not isinstance(outcome, Success):
        raise typer.Exit(code=1)

    if output is not None:
        try:
            output.write_bytes(outcome.payload)
        except OSError as e:
            console.print(f"[bold red]⚠️ Failed to save to {output}: {e}[/bold red]")
            raise typer.Exit(code=1) from e
        console.print(
            Panel(
                f"Saved to: [link=file://{output.resolve()}]{output}[/link]",
                title="Artifact",
                border_style="green",
            )
        )


@app.command()  # type: ignore[misc]
def watch(
    form_file: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="JSON object file holding the form fields.",
        ),
    ],
    endpoint: Annotated[
        str | None,
        typer.Option("--endpoint", "-e", help="Draw endpoint URL (overrides settings)."),
    ] = None,
    artifact_dir: Annotated[
        Path | None,
        typer.Option("--artifact-dir", "-a", help="Directory for rendered images."),
    ] = None,
    debounce_ms: Annotated[
        int | None,
        typer.Option("--debounce-ms", min=0, help="Quiet period after the last edit."),
    ] = None,
    poll_ms: Annotated[
        int,
        typer.Option("--poll-ms", min=10, help="How often the form file is checked."),
    ] = 250,
) -> None:
    """
    Watch a form file and re-render after each burst of edits.

    Press Ctrl+C to stop.
    """
    cfg = _effective_settings(endpoint, artifact_dir, debounce_ms)
    console.print(
        Panel.fit(
            f"[bold cyan]SurfaceView[/bold cyan]\nWatching: [u]{form_file.name}[/u]\n"
            f"Endpoint: {cfg.endpoint}",
            border_style="cyan",
        )
    )
    try:
        asyncio.run(_watch(cfg, form_file, poll_ms / 1000.0))
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped.[/dim]")


if __name__ == "__main__":
    app()
