"""
json-renderer CLI.

Commands:
- apply: replay an NDJSON patch file into a tree
- stream: stream a tree from a generator endpoint
- show: print the visible outline of a tree
- serve: run the dev replay server
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.tree import Tree

from json_renderer import __version__
from json_renderer.config import RendererConfig, load_config
from json_renderer.core.errors import ConfigError
from json_renderer.core.visibility import AuthState, VisibilityContext
from json_renderer.runtime.renderer import Renderer, RenderProps
from json_renderer.runtime.stream import UIStream, build_tree

logger = logging.getLogger(__name__)

app = typer.Typer(help="Declarative JSON UI trees: stream, apply and inspect patch streams")
console = Console()

READ_CHUNK_SIZE = 4096


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr through rich."""
    handler = RichHandler(
        console=Console(stderr=True), show_time=False, show_path=False, rich_tracebacks=True
    )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"json-renderer {__version__}")
        raise typer.Exit()


def _config(ctx: typer.Context) -> RendererConfig:
    return ctx.obj if isinstance(ctx.obj, RendererConfig) else RendererConfig()


def _write_tree(tree: dict[str, Any] | None, out: Path | None) -> None:
    text = json.dumps(tree, indent=2)
    if out is None:
        typer.echo(text)
    else:
        out.write_text(text + "\n")
        typer.echo(f"✓ Wrote tree to {out}", err=True)


async def _read_chunks(path: Path) -> AsyncIterator[bytes]:
    with open(path, "rb") as f:
        while chunk := f.read(READ_CHUNK_SIZE):
            yield chunk


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (default: ./json-renderer.toml)"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", "-l", help="Log level (overrides config)"
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version",
    ),
) -> None:
    """json-renderer CLI main callback for global options."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    configure_logging(log_level or config.logging.level)
    ctx.obj = config


# =============================================================================
# Commands
# =============================================================================


@app.command("apply")
def apply_command(
    patch_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="NDJSON patch file"),
    out: Path | None = typer.Option(None, "--out", "-o", help="Output file (default: stdout)"),
) -> None:
    """Apply an NDJSON patch file and print the resulting tree."""
    tree = asyncio.run(build_tree(_read_chunks(patch_file)))
    logger.debug(f"Built tree with {len(tree['elements'])} elements from {patch_file}")
    _write_tree(tree, out)


@app.command("stream")
def stream_command(
    ctx: typer.Context,
    prompt: str = typer.Argument(..., help="Prompt sent to the generator"),
    api: str | None = typer.Option(None, "--api", help="Generator endpoint (overrides config)"),
    context: str | None = typer.Option(None, "--context", help="JSON object sent as context"),
    out: Path | None = typer.Option(None, "--out", "-o", help="Output file (default: stdout)"),
) -> None:
    """Stream a tree from a generator endpoint and print it."""
    config = _config(ctx)

    context_data = None
    if context is not None:
        try:
            context_data = json.loads(context)
        except json.JSONDecodeError as e:
            typer.echo(f"Error: --context is not valid JSON: {e}", err=True)
            raise typer.Exit(code=1)

    stream = UIStream(
        api or config.stream.api,
        headers=config.stream.headers,
        timeout=config.stream.timeout,
    )
    tree = asyncio.run(stream.send(prompt, context_data))
    _write_tree(tree, out)

    if stream.error is not None:
        typer.echo(f"Error: {stream.error}", err=True)
        raise typer.Exit(code=1)


def _outline(props: RenderProps) -> Tree:
    element = props.element
    label = f"[bold]{element.get('type')}[/bold] [dim]{element.get('key')}[/dim]"
    text = (element.get("props") or {}).get("text") or (element.get("props") or {}).get("title")
    if isinstance(text, str):
        label += f"  {text}"
    node = Tree(label)
    node.children.extend(props.children)
    return node


@app.command("show")
def show_command(
    tree_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Tree JSON file"),
    data: Path | None = typer.Option(None, "--data", "-d", exists=True, help="Data model JSON file"),
    signed_in: bool = typer.Option(False, "--signed-in", help="Evaluate auth conditions as signed in"),
) -> None:
    """Print the outline of the elements visible for a data model."""
    try:
        tree = json.loads(tree_file.read_text())
        data_model = json.loads(data.read_text()) if data else {}
    except json.JSONDecodeError as e:
        typer.echo(f"Error: invalid JSON: {e}", err=True)
        raise typer.Exit(code=1)

    renderer = Renderer({}, fallback=_outline)
    ctx = VisibilityContext(data_model=data_model, auth_state=AuthState(is_signed_in=signed_in))
    outline = renderer.render(tree, ctx)
    if outline is None:
        typer.echo("Nothing visible")
        return
    console.print(outline)


@app.command("serve")
def serve_command(
    ctx: typer.Context,
    patch_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="NDJSON patch file"),
    host: str | None = typer.Option(None, "--host", help="Bind host (overrides config)"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port (overrides config)"),
    delay: float | None = typer.Option(None, "--delay", help="Seconds between lines"),
) -> None:
    """Serve a patch file as a streaming generator endpoint."""
    import uvicorn

    from json_renderer.server import create_replay_app

    config = _config(ctx).server
    lines = patch_file.read_text().splitlines()
    replay_app = create_replay_app(lines, delay=delay if delay is not None else config.delay)

    bind_host = host or config.host
    bind_port = port or config.port
    typer.echo(f"Replaying {patch_file} at http://{bind_host}:{bind_port}/api/generate")
    uvicorn.run(replay_app, host=bind_host, port=bind_port)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
