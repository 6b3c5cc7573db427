#!/usr/bin/env python3
"""CLI command to preview the symbol map of the active source file."""

import os
import sys
import time
import webbrowser
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from svgpreview.cli.preview.logging_manager import StructuredLogger
from svgpreview.cli.serve.server import create_server
from svgpreview.core.errors import (
    ConfigError,
    EvaluationError,
    ExtractionError,
    NoActiveTarget,
    UnsupportedFileType,
)
from svgpreview.core.extract.extract import read_symbol_map
from svgpreview.core.load.config import ACTIVE_FILE_ENV
from svgpreview.core.load.load import load_config
from svgpreview.core.render.render import render_document
from svgpreview.core.shapes import PreviewConfig, SymbolMap

# Messages go to stderr so stdout can carry the rendered document
console = Console(stderr=True)

READ_ERRORS = (ExtractionError, EvaluationError, OSError, UnicodeDecodeError)


def resolve_active_file(file_arg: str | None) -> Path:
    """The file named on the command line, else the one the host exported."""
    path = file_arg or os.environ.get(ACTIVE_FILE_ENV)
    if not path:
        raise NoActiveTarget()
    return Path(path)


def check_file_type(file_path: Path, extensions: list[str]) -> None:
    if not any(file_path.name.endswith(extension) for extension in extensions):
        raise UnsupportedFileType(file_path, extensions)


def build_preview(file_path: Path, config: PreviewConfig) -> tuple[SymbolMap, str]:
    symbol_map = read_symbol_map(file_path, encoding=config.source.encoding)
    document = render_document(symbol_map, title=config.panel.title)
    return symbol_map, document


def load_target(args) -> tuple[PreviewConfig, Path] | int:
    """Load config and check the active file, or report why not.

    Returns the exit code instead when the pipeline should halt.
    """
    try:
        config = load_config(args.config)
    except ConfigError as e:
        console.print(f"[red]Error loading config: {escape(str(e))}[/red]")
        return 1

    try:
        file_path = resolve_active_file(args.file)
        check_file_type(file_path, config.source.extensions)
    except (NoActiveTarget, UnsupportedFileType) as e:
        console.print(f"[yellow]{escape(str(e))}[/yellow]")
        return 0

    return config, file_path


def preview_command(args):
    target = load_target(args)
    if isinstance(target, int):
        return target
    config, file_path = target

    structured_logger = StructuredLogger(args.log_dir) if args.log_dir else None
    if structured_logger:
        structured_logger.log_preview_start(str(file_path))

    start_time = time.time()
    try:
        symbol_map, document = build_preview(file_path, config)
    except READ_ERRORS as e:
        console.print(f"[red]Error reading SVG map: {escape(str(e))}[/red]")
        if structured_logger:
            structured_logger.log_preview_error(str(file_path), type(e).__name__, str(e))
        return 1

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(document, encoding="utf-8")
        except OSError as e:
            console.print(f"[red]Error writing preview: {escape(str(e))}[/red]")
            if structured_logger:
                structured_logger.log_preview_error(str(file_path), type(e).__name__, str(e))
            return 1
        console.print(
            f"[green]✓[/green] Rendered {len(symbol_map)} symbol(s) to {escape(str(output_path))}"
        )
        output = str(output_path)
    elif args.serve:
        output = "panel"
    else:
        sys.stdout.write(document)
        output = "stdout"

    if structured_logger:
        structured_logger.log_preview_complete(
            str(file_path),
            symbol_count=len(symbol_map),
            duration_ms=(time.time() - start_time) * 1000,
            output=output,
        )

    if args.serve:
        port = args.port if args.port is not None else config.serve.port
        return serve_preview(document, symbol_map, config.serve.host, port, args.open)

    if args.open and args.output:
        webbrowser.open(Path(args.output).resolve().as_uri())

    return 0


def serve_preview(
    document: str, symbol_map: SymbolMap, host: str, port: int, open_browser: bool
) -> int:
    try:
        server = create_server(document, symbol_map, host=host, port=port)
    except OSError as e:
        if "Address already in use" in str(e):
            console.print(f"[red]Error: Port {port} is already in use[/red]")
            console.print("Try a different port with --port")
        else:
            console.print(f"[red]Error starting server: {escape(str(e))}[/red]")
        return 1

    url = f"http://{host}:{port}/"
    console.print("[green]Serving preview...[/green]")
    console.print(f"  Symbols: {len(symbol_map)}")
    console.print(f"\n[blue]Open in browser:[/blue] {url}")
    console.print("\nPress Ctrl+C to stop the server")

    if open_browser:
        webbrowser.open(url)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped[/yellow]")
    finally:
        server.server_close()
    return 0
