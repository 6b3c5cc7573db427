"""CLI command to list the symbols of the active source file in the terminal."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from svgpreview.cli.preview.preview_command import READ_ERRORS, load_target
from svgpreview.core.extract.extract import read_symbol_map
from svgpreview.core.render.render import build_tiles

console = Console()


def symbols_command(args):
    target = load_target(args)
    if isinstance(target, int):
        return target
    config, file_path = target

    try:
        symbol_map = read_symbol_map(file_path, encoding=config.source.encoding)
    except READ_ERRORS as e:
        console.print(f"[red]Error reading SVG map: {escape(str(e))}[/red]")
        return 1

    if len(symbol_map) == 0:
        console.print(f"[yellow]No symbols in {escape(str(file_path))}[/yellow]")
        return 0

    table = Table(title=f"{file_path.name} ({len(symbol_map)} symbols)")
    table.add_column("Name", style="cyan")
    table.add_column("Image", overflow="fold")

    for tile in build_tiles(symbol_map):
        table.add_row(escape(tile.name), escape(tile.src))

    console.print(table)
    return 0
