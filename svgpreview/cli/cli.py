#!/usr/bin/env python3
"""Main CLI entry point for svgpreview."""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from svgpreview.cli.preview.preview_command import preview_command
from svgpreview.cli.symbols.symbols_command import symbols_command


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "file",
        nargs="?",
        help="Source file holding the default-exported SVG map "
        "(default: $SVGPREVIEW_ACTIVE_FILE)",
    )
    parser.add_argument(
        "--config",
        help="Path to config file (default: ./svgpreview.yaml if present)",
    )


def main():
    """Main CLI dispatcher."""
    load_dotenv(dotenv_path=os.path.join(os.getcwd(), ".env"))

    try:
        parser = argparse.ArgumentParser(
            prog="svgpreview",
            description="Preview the SVG links exported by a TypeScript or JavaScript file",
        )
        parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Show debug logging on stderr",
        )

        subparsers = parser.add_subparsers(dest="command", help="Available commands")

        # Preview command
        preview_parser = subparsers.add_parser(
            "preview", help="Render the default-exported SVG map as an HTML gallery"
        )
        _add_source_arguments(preview_parser)
        preview_parser.add_argument(
            "--output",
            help="Write the gallery to this HTML file instead of stdout",
        )
        preview_parser.add_argument(
            "--serve",
            action="store_true",
            help="Serve the gallery on a local web server until Ctrl+C",
        )
        preview_parser.add_argument(
            "--port",
            type=int,
            help="Server port (default: serve.port from config, 6767)",
        )
        preview_parser.add_argument(
            "--open",
            action="store_true",
            help="Open the gallery in the default browser (with --output or --serve)",
        )
        preview_parser.add_argument(
            "--log-dir",
            help="Write a JSON event log for this run to the given directory",
        )

        # Symbols command
        symbols_parser = subparsers.add_parser(
            "symbols", help="List the default-exported SVG map in the terminal"
        )
        _add_source_arguments(symbols_parser)

        # Parse arguments
        args = parser.parse_args()

        if args.verbose:
            logging.basicConfig(
                level=logging.DEBUG,
                format="%(message)s",
                handlers=[RichHandler(console=Console(stderr=True))],
            )

        # Dispatch to appropriate command
        if args.command == "preview":
            return preview_command(args)
        elif args.command == "symbols":
            return symbols_command(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main() or 0)
