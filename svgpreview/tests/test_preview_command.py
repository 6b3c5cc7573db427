import json
import sys
from pathlib import Path

import pytest

from svgpreview.cli import cli
from svgpreview.cli.preview import preview_command as preview_module
from svgpreview.cli.preview.preview_command import preview_command
from svgpreview.cli.symbols.symbols_command import symbols_command
from svgpreview.core.load.config import ACTIVE_FILE_ENV


def _flatten(text: str) -> str:
    """Collapse whitespace, including the line wrapping rich applies."""
    return " ".join(text.split())


def test_preview_writes_document_to_stdout(workdir: Path, icons_file: Path, make_args, capsys):
    exit_code: int = preview_command(make_args(file=str(icons_file)))

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out.count('<div class="svg-item">') == 2
    assert '<img src="https://cdn.example.com/logo.svg" alt="logo" />' in captured.out
    assert '<p class="svg-name" data-name="icon">icon</p>' in captured.out
    assert captured.err == ""


def test_preview_uses_active_file_from_environment(
    workdir: Path, icons_file: Path, make_args, monkeypatch, capsys
):
    monkeypatch.setenv(ACTIVE_FILE_ENV, str(icons_file))

    exit_code: int = preview_command(make_args())

    assert exit_code == 0
    assert 'data-name="logo"' in capsys.readouterr().out


def test_no_active_target(workdir: Path, make_args, capsys):
    exit_code: int = preview_command(make_args())

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out == ""
    assert "No active editor found." in _flatten(captured.err)


def test_unsupported_file_type_never_reads(workdir: Path, make_args, monkeypatch, capsys):
    reads: list[Path] = []
    monkeypatch.setattr(
        preview_module, "read_symbol_map", lambda path, encoding: reads.append(path)
    )

    exit_code: int = preview_command(make_args(file=str(workdir / "styles.css")))

    captured = capsys.readouterr()
    assert exit_code == 0
    assert reads == []
    assert captured.out == ""
    assert (
        "Please open a TypeScript or JavaScript file containing the SVG object."
        in _flatten(captured.err)
    )


def test_missing_default_export(workdir: Path, write_source, make_args, capsys):
    path: Path = write_source("plain.js", "const answer = 42;\n")

    exit_code: int = preview_command(make_args(file=str(path)))

    captured = capsys.readouterr()
    assert exit_code == 1
    assert captured.out == ""
    assert (
        "Error reading SVG map: No object found exported as default in the file."
        in _flatten(captured.err)
    )


def test_malformed_literal(workdir: Path, write_source, make_args, capsys):
    path: Path = write_source("calls.ts", "export default { logo: load('logo') };\n")

    exit_code: int = preview_command(make_args(file=str(path)))

    err: str = _flatten(capsys.readouterr().err)
    assert exit_code == 1
    assert "Unsupported expression 'load'" in err
    assert "(line 1, column 24)" in err


def test_invalid_number_literal(workdir: Path, write_source, make_args, capsys):
    path: Path = write_source("numbers.ts", "export default { logo: 1e5n };\n")

    exit_code: int = preview_command(make_args(file=str(path)))

    err: str = _flatten(capsys.readouterr().err)
    assert exit_code == 1
    assert "Error reading SVG map: Invalid number literal '1e5n'" in err


def test_missing_file(workdir: Path, make_args, capsys):
    exit_code: int = preview_command(make_args(file=str(workdir / "gone.ts")))

    err: str = _flatten(capsys.readouterr().err)
    assert exit_code == 1
    assert "Error reading SVG map:" in err
    assert "No such file or directory" in err


def test_output_file(workdir: Path, icons_file: Path, make_args, capsys):
    output: Path = workdir / "out" / "preview.html"

    exit_code: int = preview_command(make_args(file=str(icons_file), output=str(output)))

    captured = capsys.readouterr()
    assert exit_code == 0
    assert captured.out == ""
    assert "Rendered 2 symbol(s)" in _flatten(captured.err)
    document: str = output.read_text(encoding="utf-8")
    assert '<img src="https://cdn.example.com/logo.svg" alt="logo" />' in document


def test_output_file_with_unpaired_surrogate_escape(workdir: Path, write_source, make_args, capsys):
    path: Path = write_source("emoji.ts", 'export default { half: "\\uD83D.svg" };\n')
    output: Path = workdir / "preview.html"

    exit_code: int = preview_command(make_args(file=str(path), output=str(output)))

    assert exit_code == 0
    document: str = output.read_text(encoding="utf-8")
    assert '<img src="\ufffd.svg" alt="half" />' in document


def test_config_controls_title_and_extensions(
    workdir: Path, icons_file: Path, write_source, make_args, capsys
):
    (workdir / "svgpreview.yaml").write_text(
        'panel:\n  title: Brand Icons\nsource:\n  extensions: [".mjs"]\n'
    )
    module_file: Path = write_source("icons.mjs", 'export default { a: "//x/a.svg" };')

    assert preview_command(make_args(file=str(icons_file))) == 0
    assert "Please open a TypeScript" in _flatten(capsys.readouterr().err)

    assert preview_command(make_args(file=str(module_file))) == 0
    out: str = capsys.readouterr().out
    assert "<title>Brand Icons</title>" in out
    assert 'src="https://x/a.svg"' in out


def test_invalid_config(workdir: Path, icons_file: Path, make_args, capsys):
    (workdir / "svgpreview.yaml").write_text("serve:\n  port: 0\n")

    exit_code: int = preview_command(make_args(file=str(icons_file)))

    assert exit_code == 1
    assert "Error loading config:" in _flatten(capsys.readouterr().err)


def test_log_dir_records_events(workdir: Path, icons_file: Path, write_source, make_args, capsys):
    log_dir: Path = workdir / "logs"

    assert preview_command(make_args(file=str(icons_file), log_dir=str(log_dir))) == 0
    broken: Path = write_source("broken.ts", "export const x = 1;")
    assert preview_command(make_args(file=str(broken), log_dir=str(log_dir))) == 1

    entries: list[dict] = []
    for log_file in sorted(log_dir.glob("*.log")):
        entries.extend(json.loads(line) for line in log_file.read_text().splitlines())

    events: list[str] = [entry["event"] for entry in entries]
    assert events == ["preview_start", "preview_complete", "preview_start", "preview_error"]
    assert entries[1]["symbol_count"] == 2
    assert entries[1]["output"] == "stdout"
    assert entries[3]["level"] == "ERROR"
    assert entries[3]["error_type"] == "ExtractionError"


def test_symbols_command_lists_table(workdir: Path, icons_file: Path, make_args, capsys):
    exit_code: int = symbols_command(make_args(file=str(icons_file)))

    out: str = capsys.readouterr().out
    assert exit_code == 0
    assert "icons.ts (2 symbols)" in out
    assert "logo" in out
    assert "https://cdn.example.com/logo.svg" in out
    assert "https://cdn.example.com/icon.svg" in out


def test_symbols_command_reports_errors(workdir: Path, write_source, make_args, capsys):
    path: Path = write_source("nothing.ts", "export {};")

    assert symbols_command(make_args(file=str(path))) == 1
    assert "No object found exported as default" in _flatten(capsys.readouterr().out)


def test_main_dispatches_preview(workdir: Path, icons_file: Path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["svgpreview", "preview", str(icons_file)])

    assert cli.main() == 0
    assert 'data-name="logo"' in capsys.readouterr().out


def test_main_reads_active_file_from_dotenv(workdir: Path, icons_file: Path, monkeypatch, capsys):
    (workdir / ".env").write_text(f"{ACTIVE_FILE_ENV}={icons_file}\n")
    monkeypatch.setattr(sys, "argv", ["svgpreview", "symbols"])

    assert cli.main() == 0
    assert "https://cdn.example.com/logo.svg" in capsys.readouterr().out


def test_main_without_command_prints_help(workdir: Path, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["svgpreview"])

    assert cli.main() == 1
    assert "usage: svgpreview" in capsys.readouterr().out


class _InterruptedServer:
    """Stands in for the panel server; stops as if Ctrl+C was pressed."""

    def __init__(self):
        self.closed = False

    def serve_forever(self):
        raise KeyboardInterrupt

    def server_close(self):
        self.closed = True


def test_serve_until_interrupted(workdir: Path, icons_file: Path, make_args, monkeypatch, capsys):
    server = _InterruptedServer()
    calls: list[tuple] = []

    def fake_create_server(document, symbol_map, host, port):
        calls.append((host, port, len(symbol_map), 'data-name="logo"' in document))
        return server

    monkeypatch.setattr(preview_module, "create_server", fake_create_server)

    exit_code: int = preview_command(make_args(file=str(icons_file), serve=True))

    captured = capsys.readouterr()
    assert exit_code == 0
    assert calls == [("localhost", 6767, 2, True)]
    assert server.closed
    assert captured.out == ""
    err: str = _flatten(captured.err)
    assert "Open in browser: http://localhost:6767/" in err
    assert "Server stopped" in err


def test_serve_port_in_use(workdir: Path, icons_file: Path, make_args, capsys):
    blocker = preview_module.create_server("", None, host="127.0.0.1", port=0)
    (workdir / "svgpreview.yaml").write_text("serve:\n  host: 127.0.0.1\n")
    try:
        port: int = blocker.server_address[1]
        exit_code: int = preview_command(
            make_args(file=str(icons_file), serve=True, port=port)
        )
    finally:
        blocker.server_close()

    assert exit_code == 1
    assert f"Error: Port {port} is already in use" in _flatten(capsys.readouterr().err)
