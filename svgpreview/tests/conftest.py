import argparse
from pathlib import Path
from typing import Any, Callable

import pytest

from svgpreview.core.load.config import ACTIVE_FILE_ENV

ICONS_SOURCE: str = """// Icons used by the navigation bar
export default { logo: "//cdn.example.com/logo.svg", icon: "https://cdn.example.com/icon.svg" };
"""


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """Run inside an empty directory with no active file exported."""
    monkeypatch.chdir(tmp_path)
    # Set before deleting so teardown also removes a value loaded from .env
    monkeypatch.setenv(ACTIVE_FILE_ENV, "")
    monkeypatch.delenv(ACTIVE_FILE_ENV)
    return tmp_path


@pytest.fixture
def write_source(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write source text to a file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path: Path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def icons_file(write_source) -> Path:
    return write_source("icons.ts", ICONS_SOURCE)


@pytest.fixture
def make_args() -> Callable[..., argparse.Namespace]:
    """Build the namespace the CLI parser would produce for preview/symbols."""

    def _make(**overrides: Any) -> argparse.Namespace:
        values: dict[str, Any] = {
            "file": None,
            "config": None,
            "output": None,
            "serve": False,
            "port": None,
            "open": False,
            "log_dir": None,
        }
        values.update(overrides)
        return argparse.Namespace(**values)

    return _make
