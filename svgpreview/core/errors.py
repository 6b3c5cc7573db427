"""Exceptions raised along the extract-and-render pipeline."""

from pathlib import Path


class PreviewError(Exception):
    """Base class for all preview pipeline failures."""

    pass


class NoActiveTarget(PreviewError):
    """Raised when no source file was given to preview."""

    def __init__(self, message: str = "No active editor found."):
        super().__init__(message)


class UnsupportedFileType(PreviewError):
    """Raised when the active file is not one of the accepted source dialects."""

    def __init__(self, path: str | Path, extensions: list[str]):
        self.path = Path(path)
        self.extensions = list(extensions)
        super().__init__(
            "Please open a TypeScript or JavaScript file containing the SVG object. "
            f"Got '{self.path.name}', expected one of: {', '.join(self.extensions)}"
        )


class ExtractionError(PreviewError):
    """Raised when no default-exported object literal can be located."""

    pass


class EvaluationError(PreviewError):
    """Raised when the located literal cannot be read as a symbol map."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        self.reason = message
        self.line = line
        self.column = column
        if line is not None and column is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


class ConfigError(PreviewError):
    """Raised when the preview config file cannot be loaded."""

    pass
