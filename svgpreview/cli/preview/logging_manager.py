"""JSON-based structured logger for preview runs."""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any


class LogLevel(str, Enum):
    INFO = "INFO"
    ERROR = "ERROR"


class StructuredLogger:
    """JSON lines logger, one file per run."""

    def __init__(self, log_dir: str | Path = ".svgpreview/logs"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.log_file = self.log_dir / f"{timestamp}.log"

    def log(self, level: LogLevel, **data: Any) -> None:
        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level.value,
            **data,
        }

        with open(self.log_file, "a") as f:
            f.write(json.dumps(entry) + "\n")

    def log_preview_start(self, source_file: str) -> None:
        self.log(LogLevel.INFO, event="preview_start", source_file=source_file)

    def log_preview_complete(
        self, source_file: str, symbol_count: int, duration_ms: float, output: str
    ) -> None:
        self.log(
            LogLevel.INFO,
            event="preview_complete",
            source_file=source_file,
            status="complete",
            symbol_count=symbol_count,
            duration_ms=duration_ms,
            output=output,
        )

    def log_preview_error(
        self, source_file: str, error_type: str, error_message: str
    ) -> None:
        self.log(
            LogLevel.ERROR,
            event="preview_error",
            source_file=source_file,
            status="failed",
            error_type=error_type,
            error_message=error_message,
        )
