"""Loader for the optional svgpreview.yaml config file."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from svgpreview.core.errors import ConfigError
from svgpreview.core.load.config import CONFIG_FILENAME
from svgpreview.core.shapes import PreviewConfig

logger = logging.getLogger(__name__)


def load_config(file_path: str | Path | None = None) -> PreviewConfig:
    """Load preview config from YAML.

    Args:
        file_path: Explicit config path. When omitted, svgpreview.yaml in the
                  current directory is used if present, otherwise defaults.
    """
    if file_path is None:
        file_path = Path.cwd() / CONFIG_FILENAME
        if not file_path.exists():
            logger.debug(f"No {CONFIG_FILENAME} in {file_path.parent}, using defaults")
            return PreviewConfig()
    else:
        file_path = Path(file_path)
        if not file_path.exists():
            raise ConfigError(f"Config file not found: {file_path}")

    try:
        with open(file_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {file_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected a mapping at the top of {file_path}, got {type(data).__name__}"
        )

    try:
        config = PreviewConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {file_path}: {e}") from e

    logger.debug(f"Loaded config from {file_path}")
    return config
