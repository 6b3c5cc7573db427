"""Shared configuration defaults for loading sources and rendering previews."""

# Source dialects the preview command accepts
DEFAULT_EXTENSIONS = (".ts", ".js")

CONFIG_FILENAME = "svgpreview.yaml"
ACTIVE_FILE_ENV = "SVGPREVIEW_ACTIVE_FILE"

DEFAULT_TITLE = "SVG Preview"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 6767
