"""Shared templating utilities for string interpolation."""

import re
from typing import Any

_VARIABLE_PATTERN = re.compile(r"\{\$([^}]+)\}")


def render_template_string(template_str: str, context: dict[str, Any]) -> str:
    """Render template string by replacing {$variable} with context values.

    Supports:
    - Simple variables: {$variable}
    - Nested keys: {$panel.title}

    Substitution is a single pass over the template, so values containing
    {$...} text are inserted as-is and never expanded.
    """

    def _replace(match: re.Match) -> str:
        var_path = match.group(1).strip()

        # Support nested access like panel.title
        value: Any = context
        for part in var_path.split("."):
            value = value.get(part) if isinstance(value, dict) else None

            if value is None:
                raise ValueError(
                    f"Missing required template variable: '{var_path}'. "
                    f"Available: {list(context.keys())}"
                )

        return str(value)

    return _VARIABLE_PATTERN.sub(_replace, template_str)
