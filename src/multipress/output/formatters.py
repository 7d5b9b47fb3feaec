"""Plain-text and JSON rendering of ServiceResult.

Human output is a status line followed by indented key-value pairs;
``--json`` emits the full serialized result.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from multipress.services.result import ServiceResult


class OutputSettings(BaseModel):
    """How results are rendered, taken from the global CLI flags."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def _format_data_human(data: dict[str, Any]) -> str:
    lines: list[str] = []
    for key, value in data.items():
        if isinstance(value, (dict, list)):
            lines.append(f"  {key}: {_json.dumps(value, separators=(',', ':'))}")
        else:
            lines.append(f"  {key}: {value}")
    return "\n".join(lines)


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    Quiet mode drops the data block on success; verbose mode appends the
    error detail on failure.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)

    if result.ok:
        parts = [f"OK: {result.op}"]
        if result.data and not settings.quiet:
            parts.append(_format_data_human(result.data))
        return "\n".join(parts)

    if result.error is None:
        return f"ERROR: {result.op}: Unknown error"
    line = f"ERROR: {result.op}: [{result.error.code}] {result.error.message}"
    if settings.verbose and result.error.detail:
        return f"{line}\n{_format_data_human(result.error.detail)}"
    return line
