"""
Output rendering for CLI commands: table, tab-separated plaintext, or JSON.

Command output goes to stdout; errors and status messages go to stderr.
"""

import json
import os
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TextIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from utils.error_classifier import classify
from utils.reshape import parse_fields, reshape


class OutputMode(Enum):
    TABLE = "table"
    PLAINTEXT = "plaintext"
    JSON = "json"


@dataclass
class OutputOptions:
    mode: OutputMode = OutputMode.TABLE
    no_color: bool = False
    debug: bool = False
    fields: str = ""
    jq: str = ""


@dataclass
class TableData:
    headers: list[str]
    rows: list[list[str]] = field(default_factory=list)
    footer: str = ""


def truncate(text: str | None, limit: int) -> str:
    """Shorten text to ``limit`` chars, ending in "..." when cut."""
    text = text or ""
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def should_color(options: OutputOptions, stream: TextIO | None = None) -> bool:
    if options.no_color or os.getenv("NO_COLOR"):
        return False
    stream = stream or sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def render_json(data: Any, options: OutputOptions, out: TextIO | None = None) -> None:
    """
    Print data as indented JSON after --fields and --jq processing.

    Each jq output value is printed as soon as it is produced, so values
    emitted before a runtime error are still shown.
    """
    out = out or sys.stdout
    for value in reshape(data, parse_fields(options.fields), options.jq):
        print(_dump(value), file=out)


def render_plaintext(table_data: TableData, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    if table_data.headers:
        print("\t".join(table_data.headers), file=out)
    for row in table_data.rows:
        print("\t".join(row), file=out)


def _render_rich_table(table_data: TableData, options: OutputOptions, out: TextIO) -> None:
    color = should_color(options, out)
    console = Console(
        file=out,
        no_color=not color,
        color_system="auto" if color else None,
        highlight=False,
        width=None if color else 250,
    )

    table = Table(
        box=None,
        show_edge=False,
        pad_edge=False,
        padding=(0, 3, 0, 0),
        header_style="bold cyan" if color else "",
    )
    for header in table_data.headers:
        table.add_column(header, no_wrap=True, justify="left")
    for row in table_data.rows:
        table.add_row(*(Text(cell) for cell in row))
    console.print(table)

    if table_data.footer:
        console.print()
        console.print(Text(table_data.footer, style="bright_black" if color else ""))


def render_table(
    table_data: TableData, data: Any, options: OutputOptions, out: TextIO | None = None
) -> None:
    """Render in the selected mode; ``data`` is the raw document used for JSON mode."""
    out = out or sys.stdout
    if options.mode is OutputMode.JSON:
        render_json(data, options, out)
    elif options.mode is OutputMode.PLAINTEXT:
        render_plaintext(table_data, out)
    else:
        _render_rich_table(table_data, options, out)


def render_error(error: BaseException, options: OutputOptions, err: TextIO | None = None) -> None:
    """Print an error as a structured JSON object (JSON mode) or an "Error:" line."""
    err = err or sys.stderr
    if options.mode is OutputMode.JSON:
        print(json.dumps(classify(error).to_dict()), file=err)
        return

    if should_color(options, err):
        Console(file=err, highlight=False).print(
            Text.assemble(("Error:", "red"), " ", str(error))
        )
    else:
        print(f"Error: {error}", file=err)


def success(message: str, options: OutputOptions, out: TextIO | None = None) -> None:
    if options.mode is OutputMode.JSON:
        print(json.dumps({"status": "success", "message": message}), file=out or sys.stderr)
        return
    out = out or sys.stdout
    if should_color(options, out):
        Console(file=out, highlight=False).print(Text.assemble(("OK:", "green"), " ", message))
    else:
        print(f"OK: {message}", file=out)
