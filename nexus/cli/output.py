"""Output formatting utilities for the Nexus CLI.

Supports three output formats:
- json: Machine-readable JSON (default, for piping)
- pretty: Indented JSON for human reading
- table: Rich key/value table
"""

import json
import sys
from enum import Enum
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table


class OutputFormat(str, Enum):
    """Output format options."""

    json = "json"
    pretty = "pretty"
    table = "table"


def output_json(data: Any, pretty: bool = False) -> None:
    """Output data as JSON to stdout.

    Args:
        data: Data to output (must be JSON-serializable)
        pretty: If True, output with indentation
    """
    indent = 2 if pretty else None
    try:
        typer.echo(json.dumps(data, indent=indent, default=str))
    except TypeError as e:
        typer.echo(f"Error serializing output: {e}", err=True)
        raise typer.Exit(2) from e


def _flatten(data: dict[str, Any], prefix: str = "") -> list[tuple[str, str]]:
    rows: list[tuple[str, str]] = []
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(_flatten(value, prefix=f"{name}."))
        else:
            rows.append((name, str(value)))
    return rows


def output_table(data: dict[str, Any], title: Optional[str] = None) -> None:
    """Output a (possibly nested) dict as a two-column rich table."""
    console = Console()
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("key")
    table.add_column("value")
    for key, value in _flatten(data):
        table.add_row(key, value)
    console.print(table)


def output(
    data: Any,
    format: OutputFormat = OutputFormat.json,
    table_title: Optional[str] = None,
) -> None:
    """Output data in the specified format.

    Args:
        data: Data to output
        format: Output format (json, pretty, or table)
        table_title: Title for table format
    """
    if format == OutputFormat.json:
        output_json(data, pretty=False)
    elif format == OutputFormat.pretty:
        output_json(data, pretty=True)
    elif isinstance(data, dict):
        output_table(data, title=table_title)
    else:
        typer.echo("Table format requires dict data. Falling back to JSON.", err=True)
        output_json(data, pretty=True)


def output_error(
    code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """Output an error as JSON to stderr and exit.

    Args:
        code: Error code
        message: Error message
        details: Optional error details
        exit_code: Exit code to use
    """
    error_data: dict[str, Any] = {
        "error": True,
        "code": code,
        "message": message,
    }
    if details:
        error_data["details"] = details

    print(json.dumps(error_data), file=sys.stderr)
    raise typer.Exit(exit_code)
