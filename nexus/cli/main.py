"""Nexus CLI - Main entry point.

Each command builds a ``ConnectPolicyService`` over the configured accounts
file, answers one question and exits. Policy commands exit 0 when the
action is allowed and 1 when it is denied.
"""

import sys
from typing import Awaitable, Callable, Optional, TypeVar

import typer

from nexus import __version__
from nexus.cli.output import OutputFormat, output, output_error
from nexus.cli.utils import (
    EXIT_CONFIG_ERROR,
    EXIT_DENIED,
    EXIT_SUCCESS,
    EXIT_UNRESOLVED,
    load_directory,
    run_async,
)
from nexus.connect.accounts import AccountDirectory
from nexus.connect.exceptions import ConfigurationError
from nexus.connect.models import PolicyDecision
from nexus.connect.service import ConnectPolicyService
from nexus.logging_config import configure_logging

T = TypeVar("T")

app = typer.Typer(
    name="nexus",
    help="Nexus connect-policy tools - resolve guest params and policy decisions.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"nexus version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    accounts: Optional[str] = typer.Option(
        None,
        "--accounts",
        "-a",
        help="JSON accounts file (default: NEXUS_ACCOUNTS_FILE).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (default: NEXUS_LOG_LEVEL).",
    ),
    log_format: Optional[str] = typer.Option(
        "text",
        "--log-format",
        help="Log format: text or json.",
    ),
    version: bool = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Nexus connect-policy tools.

    Accounts are read from a JSON file listing the locally provisioned
    extensions and their PBX domains.

    Examples:
        nexus -a accounts.json params 100
        nexus -a accounts.json call 100 200
        nexus -a accounts.json chat 100 200 --group
    """
    configure_logging(level=log_level, fmt=log_format, stream=sys.stderr)
    ctx.obj = {"accounts": accounts}


def build_service(directory: AccountDirectory) -> ConnectPolicyService:
    """Create the service used by CLI commands."""
    return ConnectPolicyService.from_config(directory)


def _run(ctx: typer.Context, query: Callable[[ConnectPolicyService], Awaitable[T]]) -> T:
    try:
        directory = load_directory(ctx.obj["accounts"])
        service = build_service(directory)
    except ConfigurationError as e:
        output_error(code="CONFIG_ERROR", message=str(e), exit_code=EXIT_CONFIG_ERROR)

    async def _query() -> T:
        async with service:
            return await query(service)

    return run_async(_query())


def _emit_decision(decision: PolicyDecision, format: OutputFormat) -> None:
    output(decision.to_dict(), format, table_title="Policy decision")
    raise typer.Exit(EXIT_SUCCESS if decision.allowed else EXIT_DENIED)


FORMAT_OPTION = typer.Option(OutputFormat.json, "--format", "-f", help="Output format")


@app.command("params")
def params_cmd(
    ctx: typer.Context,
    extension: str = typer.Argument(..., help="Extension to resolve"),
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Resolve and print connect params for an extension."""
    params = _run(ctx, lambda service: service.connect_params(extension))
    if params is None:
        output_error(
            code="PARAMS_UNRESOLVED",
            message=f"Could not resolve connect params for extension [{extension}]",
            exit_code=EXIT_UNRESOLVED,
        )
    output({"extension": extension, **params.to_dict()}, format, table_title="Connect params")


@app.command("call")
def call_cmd(
    ctx: typer.Context,
    from_extension: str = typer.Argument(..., help="Calling extension"),
    to_extension: str = typer.Argument(..., help="Called extension"),
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Decide whether FROM may call TO."""
    decision = _run(
        ctx, lambda service: service.outgoing_call_decision(from_extension, to_extension)
    )
    _emit_decision(decision, format)


@app.command("chat")
def chat_cmd(
    ctx: typer.Context,
    from_extension: str = typer.Argument(..., help="Sending extension"),
    to_extension: str = typer.Argument(..., help="Receiving extension"),
    group: bool = typer.Option(False, "--group", "-g", help="Message is part of a group chat"),
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Decide whether FROM may message TO."""
    decision = _run(
        ctx,
        lambda service: service.outgoing_chat_decision(from_extension, to_extension, group),
    )
    _emit_decision(decision, format)


@app.command("conversations")
def conversations_cmd(
    ctx: typer.Context,
    extension: str = typer.Argument(..., help="Extension of the signed-in account"),
    format: OutputFormat = FORMAT_OPTION,
) -> None:
    """Decide whether the conversations page is shown for EXTENSION."""
    decision = _run(ctx, lambda service: service.conversations_page_decision(extension))
    _emit_decision(decision, format)


if __name__ == "__main__":
    app()
