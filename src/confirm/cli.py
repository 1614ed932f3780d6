"""Typer CLI entrypoint for confirm."""

from __future__ import annotations

import sys
from typing import List, Optional, Sequence

import click
import typer
from typer.core import TyperCommand

from confirm.agent import AuthService, ConfirmationAgent
from confirm.config import Settings, load_settings
from confirm.debug_log import DebugLogWriter
from confirm.errors import ConfirmError, UsageError
from confirm.platform import build_auth_service, build_dialog_service
from confirm.request import is_help_request, parse_request
from confirm.ui.render import render_notice, render_usage

EXIT_AFFIRMED = 0
EXIT_DECLINED = 1

CONTEXT_SETTINGS = {"help_option_names": []}


class RawArgsCommand(TyperCommand):
    """Hand every token, including a bare `--`, to confirm.request untouched."""

    def parse_args(self, ctx: click.Context, args: List[str]) -> List[str]:
        ctx.args = list(args)
        return ctx.args


app = typer.Typer(
    add_completion=False,
    context_settings=CONTEXT_SETTINGS,
    help="Show a macOS confirmation dialog and exit 0 when accepted.",
)


def _echo_error(text: str) -> None:
    typer.echo(render_notice("error", text), err=True)


def _echo_diagnostic(text: str) -> None:
    typer.echo(text, err=True)


def _build_debug_log(settings: Settings) -> DebugLogWriter:
    return DebugLogWriter(
        logs_dir=settings.logs_dir,
        enabled=settings.logs_enabled,
        max_file_bytes=settings.logs_max_file_bytes,
        max_files=settings.logs_max_files,
        redaction=settings.logs_redaction,
    )


def run_confirm(args: Sequence[str]) -> int:
    """Parse ``args``, decide once, and return the process exit status."""
    tokens: List[str] = list(args)
    if is_help_request(tokens):
        render_usage(sys.stdout)
        return EXIT_AFFIRMED

    try:
        request = parse_request(tokens)
    except UsageError as exc:
        _echo_error(str(exc))
        if exc.show_usage:
            render_usage(sys.stdout)
        return EXIT_DECLINED

    try:
        settings = load_settings()
        dialog_service = build_dialog_service(settings)
        auth_service: Optional[AuthService] = None
        if request.require_auth:
            auth_service = build_auth_service()
        agent = ConfirmationAgent(
            request,
            dialog_service=dialog_service,
            auth_service=auth_service,
            settings=settings,
            debug_log=_build_debug_log(settings),
            echo=_echo_diagnostic,
        )
        affirmed = agent.decide()
    except ConfirmError as exc:
        _echo_error(str(exc))
        return EXIT_DECLINED

    return EXIT_AFFIRMED if affirmed else EXIT_DECLINED


@app.command(cls=RawArgsCommand, context_settings=CONTEXT_SETTINGS)
def main(ctx: typer.Context) -> None:
    """confirm [--icon <path>] [--auth] [--help] <message...>"""
    raise typer.Exit(code=run_confirm(ctx.args))


if __name__ == "__main__":
    app()
