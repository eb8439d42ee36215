"""CLI entry point and argument parsing"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

import settings
from codex_auth import AuthFileStorage, CodexAuthError, SessionCredential, TokenBundle, resolve_auth_file
from completion import CompletionClient
from cli.status_display import build_status_table
from utils.debug_console import configure_debug_logging, configure_logging, create_debug_console

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codex-chat",
        description="Send one prompt to Codex using the credentials in auth.json",
    )
    parser.add_argument("--prompt", "-p", default=None, help="Prompt to send (asked interactively when omitted)")
    parser.add_argument(
        "--auth-file",
        default=None,
        help="Path to auth.json (default: $CODEX_HOME/auth.json or ~/.codex/auth.json)",
    )
    parser.add_argument("--model", "-m", default=None, help=f"Model identifier (default: {settings.CODEX_MODEL})")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--stream-trace",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Write raw event streams to the trace directory (implied by --debug unless disabled)",
    )
    parser.add_argument("--status", action="store_true", help="Show the loaded credential and exit")
    return parser


def _save_refreshed_tokens(storage: AuthFileStorage, tokens: TokenBundle, console: Console) -> None:
    """Write refreshed tokens back to auth.json, warning instead of failing"""
    try:
        storage.save_tokens(tokens)
    except (OSError, CodexAuthError) as e:
        logger.error(f"Failed to save refreshed tokens: {e}")
        console.print(f"[yellow]Warning:[/yellow] refreshed tokens were not saved: {escape(str(e))}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the CLI

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)

    if args.debug:
        debug_logger = configure_debug_logging(settings.DEBUG_LOG_FILE)
        console = create_debug_console(debug_enabled=True, debug_logger=debug_logger)
        console.print(f"[yellow]Debug mode enabled - verbose logging will be written to {settings.DEBUG_LOG_FILE}[/yellow]")
    else:
        configure_logging(settings.LOG_LEVEL)
        console = Console()

    # Determine stream tracing preference (config default -> CLI overrides)
    stream_trace = settings.STREAM_TRACE_ENABLED
    if args.stream_trace is None:
        if args.debug:
            stream_trace = True
    else:
        stream_trace = args.stream_trace
    if stream_trace:
        console.print(f"[yellow]Stream tracing enabled - raw SSE bodies will be written to {settings.STREAM_TRACE_DIR}[/yellow]")

    auth_file = resolve_auth_file(
        args.auth_file or settings.AUTH_FILE,
        codex_home=settings.CODEX_HOME,
        default_home=settings.DEFAULT_CODEX_HOME,
    )
    storage = AuthFileStorage(auth_file)

    try:
        credential = storage.load_credential()

        if args.status:
            console.print(build_status_table(credential, str(auth_file)))
            return 0

        prompt = args.prompt if args.prompt is not None else Prompt.ask("[bold]User[/bold]", console=console)

        if isinstance(credential, SessionCredential):
            console.print("[dim]Calling the ChatGPT backend with tokens from auth.json...[/dim]")

        client = CompletionClient(model=args.model, stream_trace=stream_trace)
        result = asyncio.run(client.complete(credential, prompt))

        if result.refreshed and result.tokens is not None:
            _save_refreshed_tokens(storage, result.tokens, console)

        console.print("\n[bold green]Assistant >[/bold green] ", end="")
        console.print(result.text, markup=False, highlight=False)
        return 0

    except CodexAuthError as e:
        # A refresh may have rotated the refresh token before the failure
        if e.tokens is not None:
            _save_refreshed_tokens(storage, e.tokens, console)
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        if args.debug:
            logger.debug("Completion failed", exc_info=True)
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130


if __name__ == "__main__":
    sys.exit(main())
