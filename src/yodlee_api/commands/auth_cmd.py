"""CLI commands for session token management."""

from __future__ import annotations

import asyncio
from datetime import datetime
from typing import Annotated, Any

import typer
from rich.console import Console

from yodlee_api.auth import SessionManager, open_session
from yodlee_api.client import YodleeClient
from yodlee_api.config import ClientConfig, get_config
from yodlee_api.exceptions import YodleeError
from yodlee_api.models.session import SessionTokens, TokenStatus, UserCredentials
from yodlee_api.utils.errors import handle_error
from yodlee_api.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="auth", help="Manage cobrand and user session tokens.")


def _epoch_ms(value: datetime | None) -> int | None:
    return int(value.timestamp() * 1000) if value else None


def export_tokens(tokens: SessionTokens) -> dict[str, Any]:
    """Token cache in the shape accepted back through YODLEE_*_SESSION_* variables."""
    return {
        "cobSessionToken": tokens.cob_session_token.token,
        "cobSessionExpires": _epoch_ms(tokens.cob_session_token.expires),
        "userSessionToken": tokens.user_session_token.token,
        "userSessionExpires": _epoch_ms(tokens.user_session_token.expires),
    }


@app.command("cobrand-login")
def cobrand_login(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")] = False,
) -> None:
    """Log in with the cobrand credentials and print the session token."""

    async def run(config: ClientConfig) -> SessionTokens:
        # A fresh login regardless of any seeded tokens, so no initialize()
        async with YodleeClient(config, verbose=verbose) as client:
            session = SessionManager(client)
            await session.cobrand_login()
            return session.tokens

    try:
        config = get_config()
        console.print("Authenticating cobrand...", style="yellow")
        tokens = asyncio.run(run(config))
        result = export_tokens(tokens)
        print_output(result, output, columns=["cobSessionToken", "cobSessionExpires"], title="Cobrand Session")
    except YodleeError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("user-login")
def user_login(
    login: Annotated[str, typer.Option("--login", "-l", help="End-user login name")],
    password: Annotated[str, typer.Option("--password", "-p", help="End-user password", prompt=True, hide_input=True)],
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")] = False,
) -> None:
    """Log in an end user and print both session tokens."""
    credentials = UserCredentials(username=login, password=password)

    async def run(config: ClientConfig) -> SessionTokens:
        async with open_session(config, verbose=verbose) as (_, session):
            await session.user_login(credentials)
            return session.tokens

    try:
        config = get_config()
        console.print(f"Authenticating user [bold]{login}[/bold]...", style="yellow")
        tokens = asyncio.run(run(config))
        print_output(export_tokens(tokens), output, title="User Session")
    except YodleeError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command()
def status(
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
) -> None:
    """Show the status of tokens supplied through the environment."""

    async def run(config: ClientConfig) -> dict[str, TokenStatus]:
        async with YodleeClient(config) as client:
            session = SessionManager(client)
            # No seed would mean a login; a partial seed is rejected by initialize()
            if not config.settings.seed.is_empty:
                await session.initialize()
            return session.status()

    try:
        statuses = asyncio.run(run(get_config()))
    except YodleeError as e:
        handle_error(e)
        raise typer.Exit(1)

    result = [
        {
            "token": name,
            "has_token": token_status.has_token,
            "is_expired": token_status.is_expired,
            "expires_at": str(token_status.expires_at) if token_status.expires_at else "N/A",
            "seconds_remaining": token_status.seconds_remaining or 0,
        }
        for name, token_status in statuses.items()
    ]
    print_output(result, output, title="Token Status")
