"""CLI commands for site accounts and site login forms."""

from __future__ import annotations

import asyncio
from typing import Annotated, Any

import typer
from rich.console import Console

from yodlee_api.auth import open_session
from yodlee_api.config import ClientConfig, get_config
from yodlee_api.exceptions import InvalidArgumentError, YodleeError
from yodlee_api.models.session import UserCredentials
from yodlee_api.services.accounts import SiteAccountService
from yodlee_api.utils.errors import handle_error
from yodlee_api.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="accounts", help="List site accounts and fetch site login forms.")


@app.command("list")
def list_accounts(
    login: Annotated[str, typer.Option("--login", "-l", help="End-user login name")] = "",
    password: Annotated[str, typer.Option("--password", "-p", help="End-user password")] = "",
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.JSON,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")] = False,
) -> None:
    """List all site accounts of an end user."""
    credentials = UserCredentials(username=login, password=password) if login else None

    async def run(config: ClientConfig) -> Any:
        async with open_session(config, verbose=verbose) as (client, session):
            return await SiteAccountService(client, session).get_all_site_accounts(credentials)

    try:
        config = get_config()
        accounts = asyncio.run(run(config))
        if not accounts:
            console.print("[dim]No site accounts found.[/dim]")
            raise typer.Exit(0)
        print_output(accounts, output, title="Site Accounts")
    except YodleeError as e:
        handle_error(e)
        raise typer.Exit(1)


@app.command("login-form")
def login_form(
    site_id: Annotated[str, typer.Option("--site-id", "-s", help="Yodlee site ID")] = "",
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.JSON,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")] = False,
) -> None:
    """Fetch the login form for a site."""
    if not site_id:
        handle_error(InvalidArgumentError("Invalid Site ID: Empty!", field="siteId"))
        raise typer.Exit(1)

    async def run(config: ClientConfig) -> Any:
        async with open_session(config, verbose=verbose) as (client, session):
            return await SiteAccountService(client, session).get_site_login_form(site_id)

    try:
        config = get_config()
        form = asyncio.run(run(config))
        print_output(form, output, title=f"Login Form for Site {site_id}")
    except YodleeError as e:
        handle_error(e)
        raise typer.Exit(1)
