"""CLI commands for end-user registration."""

from __future__ import annotations

import asyncio
from typing import Annotated, Any

import typer
from rich.console import Console

from yodlee_api.auth import open_session
from yodlee_api.config import ClientConfig, get_config
from yodlee_api.exceptions import InvalidArgumentError, YodleeError
from yodlee_api.models.requests import RegisterUserRequest
from yodlee_api.services.registration import RegistrationService
from yodlee_api.utils.errors import handle_error
from yodlee_api.utils.output import OutputFormat, print_output

console = Console(stderr=True)
app = typer.Typer(name="users", help="Register end users.")


@app.command()
def register(
    login: Annotated[str, typer.Option("--login", "-l", help="New user's login name")] = "",
    password: Annotated[str, typer.Option("--password", "-p", help="New user's password")] = "",
    email: Annotated[str, typer.Option("--email", "-e", help="New user's email address")] = "",
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.JSON,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")] = False,
) -> None:
    """Register a new end user under the cobrand."""
    missing = RegisterUserRequest(username=login, password=password, email_address=email).missing_field()
    if missing:
        handle_error(InvalidArgumentError(f"Cannot register user: Empty {missing}", field=missing))
        raise typer.Exit(1)

    async def run(config: ClientConfig) -> Any:
        async with open_session(config, verbose=verbose) as (client, session):
            return await RegistrationService(client, session).register(login, password, email)

    try:
        config = get_config()
        console.print(f"Registering user [bold]{login}[/bold]...", style="yellow")
        result = asyncio.run(run(config))
        print_output(result, output, title="Registered User")
    except YodleeError as e:
        handle_error(e)
        raise typer.Exit(1)
