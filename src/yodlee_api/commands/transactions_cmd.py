"""CLI commands for transaction search."""

from __future__ import annotations

import asyncio
from typing import Annotated, Any

import typer

from yodlee_api.auth import open_session
from yodlee_api.config import ClientConfig, get_config
from yodlee_api.exceptions import YodleeError
from yodlee_api.models.requests import TransactionSearchOptions
from yodlee_api.models.session import UserCredentials
from yodlee_api.services.transactions import TransactionService
from yodlee_api.utils.errors import handle_error
from yodlee_api.utils.output import OutputFormat, print_output

app = typer.Typer(name="transactions", help="Search bank transactions.")


@app.command("search")
def search(
    login: Annotated[str, typer.Option("--login", "-l", help="End-user login name")] = "",
    password: Annotated[str, typer.Option("--password", "-p", help="End-user password")] = "",
    container_type: Annotated[str, typer.Option("--container-type", help="Container (All, bank, credits, ...)")] = "All",
    start: Annotated[int, typer.Option("--start", help="First result number")] = 1,
    end: Annotated[int, typer.Option("--end", help="Last result number")] = 5,
    currency: Annotated[str, typer.Option("--currency", help="Currency code filter")] = "USD",
    higher_fetch_limit: Annotated[int, typer.Option("--higher-fetch-limit", help="Upper fetch limit")] = 500,
    lower_fetch_limit: Annotated[int, typer.Option("--lower-fetch-limit", help="Lower fetch limit")] = 1,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.JSON,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show request details")] = False,
) -> None:
    """Run a transaction search for an end user."""
    credentials = UserCredentials(username=login, password=password) if login else None
    options = TransactionSearchOptions(
        container_type=container_type,
        start_number=start,
        end_number=end,
        currency_code=currency,
        higher_fetch_limit=higher_fetch_limit,
        lower_fetch_limit=lower_fetch_limit,
    )

    async def run(config: ClientConfig) -> Any:
        async with open_session(config, verbose=verbose) as (client, session):
            return await TransactionService(client, session).get_transactions(options, credentials)

    try:
        config = get_config()
        result = asyncio.run(run(config))
        print_output(result, output, title="Transactions")
    except YodleeError as e:
        handle_error(e)
        raise typer.Exit(1)
