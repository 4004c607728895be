"""Yodlee CLI entry point.

Agent-friendly CLI over the Yodlee aggregation API: cobrand and user
sessions, site accounts, transactions and user registration.
"""

from __future__ import annotations

import logging

import typer

from yodlee_api.commands.auth_cmd import app as auth_app
from yodlee_api.commands.accounts_cmd import app as accounts_app
from yodlee_api.commands.transactions_cmd import app as transactions_app
from yodlee_api.commands.users_cmd import app as users_app

app = typer.Typer(
    name="yodlee",
    help="CLI tool for the Yodlee financial-data aggregation API.",
    no_args_is_help=True,
)

# Register command groups
app.add_typer(auth_app, name="auth")
app.add_typer(accounts_app, name="accounts")
app.add_typer(transactions_app, name="transactions")
app.add_typer(users_app, name="users")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Yodlee CLI: manage sessions and query accounts and transactions."""
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


if __name__ == "__main__":
    app()
