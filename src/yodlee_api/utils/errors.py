"""Structured error handling for agent-friendly output."""

from __future__ import annotations

import json
import sys

from rich.console import Console

from yodlee_api.exceptions import (
    ApiError,
    AuthenticationError,
    InvalidArgumentError,
    InvalidCredentialsError,
    PartialTokenError,
    ProtocolError,
    SessionExpiredError,
)

console = Console(stderr=True)

# Error code per exception type, most specific first
_ERROR_CODES: list[tuple[type[Exception], str]] = [
    (InvalidCredentialsError, "INVALID_CREDENTIALS"),
    (PartialTokenError, "PARTIAL_TOKENS"),
    (InvalidArgumentError, "INVALID_ARGUMENT"),
    (SessionExpiredError, "SESSION_EXPIRED"),
    (AuthenticationError, "AUTH_ERROR"),
    (ProtocolError, "PROTOCOL_ERROR"),
    (ApiError, "API_ERROR"),
]

# Actionable hints keyed by error substring
_ERROR_HINTS: list[tuple[str, str]] = [
    ("cobrand credentials", "Set YODLEE_COBRAND_LOGIN and YODLEE_COBRAND_PASSWORD in your .env file"),
    ("session tokens", "Set all four YODLEE_*_SESSION_* variables, or none of them"),
    ("session expired", "Pass --login and --password to log the user in again"),
    ("user credentials", "Pass --login and --password for the end user"),
    ("invalid site id", "Pass --site-id with a numeric Yodlee site ID"),
    ("timeout", "Request timed out - try again or raise YODLEE_TIMEOUT"),
    ("timed out", "Request timed out - try again or raise YODLEE_TIMEOUT"),
    ("connect", "Connection error - check network connectivity"),
    ("malformed json", "The service returned an unexpected body - check the sandbox/live setting"),
]


def _get_hint(error_message: str) -> str | None:
    """Match an error message to an actionable hint."""
    lower = error_message.lower()
    for pattern, hint in _ERROR_HINTS:
        if pattern.lower() in lower:
            return hint
    return None


def _get_code(error: Exception) -> str:
    for exc_type, code in _ERROR_CODES:
        if isinstance(error, exc_type):
            return code
    return "RUNTIME_ERROR"


def handle_error(error: Exception) -> None:
    """Handle an error with structured output to stdout and human-readable output to stderr.

    Outputs a JSON error object to stdout for agent consumption:
    {"error": true, "code": "API_ERROR", "message": "...", "hint": "..."}

    Also prints a human-readable error to stderr.
    """
    message = str(error)
    hint = _get_hint(message)
    code = _get_code(error)

    # Structured JSON to stdout for agents
    error_obj: dict[str, object] = {
        "error": True,
        "code": code,
        "message": message,
    }
    if isinstance(error, ApiError) and error.status_code is not None:
        error_obj["status_code"] = error.status_code
    if hint:
        error_obj["hint"] = hint

    json.dump(error_obj, sys.stdout)
    sys.stdout.write("\n")

    # Human-readable to stderr
    console.print(f"[red]Error:[/red] {message}")
    if hint:
        console.print(f"[dim]Hint: {hint}[/dim]")
