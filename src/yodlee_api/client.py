"""Base API client for the Yodlee REST API.

Sends form-encoded POSTs, parses the JSON body and detects the error shapes
the service uses.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from yodlee_api.config import ClientConfig
from yodlee_api.exceptions import ApiError, ProtocolError

logger = logging.getLogger(__name__)


# Relative paths, appended to the configured base URL
PATHS = {
    "cobrand_login": "authenticate/coblogin",
    "user_login": "authenticate/login",
    "site_accounts": "jsonsdk/SiteAccountManagement/getAllSiteAccounts",
    "transactions": "jsonsdk/TransactionSearchService/executeUserSearchRequest",
    "site_login_form": "jsonsdk/SiteAccountManagement/getSiteLoginForm",
    "register": "jsonsdk/UserRegistration/register3",
}


def extract_error(body: dict[str, Any]) -> str | None:
    """Return the service-reported error detail, or None for a success body.

    Two conventions exist: a top-level ``Error`` array whose first entry
    carries ``errorDetail``, and ``errorOccurred`` with a top-level
    ``message``.
    """
    if body.get("Error") is not None:
        errors = body["Error"]
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            detail = errors[0].get("errorDetail")
            if detail:
                return str(detail)
        return str(body.get("message") or "Unknown error")

    if str(body.get("errorOccurred", "")).lower() == "true":
        return str(body.get("message") or body.get("exceptionType") or "Unknown error")

    return None


def parse_body(response: httpx.Response) -> dict[str, Any]:
    """Decode a response body that must be a JSON object."""
    try:
        data = response.json()
    except ValueError as e:
        raise ProtocolError(
            f"Malformed JSON response (HTTP {response.status_code}): {e}",
            status_code=response.status_code,
            text=response.text,
        ) from e

    if not isinstance(data, dict):
        raise ProtocolError(
            f"Expected a JSON object (HTTP {response.status_code}), got {type(data).__name__}",
            status_code=response.status_code,
            text=response.text,
        )
    return data


class YodleeClient:
    """HTTP client for the Yodlee REST API. Performs no retries."""

    def __init__(self, config: ClientConfig, verbose: bool = False) -> None:
        self._config = config
        self._verbose = verbose
        self._http = httpx.AsyncClient(timeout=config.settings.timeout)

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def post(self, path: str, form: dict[str, Any]) -> dict[str, Any]:
        """POST a form to ``path`` and return the parsed body verbatim.

        Args:
            path: Relative API path (e.g. "authenticate/coblogin").
            form: Form fields, sent urlencoded.

        Returns:
            The decoded JSON object.

        Raises:
            ApiError: On transport failure or a service-reported error.
            ProtocolError: If a successful response is not a JSON object.
        """
        url = self._config.base_url + path
        log = logger.info if self._verbose else logger.debug
        log(f"POST {url}")

        try:
            response = await self._http.post(url, data=form)
        except httpx.HTTPError as e:
            logger.warning(f"HTTP error on {path}: {e}")
            raise ApiError(f"Request to {path} failed: {e}") from e

        log(f"Response: {response.status_code}")

        try:
            body = parse_body(response)
        except ProtocolError as e:
            if response.status_code < 400:
                raise
            # Error pages are often HTML; that is still an API error
            raise ApiError(
                f"API error (HTTP {response.status_code}): {response.text}",
                detail=response.text,
                status_code=response.status_code,
            ) from e

        detail = extract_error(body)
        if detail is None and response.status_code >= 400:
            detail = str(body.get("message") or response.reason_phrase or response.status_code)

        if detail is not None:
            logger.warning(f"{path} returned an error: {detail}")
            raise ApiError(
                f"API error (HTTP {response.status_code}): {detail}",
                detail=detail,
                status_code=response.status_code,
                body=body,
            )

        return body

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> YodleeClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
