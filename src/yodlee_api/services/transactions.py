"""Transaction search service."""

from __future__ import annotations

from typing import Any

from yodlee_api.auth import SessionManager
from yodlee_api.client import PATHS, YodleeClient
from yodlee_api.exceptions import InvalidArgumentError
from yodlee_api.models.requests import TransactionSearchOptions
from yodlee_api.models.session import UserCredentials


class TransactionService:
    """Service for searching a user's bank transactions."""

    def __init__(self, client: YodleeClient, session: SessionManager) -> None:
        self._client = client
        self._session = session

    async def get_transactions(
        self,
        options: TransactionSearchOptions | None = None,
        credentials: UserCredentials | None = None,
        **overrides: Any,
    ) -> dict[str, Any]:
        """Run a transaction search for the logged-in user.

        Caller values, from ``options`` and then keyword ``overrides`` (either
        snake_case or the camelCase form names), are merged over the search
        defaults: all containers, fetch limits 500/1, results 1-5, USD.

        Raises:
            InvalidArgumentError: If an override names no search option.
        """
        options = options or TransactionSearchOptions()
        if overrides:
            fields = TransactionSearchOptions.model_fields
            aliases = {field.alias for field in fields.values()}
            for key in overrides:
                if key not in fields and key not in aliases:
                    raise InvalidArgumentError(f"Unknown transaction search option: {key}", field=key)

            update = {fields[k].alias if k in fields else k: v for k, v in overrides.items()}
            options = TransactionSearchOptions(**{**options.model_dump(by_alias=True), **update})

        tokens = await self._session.get_both_tokens(credentials)
        form = {
            "cobSessionToken": tokens.cob_session_token,
            "userSessionToken": tokens.user_session_token,
            **options.to_form(),
        }
        return await self._client.post(PATHS["transactions"], form)
