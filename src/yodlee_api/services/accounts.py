"""Site account management service."""

from __future__ import annotations

from typing import Any

from yodlee_api.auth import SessionManager
from yodlee_api.client import PATHS, YodleeClient
from yodlee_api.exceptions import InvalidArgumentError
from yodlee_api.models.requests import SiteLoginFormRequest
from yodlee_api.models.session import UserCredentials


class SiteAccountService:
    """Service for a user's linked site accounts and site login forms."""

    def __init__(self, client: YodleeClient, session: SessionManager) -> None:
        self._client = client
        self._session = session

    async def get_all_site_accounts(self, credentials: UserCredentials | None = None) -> dict[str, Any]:
        """List every site account of the logged-in user.

        ``credentials`` are only used to log the user in again if the user
        session has expired.
        """
        tokens = await self._session.get_both_tokens(credentials)
        return await self._client.post(
            PATHS["site_accounts"],
            {
                "cobSessionToken": tokens.cob_session_token,
                "userSessionToken": tokens.user_session_token,
            },
        )

    async def get_site_login_form(self, site_id: str | int | None) -> dict[str, Any]:
        """Fetch the login form for a site. Needs only a cobrand session."""
        request = SiteLoginFormRequest(site_id=site_id)
        if request.missing_field():
            raise InvalidArgumentError("Invalid Site ID: Empty!", field="siteId")

        cob_session_token = await self._session.get_cobrand_token()
        return await self._client.post(
            PATHS["site_login_form"],
            {"cobSessionToken": cob_session_token, "siteId": request.site_id},
        )
