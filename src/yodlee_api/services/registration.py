"""User registration service."""

from __future__ import annotations

from typing import Any

from yodlee_api.auth import SessionManager
from yodlee_api.client import PATHS, YodleeClient
from yodlee_api.exceptions import InvalidArgumentError
from yodlee_api.models.requests import RegisterUserRequest


class RegistrationService:
    """Service for registering new end users under the cobrand."""

    def __init__(self, client: YodleeClient, session: SessionManager) -> None:
        self._client = client
        self._session = session

    async def register(
        self,
        username: str = "",
        password: str = "",
        email_address: str = "",
    ) -> dict[str, Any]:
        """Register a user. Fields are checked before any request is sent."""
        request = RegisterUserRequest(username=username, password=password, email_address=email_address)
        missing = request.missing_field()
        if missing:
            raise InvalidArgumentError(f"Cannot register user: Empty {missing}", field=missing)

        cob_session_token = await self._session.get_cobrand_token()
        return await self._client.post(
            PATHS["register"],
            {"cobSessionToken": cob_session_token, **request.to_form()},
        )
