"""Cobrand and user session management for the Yodlee API.

Handles both logins, token caching, and expiry tracking. A user login always
needs a valid cobrand token, so the cobrand token is resolved first.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from yodlee_api.client import PATHS, YodleeClient
from yodlee_api.config import ClientConfig
from yodlee_api.exceptions import (
    ApiError,
    AuthenticationError,
    InvalidCredentialsError,
    PartialTokenError,
    ProtocolError,
    SessionExpiredError,
)
from yodlee_api.models.session import (
    SessionSeed,
    SessionToken,
    SessionTokens,
    TokenPair,
    TokenStatus,
    UserCredentials,
    utc_now,
)

logger = logging.getLogger(__name__)


def _dig(body: dict[str, Any], *keys: str) -> str:
    """Pull a nested session token out of a login response."""
    node: Any = body
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            raise ProtocolError(f"Login response is missing {'.'.join(keys)}")
        node = node[key]
    if not node:
        raise ProtocolError(f"Login response has an empty {'.'.join(keys)}")
    return str(node)


class SessionManager:
    """Manages the cobrand and user session tokens of one logical session.

    Each token is guarded by its own lock, so concurrent callers that find
    a token expired share a single login instead of racing. The user lock
    may be held while the cobrand lock is taken, never the reverse.
    """

    def __init__(self, client: YodleeClient) -> None:
        self._client = client
        settings = client.config.settings
        self._username = settings.username
        self._password = settings.password
        self._cob_token = SessionToken()
        self._user_token = SessionToken()
        self._cob_lock = asyncio.Lock()
        self._user_lock = asyncio.Lock()

    @property
    def tokens(self) -> SessionTokens:
        """Snapshot of the token cache."""
        return SessionTokens(cob_session_token=self._cob_token, user_session_token=self._user_token)

    async def initialize(self, seed: SessionSeed | None = None) -> SessionTokens:
        """Validate cobrand credentials and prime the token cache.

        Args:
            seed: Previously issued tokens. All four fields or none of them.

        Returns:
            The token cache after initialization.

        Raises:
            InvalidCredentialsError: If the cobrand username or password is empty.
            PartialTokenError: If only some of the seed fields are given.
            AuthenticationError: If the cobrand login fails.
        """
        self._require_cobrand_credentials()
        if seed is None:
            seed = self._client.config.settings.seed

        if seed.is_complete:
            # Cached tokens from an earlier session; no login needed
            self._cob_token = SessionToken(token=seed.cob_session_token, expires=seed.cob_session_expires)
            self._user_token = SessionToken(token=seed.user_session_token, expires=seed.user_session_expires)
            logger.info("Session initialized from supplied tokens")
        elif seed.is_empty:
            await self.cobrand_login()
        else:
            raise PartialTokenError(
                "When providing session tokens both tokens and accompanying "
                "expiration timestamps are required."
            )

        return self.tokens

    async def cobrand_login(self) -> dict[str, Any]:
        """Log in with the cobrand credentials and cache the new token.

        Returns:
            The coblogin response body.
        """
        async with self._cob_lock:
            return await self._cobrand_login()

    async def user_login(self, credentials: UserCredentials) -> dict[str, Any]:
        """Log in an end user and cache the new user token.

        Returns:
            The login response body.
        """
        missing = credentials.missing_field()
        if missing:
            raise InvalidCredentialsError(f"Invalid User Credentials: Empty {missing}")

        cob_session_token = await self.get_cobrand_token()
        async with self._user_lock:
            return await self._user_login(credentials, cob_session_token)

    async def get_cobrand_token(self) -> str:
        """Return the cached cobrand token, logging in again if it expired."""
        async with self._cob_lock:
            if not self._cob_token.is_valid():
                await self._cobrand_login()
            return self._cob_token.token  # type: ignore[return-value]

    async def get_user_token(self, credentials: UserCredentials | None = None) -> str:
        """Return the cached user token, logging in again if possible.

        Raises:
            SessionExpiredError: If the token expired and no credentials were
                given; no request is sent in that case.
        """
        async with self._user_lock:
            if self._user_token.is_valid():
                return self._user_token.token  # type: ignore[return-value]

            missing = credentials.missing_field() if credentials else "username"
            if missing:
                raise SessionExpiredError(
                    f"User session expired, user credentials required: Empty {missing}"
                )

            cob_session_token = await self.get_cobrand_token()
            await self._user_login(credentials, cob_session_token)  # type: ignore[arg-type]
            return self._user_token.token  # type: ignore[return-value]

    async def get_both_tokens(self, credentials: UserCredentials | None = None) -> TokenPair:
        """Resolve the cobrand token, then the user token."""
        cob_session_token = await self.get_cobrand_token()
        user_session_token = await self.get_user_token(credentials)
        return TokenPair(cob_session_token=cob_session_token, user_session_token=user_session_token)

    def status(self) -> dict[str, TokenStatus]:
        """Current status of both cached tokens."""
        now = utc_now()
        return {
            "cobrand": self._cob_token.status(now),
            "user": self._user_token.status(now),
        }

    def _require_cobrand_credentials(self) -> None:
        if not self._username or not self._password:
            missing = "username" if not self._username else "password"
            raise InvalidCredentialsError(f"Invalid Cobrand Credentials: Empty {missing}")

    async def _cobrand_login(self) -> dict[str, Any]:
        """Cobrand login; caller holds the cobrand lock."""
        self._require_cobrand_credentials()

        try:
            body = await self._client.post(
                PATHS["cobrand_login"],
                {"cobrandLogin": self._username, "cobrandPassword": self._password},
            )
        except ApiError as e:
            logger.warning(f"Cobrand login failed: {e.detail}")
            raise AuthenticationError(f"Cobrand login failed: {e.detail}") from e

        token = _dig(body, "cobrandConversationCredentials", "sessionToken")
        self._cob_token = SessionToken.issue(token)
        logger.info("Cobrand session token issued")
        return body

    async def _user_login(self, credentials: UserCredentials, cob_session_token: str) -> dict[str, Any]:
        """User login; caller holds the user lock."""
        try:
            body = await self._client.post(
                PATHS["user_login"],
                {
                    "login": credentials.username,
                    "password": credentials.password,
                    "cobSessionToken": cob_session_token,
                },
            )
        except ApiError as e:
            logger.warning(f"User login failed: {e.detail}")
            raise AuthenticationError(f"User login failed: {e.detail}") from e

        token = _dig(body, "userContext", "conversationCredentials", "sessionToken")
        self._user_token = SessionToken.issue(token)
        logger.info("User session token issued")
        return body


@asynccontextmanager
async def open_session(
    config: ClientConfig,
    seed: SessionSeed | None = None,
    verbose: bool = False,
) -> AsyncIterator[tuple[YodleeClient, SessionManager]]:
    """Yield an initialized client and session, closing the client afterwards."""
    client = YodleeClient(config, verbose=verbose)
    try:
        session = SessionManager(client)
        await session.initialize(seed)
        yield client, session
    finally:
        await client.close()
