"""Shared fixtures for the yodlee-api test suite."""
from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from yodlee_api.client import PATHS, YodleeClient
from yodlee_api.config import ClientConfig, Settings

COB_BODY = {"cobrandConversationCredentials": {"sessionToken": "cob-tok"}}
USER_BODY = {"userContext": {"conversationCredentials": {"sessionToken": "user-tok"}}}


def routed(responses: dict[str, Any]):
    """Side effect for a mocked ``client.post`` returning a body (or raising) per API path."""
    def post(path: str, form: dict[str, Any]) -> Any:
        result = responses[path]
        if isinstance(result, Exception):
            raise result
        return result
    return post


def http_routes(responses: dict[str, Any]):
    """Side effect for a patched ``httpx.AsyncClient.post``, answering by URL suffix."""
    def post(url: str, data: dict[str, Any] | None = None, **kwargs: Any) -> httpx.Response:
        for path, body in responses.items():
            if url.endswith(path):
                return httpx.Response(200, json=body, request=httpx.Request("POST", url))
        raise AssertionError(f"unexpected POST {url}")
    return post


def default_routes(**overrides: Any) -> dict[str, Any]:
    routes: dict[str, Any] = {
        PATHS["cobrand_login"]: COB_BODY,
        PATHS["user_login"]: USER_BODY,
    }
    routes.update({PATHS[name]: body for name, body in overrides.items()})
    return routes


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        username="sbCobdemo",
        password="cob-secret",
        sandbox=True,
        timeout=5.0,
    )


@pytest.fixture
def fake_config(fake_settings) -> ClientConfig:
    return ClientConfig(settings=fake_settings)


@pytest.fixture
def mock_client(fake_config):
    """MagicMock standing in for YodleeClient, routing logins to canned bodies."""
    client = MagicMock(spec=YodleeClient)
    client.config = fake_config
    client.post = AsyncMock(side_effect=routed(default_routes()))
    client.close = AsyncMock()
    return client
