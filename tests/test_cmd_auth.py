"""CLI tests for auth command group."""
import json
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock, patch

from typer.testing import CliRunner

from conftest import COB_BODY, USER_BODY, http_routes
from yodlee_api.client import PATHS
from yodlee_api.commands.auth_cmd import app, export_tokens
from yodlee_api.config import LIVE_URL, ClientConfig, Settings, get_config
from yodlee_api.models.session import SessionSeed, SessionToken, SessionTokens

runner = CliRunner()

EXPIRES = datetime(2026, 10, 18, 12, 20, tzinfo=timezone.utc)
EXPIRES_MS = int(EXPIRES.timestamp() * 1000)
CONFIG = ClientConfig(settings=Settings(username="cob", password="pw"))


def _fake_open_session(session):
    @asynccontextmanager
    async def fake(config, seed=None, verbose=False):
        yield MagicMock(), session
    return fake


def _session(tokens: SessionTokens):
    session = MagicMock()
    session.cobrand_login = AsyncMock()
    session.user_login = AsyncMock()
    session.tokens = tokens
    return session


def _urls(post) -> list[str]:
    return [c.args[0] for c in post.call_args_list]


# ── export_tokens ────────────────────────────────────────────────────

def test_export_tokens_epoch_ms():
    tokens = SessionTokens(cob_session_token=SessionToken(token="c", expires=EXPIRES))
    assert export_tokens(tokens) == {
        "cobSessionToken": "c",
        "cobSessionExpires": EXPIRES_MS,
        "userSessionToken": None,
        "userSessionExpires": None,
    }


# ── cobrand-login ────────────────────────────────────────────────────

def test_cobrand_login_sends_one_request():
    with patch("yodlee_api.commands.auth_cmd.get_config", return_value=CONFIG), \
         patch("yodlee_api.client.httpx.AsyncClient.post", new_callable=AsyncMock) as post:
        post.side_effect = http_routes({PATHS["cobrand_login"]: COB_BODY})
        result = runner.invoke(app, ["cobrand-login", "--output", "json"])
    assert result.exit_code == 0
    assert post.await_count == 1
    assert _urls(post) == [LIVE_URL + PATHS["cobrand_login"]]
    assert post.call_args.kwargs["data"] == {"cobrandLogin": "cob", "cobrandPassword": "pw"}
    data = json.loads(result.stdout)
    assert data["cobSessionToken"] == "cob-tok"
    assert data["cobSessionExpires"] > 0


def test_cobrand_login_ignores_seeded_tokens():
    seed = SessionSeed(
        cob_session_token="c", user_session_token="u",
        cob_session_expires=EXPIRES, user_session_expires=EXPIRES,
    )
    config = ClientConfig(settings=Settings(username="cob", password="pw", seed=seed))

    with patch("yodlee_api.commands.auth_cmd.get_config", return_value=config), \
         patch("yodlee_api.client.httpx.AsyncClient.post", new_callable=AsyncMock) as post:
        post.side_effect = http_routes({PATHS["cobrand_login"]: COB_BODY})
        result = runner.invoke(app, ["cobrand-login", "-o", "json"])
    assert result.exit_code == 0
    assert post.await_count == 1
    assert json.loads(result.stdout)["cobSessionToken"] == "cob-tok"


def test_cobrand_login_failure():
    error_body = {"Error": [{"errorDetail": "Invalid Cobrand Credentials"}]}

    with patch("yodlee_api.commands.auth_cmd.get_config", return_value=CONFIG), \
         patch("yodlee_api.client.httpx.AsyncClient.post", new_callable=AsyncMock) as post:
        post.side_effect = http_routes({PATHS["cobrand_login"]: error_body})
        result = runner.invoke(app, ["cobrand-login"])
    assert result.exit_code == 1
    data = json.loads(result.stdout)
    assert data["code"] == "AUTH_ERROR"
    assert "Invalid Cobrand Credentials" in data["message"]


# ── user-login ───────────────────────────────────────────────────────

def test_user_login_passes_credentials():
    session = _session(SessionTokens(
        cob_session_token=SessionToken(token="c", expires=EXPIRES),
        user_session_token=SessionToken(token="u", expires=EXPIRES),
    ))

    with patch("yodlee_api.commands.auth_cmd.get_config", return_value=MagicMock()), \
         patch("yodlee_api.commands.auth_cmd.open_session", _fake_open_session(session)):
        result = runner.invoke(app, ["user-login", "--login", "jdoe", "--password", "pw", "-o", "json"])
    assert result.exit_code == 0
    credentials = session.user_login.await_args.args[0]
    assert credentials.username == "jdoe"
    assert credentials.password == "pw"
    assert json.loads(result.stdout)["userSessionToken"] == "u"


def test_user_login_cobrand_then_user_once_each():
    with patch("yodlee_api.commands.auth_cmd.get_config", return_value=CONFIG), \
         patch("yodlee_api.client.httpx.AsyncClient.post", new_callable=AsyncMock) as post:
        post.side_effect = http_routes({
            PATHS["cobrand_login"]: COB_BODY,
            PATHS["user_login"]: USER_BODY,
        })
        result = runner.invoke(app, ["user-login", "--login", "jdoe", "--password", "pw", "-o", "json"])
    assert result.exit_code == 0
    assert _urls(post) == [LIVE_URL + PATHS["cobrand_login"], LIVE_URL + PATHS["user_login"]]
    assert post.call_args.kwargs["data"] == {"login": "jdoe", "password": "pw", "cobSessionToken": "cob-tok"}
    data = json.loads(result.stdout)
    assert data["cobSessionToken"] == "cob-tok"
    assert data["userSessionToken"] == "user-tok"


# ── status ───────────────────────────────────────────────────────────

def test_status_without_seed():
    with patch("yodlee_api.commands.auth_cmd.get_config", return_value=CONFIG), \
         patch("yodlee_api.client.httpx.AsyncClient.post", new_callable=AsyncMock) as post:
        result = runner.invoke(app, ["status", "--output", "json"])
    assert result.exit_code == 0
    post.assert_not_called()
    rows = json.loads(result.stdout)
    assert [r["token"] for r in rows] == ["cobrand", "user"]
    assert all(r["has_token"] is False for r in rows)


def test_status_with_seed_makes_no_request():
    seed = SessionSeed(
        cob_session_token="c", user_session_token="u",
        cob_session_expires=EXPIRES, user_session_expires=EXPIRES,
    )
    config = ClientConfig(settings=Settings(username="cob", password="pw", seed=seed))

    with patch("yodlee_api.commands.auth_cmd.get_config", return_value=config), \
         patch("yodlee_api.client.httpx.AsyncClient.post", new_callable=AsyncMock) as post:
        result = runner.invoke(app, ["status", "--output", "json"])
    assert result.exit_code == 0
    post.assert_not_called()
    rows = json.loads(result.stdout)
    assert all(r["has_token"] is True for r in rows)


def test_status_partial_seed_is_an_error():
    seed = SessionSeed(cob_session_token="c", cob_session_expires=EXPIRES)
    config = ClientConfig(settings=Settings(username="cob", password="pw", seed=seed))

    with patch("yodlee_api.commands.auth_cmd.get_config", return_value=config), \
         patch("yodlee_api.client.httpx.AsyncClient.post", new_callable=AsyncMock) as post:
        result = runner.invoke(app, ["status", "--output", "json"])
    assert result.exit_code == 1
    post.assert_not_called()
    assert json.loads(result.stdout)["code"] == "PARTIAL_TOKENS"


def test_status_bad_expiry_in_environment(monkeypatch):
    monkeypatch.setenv("YODLEE_COB_SESSION_EXPIRES", "next tuesday")
    get_config.cache_clear()
    try:
        result = runner.invoke(app, ["status", "--output", "json"])
    finally:
        get_config.cache_clear()
    assert result.exit_code == 1
    assert json.loads(result.stdout)["code"] == "INVALID_ARGUMENT"
