"""Session-token data models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from pydantic import BaseModel, Field, field_validator

# Lifetime granted to a freshly issued cobrand or user session token
SESSION_LIFETIME = timedelta(minutes=20)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC so they compare with utc_now()."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SessionToken(BaseModel):
    """A cached session token and its expiry, always replaced as a unit."""
    token: str | None = None
    expires: datetime | None = None

    model_config = {"frozen": True}

    @field_validator("expires")
    @classmethod
    def normalize_expires(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @classmethod
    def issue(cls, token: str, now: datetime | None = None) -> SessionToken:
        """A token valid for SESSION_LIFETIME from now."""
        return cls(token=token, expires=(now or utc_now()) + SESSION_LIFETIME)

    def is_valid(self, now: datetime | None = None) -> bool:
        # expires == now already counts as expired
        if not self.token or self.expires is None:
            return False
        return self.expires > (now or utc_now())

    def status(self, now: datetime | None = None) -> TokenStatus:
        if not self.token:
            return TokenStatus(has_token=False, is_expired=True)

        now = now or utc_now()
        is_expired = not self.is_valid(now)
        seconds_remaining = None
        if self.expires and not is_expired:
            seconds_remaining = int((self.expires - now).total_seconds())

        return TokenStatus(
            has_token=True,
            is_expired=is_expired,
            expires_at=self.expires,
            seconds_remaining=seconds_remaining,
        )


class SessionTokens(BaseModel):
    """The cobrand and user token cache of one session."""
    cob_session_token: SessionToken = Field(default_factory=SessionToken, alias="cobSessionToken")
    user_session_token: SessionToken = Field(default_factory=SessionToken, alias="userSessionToken")

    model_config = {"populate_by_name": True}


class TokenPair(BaseModel):
    """Both resolved token strings, ready to be sent with a request."""
    cob_session_token: str = Field(alias="cobSessionToken")
    user_session_token: str = Field(alias="userSessionToken")

    model_config = {"populate_by_name": True}


class TokenStatus(BaseModel):
    """Current state of a cached session token."""
    has_token: bool
    is_expired: bool
    expires_at: datetime | None = None
    seconds_remaining: int | None = None


class UserCredentials(BaseModel):
    """End-user login, used only for the call it is passed to."""
    username: str = ""
    password: str = Field(default="", repr=False)

    def missing_field(self) -> str | None:
        if not self.username:
            return "username"
        if not self.password:
            return "password"
        return None


class SessionSeed(BaseModel):
    """Previously issued tokens handed to a new session.

    Expiries accept datetimes or Unix timestamps; values above 2e10 are read
    as milliseconds, which is how cached tokens are usually exported.
    """
    cob_session_token: str | None = Field(default=None, alias="cobSessionToken")
    user_session_token: str | None = Field(default=None, alias="userSessionToken")
    cob_session_expires: datetime | None = Field(default=None, alias="cobSessionExpires")
    user_session_expires: datetime | None = Field(default=None, alias="userSessionExpires")

    model_config = {"populate_by_name": True}

    @field_validator("cob_session_expires", "user_session_expires")
    @classmethod
    def normalize_expires(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    @property
    def supplied(self) -> int:
        """How many of the four fields were given."""
        return sum(
            1
            for value in (
                self.cob_session_token,
                self.user_session_token,
                self.cob_session_expires,
                self.user_session_expires,
            )
            if value
        )

    @property
    def is_complete(self) -> bool:
        return self.supplied == 4

    @property
    def is_empty(self) -> bool:
        return self.supplied == 0
