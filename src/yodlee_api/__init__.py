"""Async client for the Yodlee financial-data aggregation API."""

from yodlee_api.auth import SessionManager, open_session
from yodlee_api.client import YodleeClient
from yodlee_api.config import ClientConfig, Settings, get_config
from yodlee_api.exceptions import (
    ApiError,
    AuthenticationError,
    InvalidArgumentError,
    InvalidCredentialsError,
    PartialTokenError,
    ProtocolError,
    SessionExpiredError,
    YodleeError,
)
from yodlee_api.models.requests import TransactionSearchOptions
from yodlee_api.models.session import SessionSeed, SessionTokens, TokenPair, UserCredentials
from yodlee_api.services.accounts import SiteAccountService
from yodlee_api.services.registration import RegistrationService
from yodlee_api.services.transactions import TransactionService

__all__ = [
    "ApiError",
    "AuthenticationError",
    "ClientConfig",
    "InvalidArgumentError",
    "InvalidCredentialsError",
    "PartialTokenError",
    "ProtocolError",
    "RegistrationService",
    "SessionExpiredError",
    "SessionManager",
    "SessionSeed",
    "SessionTokens",
    "Settings",
    "SiteAccountService",
    "TokenPair",
    "TransactionSearchOptions",
    "TransactionService",
    "UserCredentials",
    "YodleeClient",
    "YodleeError",
    "get_config",
    "open_session",
]
