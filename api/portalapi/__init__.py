# Portal API package - client, token cache and services
from portalapi.client import (
    LOGIN_CANDIDATES,
    LoginAttempt,
    LoginCandidate,
    PortalAuthExhaustedError,
    PortalClient,
    PortalError,
    PortalRequestError,
    PortalTimeoutError,
)
from portalapi.services.campaigns import combine_disposition
from portalapi.token_cache import CachedToken, TokenCache

__all__ = [
    'LOGIN_CANDIDATES', 'LoginAttempt', 'LoginCandidate', 'PortalAuthExhaustedError',
    'PortalClient', 'PortalError', 'PortalRequestError', 'PortalTimeoutError', 'combine_disposition',
    'CachedToken', 'TokenCache',
]
