"""
Portal API Client

Async client for the campaign portal API. Handles per-tenant login with
endpoint fallback and retry, token caching, and authenticated requests.
Specific operations are delegated to service classes.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

import httpx

from portalapi.models import PortalLoginResponse
from portalapi.services.campaigns import CampaignService
from portalapi.token_cache import TokenCache

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0  # seconds, doubled after every failed attempt
REQUEST_TIMEOUT = 5.0


class PortalError(Exception):
    """Base exception for portal API errors."""


class PortalAuthExhaustedError(PortalError):
    """Every login candidate failed all of its attempts."""


class PortalTimeoutError(PortalError):
    """A portal request did not complete within the per-request timeout."""


class PortalRequestError(PortalError):
    """An authenticated portal request returned a non-2xx status."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class LoginCandidate:
    """One login URL shape plus any fixed body fields it needs."""

    path: str
    extra_body: Dict[str, Any] = field(default_factory=dict)

    def url(self, base_url: str) -> str:
        return f"{base_url}{self.path}"

    def body(self, tenant: str, username: str, password: str) -> Dict[str, Any]:
        return {"domain": tenant, "username": username, "password": password, **self.extra_body}


# Newest API version first, falling back to older backends
LOGIN_CANDIDATES = (
    LoginCandidate("/api/v2/config/login/oauth"),
    LoginCandidate("/api/v2/login"),
    LoginCandidate("/api/login"),
)


@dataclass
class LoginAttempt:
    """Outcome of a single login request."""

    ok: bool
    url: str
    response: Optional[PortalLoginResponse] = None
    reason: Optional[str] = None


class PortalClient:
    """
    Client for the campaign portal API

    Owns the HTTP client and the tenant token cache. Tokens are acquired on
    demand by get_token() and reused until they come within the cache's
    safety margin of expiry.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        account_id_header: Optional[str] = None,
        verify_ssl: bool = True,
        debug: bool = False,
        timeout: float = REQUEST_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_base_delay: float = RETRY_BASE_DELAY,
        candidates: Sequence[LoginCandidate] = LOGIN_CANDIDATES,
        token_cache: Optional[TokenCache] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize portal API client

        Args:
            base_url: Portal base URL, e.g. https://portal.example.com
            username: Login username
            password: Login password
            account_id_header: Value for X-Account-ID (defaults to the tenant)
            verify_ssl: Verify TLS certificates. Only disable for lab portals
                with self-signed certificates.
            debug: Log login outcomes per endpoint at INFO/WARNING
            timeout: Limit in seconds for a whole request, connect through
                last byte read
            max_retries: Attempts per login candidate
            retry_base_delay: Delay before the second attempt, doubled after
            candidates: Ordered login endpoints to try
            token_cache: Cache to use (a fresh one by default)
            transport: Optional httpx transport
            sleep: Coroutine used for backoff waits
        """
        self.base_url = base_url.rstrip("/")
        self.username = username
        self.password = password
        self.account_id_header = account_id_header
        self.verify_ssl = verify_ssl
        self.debug = debug
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.candidates = tuple(candidates)
        self.token_cache = token_cache if token_cache is not None else TokenCache()
        self._sleep = sleep

        if not verify_ssl:
            logger.warning(f"TLS certificate verification is DISABLED for portal {self.base_url}")

        self.client = httpx.AsyncClient(
            verify=verify_ssl,
            timeout=timeout,
            transport=transport,
        )

        # Attach modular services
        self.campaigns = CampaignService(self)

        logger.debug(f"PortalClient initialized for {self.base_url}")

    def __repr__(self):
        return f"<PortalClient base_url={self.base_url}, verify_ssl={self.verify_ssl}>"

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self):
        await self.client.aclose()

    def _diag(self, level: int, message: str):
        logger.log(level if self.debug else logging.DEBUG, message)

    async def get_token(self, tenant: str) -> str:
        """
        Return a bearer token for the tenant, logging in if needed.

        Candidates are tried in order, each up to max_retries times with
        exponential backoff. The first successful login is cached and
        returned.

        Raises:
            PortalAuthExhaustedError: If no candidate authenticates
        """
        cached = self.token_cache.get(tenant)
        if cached:
            return cached.access_token

        for candidate in self.candidates:
            url = candidate.url(self.base_url)
            body = candidate.body(tenant, self.username, self.password)

            for attempt in range(self.max_retries):
                result = await self._attempt_login(url, body)
                if result.ok:
                    login = result.response
                    entry = self.token_cache.store(
                        tenant,
                        login.access_token,
                        expires_in=login.expires_in,
                        refresh_token=login.refresh_token,
                    )
                    self._diag(logging.INFO, f"Portal login succeeded at {url} for tenant {tenant}")
                    return entry.access_token

                logger.debug(
                    f"Portal login attempt {attempt + 1}/{self.max_retries} at {url} failed: {result.reason}"
                )
                if attempt == self.max_retries - 1:
                    self._diag(logging.WARNING, f"Login failed at {url}: {result.reason}")
                else:
                    await self._sleep(self.retry_base_delay * 2 ** attempt)

        logger.error(f"All portal login attempts failed for tenant {tenant}")
        raise PortalAuthExhaustedError("All portal login attempts failed - check credentials/endpoints")

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Send one request, bounded by the per-request timeout as a whole.

        httpx applies its timeout to each phase (connect, read, write, pool)
        separately, so the total is capped here as well.

        Raises:
            PortalTimeoutError: If the request takes longer than the timeout
        """
        try:
            return await asyncio.wait_for(self.client.request(method, url, **kwargs), self.timeout)
        except asyncio.TimeoutError:
            raise PortalTimeoutError(f"{method.upper()} {url} timed out after {self.timeout}s")

    async def _attempt_login(self, url: str, body: Dict[str, Any]) -> LoginAttempt:
        try:
            response = await self._send("post", url, json=body, headers={"Accept": "application/json"})
        except (httpx.HTTPError, PortalTimeoutError) as e:
            return LoginAttempt(ok=False, url=url, reason=f"{type(e).__name__}: {e}")

        if not response.is_success:
            return LoginAttempt(ok=False, url=url, reason=f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError:
            return LoginAttempt(ok=False, url=url, reason="Invalid JSON response")

        if not isinstance(data, dict):
            return LoginAttempt(ok=False, url=url, reason="Unexpected response body")

        login = PortalLoginResponse.model_validate(data)

        if not login.access_token:
            return LoginAttempt(ok=False, url=url, reason="No access token in response")

        return LoginAttempt(ok=True, url=url, response=login)

    async def _request(self, method: str, tenant: str, path: str, payload: Any = None) -> httpx.Response:
        """Authenticated request wrapper."""
        token = await self.get_token(tenant)
        url = f"{self.base_url}{path}"

        headers = {
            "Authorization": f"Bearer {token}",
            "X-User-Agent": "portal",
            "X-Account-ID": self.account_id_header or tenant,
            "Content-Type": "application/json;charset=UTF-8",
        }

        response = await self._send(method, url, json=payload, headers=headers)
        logger.debug(f"{method.upper()} {url} --> {response.status_code}")

        if response.status_code == 401:
            self.token_cache.invalidate(tenant)

        if not response.is_success:
            logger.warning(f"Request error: {response.status_code} - {response.text[:500]}")
            raise PortalRequestError(
                f"{method.upper()} {path} failed with HTTP {response.status_code}",
                status_code=response.status_code,
                body=response.text[:500],
            )

        return response

    async def put(self, tenant: str, path: str, payload: Any = None) -> httpx.Response:
        return await self._request("put", tenant, path, payload=payload)
