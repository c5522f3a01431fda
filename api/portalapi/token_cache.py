import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

SAFETY_MARGIN_SECONDS = 120  # refresh 2 min before the portal expires the token
DEFAULT_TOKEN_TTL_SECONDS = 3600


@dataclass
class CachedToken:
    tenant: str
    access_token: str
    expires_at: float  # epoch seconds
    refresh_token: Optional[str] = None


class TokenCache:
    """
    Per-tenant bearer token cache for the portal API.

    Holds at most one token per tenant. Entries are replaced on every
    successful login and otherwise live as long as the owning client.
    """

    def __init__(self, safety_margin: float = SAFETY_MARGIN_SECONDS, clock: Callable[[], float] = time.time):
        self.safety_margin = safety_margin
        self._clock = clock
        self._entries: Dict[str, CachedToken] = {}

    @staticmethod
    def cache_key(tenant: str) -> str:
        return f"portal:{tenant}"

    def now(self) -> float:
        return self._clock()

    def get(self, tenant: str) -> Optional[CachedToken]:
        """Return the tenant's entry if it is still outside the safety margin."""
        entry = self._entries.get(self.cache_key(tenant))
        if entry and self.now() < entry.expires_at - self.safety_margin:
            logger.debug(f"Token found in cache for tenant {tenant}")
            return entry
        logger.debug(f"No usable cached token for tenant {tenant}")
        return None

    def peek(self, tenant: str) -> Optional[CachedToken]:
        """Return the raw entry regardless of expiry."""
        return self._entries.get(self.cache_key(tenant))

    def store(
        self,
        tenant: str,
        access_token: str,
        expires_in: Optional[float] = None,
        refresh_token: Optional[str] = None,
    ) -> CachedToken:
        ttl = expires_in if expires_in and expires_in > 0 else DEFAULT_TOKEN_TTL_SECONDS
        entry = CachedToken(
            tenant=tenant,
            access_token=access_token,
            expires_at=self.now() + ttl,
            refresh_token=refresh_token,
        )
        self._entries[self.cache_key(tenant)] = entry
        logger.debug(f"Token cached for tenant {tenant}, expires in {ttl}s")
        return entry

    def invalidate(self, tenant: str) -> None:
        if self._entries.pop(self.cache_key(tenant), None) is not None:
            logger.debug(f"Token invalidated for tenant {tenant}")

    def __contains__(self, tenant: str) -> bool:
        return self.cache_key(tenant) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
