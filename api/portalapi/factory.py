# api/portalapi/factory.py

import logging
from typing import Optional

from portalapi.config import PortalConfig
from portalapi.client import PortalClient
from portalapi.token_cache import TokenCache

logger = logging.getLogger(__name__)


def create_portal_client(
    config: Optional[PortalConfig] = None,
    token_cache: Optional[TokenCache] = None,
    **overrides,
) -> PortalClient:
    """
    Create a PortalClient from environment configuration.

    Args:
        config: Settings to use (read from the environment when omitted)
        token_cache: Shared cache, so several clients can reuse tenant tokens
        **overrides: Extra PortalClient keyword arguments

    Returns:
        PortalClient configured with the portal credentials

    Raises:
        ValueError: If required settings are missing
    """
    config = (config or PortalConfig()).validate()

    logger.debug(f"create_portal_client - base_url={config.BASE_URL}, verify_ssl={config.verify_ssl}")

    return PortalClient(
        base_url=config.BASE_URL,
        username=config.API_USERNAME,
        password=config.API_PASSWORD,
        account_id_header=config.ACCOUNT_ID_HEADER,
        verify_ssl=config.verify_ssl,
        debug=config.DEBUG,
        timeout=config.REQUEST_TIMEOUT,
        token_cache=token_cache,
        **overrides,
    )
