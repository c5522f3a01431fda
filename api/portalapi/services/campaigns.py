import logging
from typing import Optional

logger = logging.getLogger(__name__)


def combine_disposition(
    call_type: str,
    disposition_1: str,
    disposition_2: str,
    disposition_2_custom: Optional[str] = None,
) -> str:
    """
    Build the single disposition string the portal stores for a call.

    The agent's free-text entry replaces the second-level disposition when
    one was given.
    """
    second = disposition_2_custom or disposition_2
    return f"{call_type} - {disposition_1} - {second}"


class CampaignService:
    def __init__(self, client):
        self.client = client  # back-reference to main PortalClient

    async def update_call_disposition(self, tenant: str, call_id: str, value: str):
        """
        Set the disposition of a campaign call

        Args:
            tenant: Portal domain, e.g. "mc_int"
            call_id: Campaign call ID
            value: Disposition text or ID

        Raises:
            ValueError: If tenant or call_id is missing
            PortalAuthExhaustedError: If no token could be acquired
            PortalRequestError: If the portal rejects the update
            PortalTimeoutError: If the update exceeds the request timeout
        """
        if not tenant or not call_id:
            raise ValueError("tenant and call_id are required")

        await self.client.put(
            tenant,
            f"/api/v2/config/campaigns/call/{call_id}/disposition",
            payload={"value": value},
        )
        logger.info(f"Call disposition forwarded for call_id {call_id}: {value}")
