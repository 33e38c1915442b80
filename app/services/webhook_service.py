"""
Webhook Service

Fans contract events out to the Zapier and Make webhooks a user has
configured. Each destination gets its own bounded timeout; a failing
destination is recorded but never stops the others or raises to the caller.
"""
import asyncio
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime

import httpx

from app.config import settings
from app.domain.constants import WebhookEventType, WebhookPlatform

logger = logging.getLogger(__name__)


class WebhookService:
    """
    Per-user webhook integration management and delivery.
    """

    def __init__(self, integration_repo, event_repo, timeout: float = None):
        """
        Args:
            integration_repo: WebhookIntegrationRepository
            event_repo: WebhookEventRepository
            timeout: Seconds to wait for each destination
        """
        self.integration_repo = integration_repo
        self.event_repo = event_repo
        self.timeout = timeout or settings.WEBHOOK_TIMEOUT_SECONDS

    # ===================== SETTINGS =====================

    def get_integration(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.integration_repo.get_by_user(user_id)

    def update_integration(
        self,
        user_id: str,
        zapier_url: Optional[str] = None,
        make_url: Optional[str] = None
    ) -> Dict[str, Any]:
        return self.integration_repo.save(user_id, zapier_url, make_url)

    def disable(self, user_id: str) -> bool:
        return self.integration_repo.disable(user_id)

    def history(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        return self.event_repo.list_recent(user_id, limit=limit)

    # ===================== DELIVERY =====================

    @staticmethod
    def build_payload(
        user_id: str,
        event_type: str,
        proposal_id: Optional[str] = None,
        proposal_title: Optional[str] = None,
        client_name: Optional[str] = None,
        client_email: Optional[str] = None,
        amount: Optional[float] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        return {
            "event": event_type,
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "userId": user_id,
            "proposalId": proposal_id,
            "proposalTitle": proposal_title,
            "clientName": client_name,
            "clientEmail": client_email,
            "amount": amount,
            "metadata": metadata or {},
        }

    async def trigger(
        self,
        user_id: str,
        event_type: WebhookEventType,
        **fields
    ) -> Dict[str, Any]:
        """
        Send an event to every webhook the user has configured.

        Returns:
            {"success": False, "reason": ...} when webhooks are not set up,
            otherwise the per-destination results
        """
        event_value = event_type.value if isinstance(event_type, WebhookEventType) else event_type

        try:
            integration = self.get_integration(user_id)
        except Exception as e:
            logger.error(f"[WebhookService] Failed to fetch webhook integration: {e}")
            return {"success": False, "reason": "Webhook settings unavailable"}

        destinations = self._destinations(integration)
        if not integration or not integration.get("enabled") or not destinations:
            return {"success": False, "reason": "Webhooks not configured"}

        payload = self.build_payload(user_id, event_value, **fields)
        results = await self._fan_out(destinations, payload)

        sent_to = ",".join(r["platform"] for r in results if r["success"])
        status = "sent" if sent_to else "failed"

        try:
            self.event_repo.log_event(user_id, event_value, payload, status, sent_to, results)
        except Exception as e:
            logger.error(f"[WebhookService] Failed to log webhook event: {e}")

        return {"success": bool(sent_to), "sentTo": sent_to, "results": results}

    async def send_test(self, user_id: str, webhook_url: str, platform: WebhookPlatform) -> Dict[str, Any]:
        """Send a test event to a single URL without touching the saved settings."""
        payload = self.build_payload(
            user_id,
            WebhookEventType.TEST.value,
            metadata={
                "platform": platform.value,
                "message": f"Test event from ProposalFast - {platform.value} integration working!",
            }
        )
        results = await self._fan_out([(platform.value, webhook_url)], payload)
        return results[0]

    @staticmethod
    def _destinations(integration: Optional[Dict[str, Any]]) -> List[tuple]:
        if not integration:
            return []
        destinations = []
        if integration.get("zapier_webhook_url"):
            destinations.append((WebhookPlatform.ZAPIER.value, integration["zapier_webhook_url"]))
        if integration.get("make_webhook_url"):
            destinations.append((WebhookPlatform.MAKE.value, integration["make_webhook_url"]))
        return destinations

    async def _fan_out(self, destinations: List[tuple], payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return list(await asyncio.gather(
                *(self._send_within_deadline(client, platform, url, payload) for platform, url in destinations)
            ))

    async def _send_within_deadline(
        self,
        client: httpx.AsyncClient,
        platform: str,
        url: str,
        payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        # httpx timeouts apply per phase; a slow-trickling body needs a total cap
        try:
            return await asyncio.wait_for(self._send(client, platform, url, payload), self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"[WebhookService] {platform} webhook timed out after {self.timeout}s")
            return {
                "platform": platform,
                "success": False,
                "error": f"Timed out after {self.timeout}s",
            }

    @staticmethod
    async def _send(
        client: httpx.AsyncClient,
        platform: str,
        url: str,
        payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        try:
            response = await client.post(url, json=payload)
            response.raise_for_status()
            logger.info(f"[WebhookService] {platform} webhook sent successfully")
            return {
                "platform": platform,
                "success": True,
                "statusCode": response.status_code,
            }
        except httpx.HTTPError as e:
            logger.error(f"[WebhookService] {platform} webhook error: {e}")
            return {
                "platform": platform,
                "success": False,
                "error": str(e) or type(e).__name__,
            }
