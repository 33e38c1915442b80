"""
Webhook Repositories

Per-user Zapier / Make webhook settings and the delivery history.
"""
import logging
from typing import Optional, List, Dict, Any
from datetime import datetime
from pymongo import DESCENDING

from app.infra.mongodb.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class WebhookIntegrationRepository(BaseRepository[Dict[str, Any]]):
    """One webhook integration document per user."""

    collection_name = "webhook_integrations"

    def get_by_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        return self.find_one({"user_id": user_id})

    def save(
        self,
        user_id: str,
        zapier_webhook_url: Optional[str] = None,
        make_webhook_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """Create or replace the user's URLs; enabled iff any URL is set."""
        doc = {
            "zapier_webhook_url": zapier_webhook_url or None,
            "make_webhook_url": make_webhook_url or None,
            "enabled": bool(zapier_webhook_url or make_webhook_url),
            "updated_at": datetime.utcnow()
        }
        self.collection.update_one(
            {"user_id": user_id},
            {"$set": doc, "$setOnInsert": {"created_at": datetime.utcnow()}},
            upsert=True
        )
        logger.info(f"Saved webhook integration for user {user_id} (enabled: {doc['enabled']})")
        return self.get_by_user(user_id)

    def disable(self, user_id: str) -> bool:
        result = self.collection.update_one(
            {"user_id": user_id},
            {"$set": {"enabled": False, "updated_at": datetime.utcnow()}}
        )
        return result.matched_count > 0


class WebhookEventRepository(BaseRepository[Dict[str, Any]]):
    """Delivery log of webhook events."""

    collection_name = "webhook_events"

    def log_event(
        self,
        user_id: str,
        event_type: str,
        payload: Dict[str, Any],
        status: str,
        sent_to: str,
        results: List[Dict[str, Any]]
    ) -> str:
        return self.insert_one({
            "user_id": user_id,
            "event_type": event_type,
            "proposal_id": payload.get("proposalId"),
            "client_name": payload.get("clientName"),
            "payload": payload,
            "status": status,
            "sent_to": sent_to,
            "results": results,
            "created_at": datetime.utcnow()
        })

    def list_recent(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        return self.find_many(
            {"user_id": user_id},
            limit=limit,
            sort=[("created_at", DESCENDING)]
        )
