"""
Webhook Integration Routes

Zapier / Make webhook settings, test delivery and delivery history.
"""
import logging
from fastapi import APIRouter, HTTPException, Depends, Query
from pydantic import BaseModel, Field
from typing import Optional

from app.dependencies import get_webhook_service
from app.domain.constants import WebhookPlatform
from app.middleware.auth import get_current_user
from app.services.webhook_service import WebhookService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


# ===================== REQUEST MODELS =====================

class UpdateWebhookSettingsRequest(BaseModel):
    zapier_webhook_url: Optional[str] = Field(None, description="Zapier catch hook URL")
    make_webhook_url: Optional[str] = Field(None, description="Make custom webhook URL")


class TestWebhookRequest(BaseModel):
    webhook_url: str = Field(..., min_length=1)
    platform: WebhookPlatform


# ===================== ENDPOINTS =====================

@router.get("/settings")
async def get_webhook_settings(
    user: dict = Depends(get_current_user),
    service: WebhookService = Depends(get_webhook_service)
):
    try:
        integration = service.get_integration(user["user_id"])
        return {"success": True, "integration": integration}
    except Exception as e:
        logger.error(f"Failed to fetch webhook integration: {e}")
        raise HTTPException(500, str(e))


@router.put("/settings")
async def update_webhook_settings(
    request: UpdateWebhookSettingsRequest,
    user: dict = Depends(get_current_user),
    service: WebhookService = Depends(get_webhook_service)
):
    """Save webhook URLs. Webhooks are enabled when at least one URL is set."""
    try:
        integration = service.update_integration(
            user["user_id"],
            zapier_url=request.zapier_webhook_url,
            make_url=request.make_webhook_url
        )
        return {"success": True, "integration": integration}
    except Exception as e:
        logger.error(f"Failed to update webhook integration: {e}")
        raise HTTPException(500, str(e))


@router.post("/disable")
async def disable_webhooks(
    user: dict = Depends(get_current_user),
    service: WebhookService = Depends(get_webhook_service)
):
    try:
        return {"success": service.disable(user["user_id"])}
    except Exception as e:
        logger.error(f"Failed to disable webhooks: {e}")
        raise HTTPException(500, str(e))


@router.post("/test")
async def test_webhook(
    request: TestWebhookRequest,
    user: dict = Depends(get_current_user),
    service: WebhookService = Depends(get_webhook_service)
):
    """Send a test event to one URL."""
    result = await service.send_test(user["user_id"], request.webhook_url, request.platform)
    return {"success": result["success"], "result": result}


@router.get("/history")
async def webhook_history(
    limit: int = Query(20, ge=1, le=100),
    user: dict = Depends(get_current_user),
    service: WebhookService = Depends(get_webhook_service)
):
    try:
        events = service.history(user["user_id"], limit=limit)
        return {"success": True, "events": events, "count": len(events)}
    except Exception as e:
        logger.error(f"Failed to fetch webhook history: {e}")
        raise HTTPException(500, str(e))
