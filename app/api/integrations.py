"""
Integrations API Endpoints
Webhook / Chatwoot / Mercado Pago settings, connection tests and store status
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.core.auth import TokenUser, require_admin
from app.domain.integration import IntegrationSettingsUpdate
from app.services.integration_service import IntegrationService
from app.services.notification_service import get_notification_service

router = APIRouter(prefix="/api/v1/integrations", tags=["Integrations"])


class TestWebhookRequest(BaseModel):
    url: str = Field(..., min_length=1)
    event: str = Field("order_created", description="order_created or abandoned_cart")


class TestChatwootRequest(BaseModel):
    phone: str = Field(..., min_length=8)


@router.get("/settings")
async def get_settings(user: TokenUser = Depends(require_admin)):
    """Full settings row (tokens included) for the dashboard form"""
    try:
        stored = IntegrationService().get_settings()
        return {"status": "success", "data": stored.to_dict() if stored else None}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching integration settings: {str(e)}")


@router.put("/settings")
async def update_settings(data: IntegrationSettingsUpdate, user: TokenUser = Depends(require_admin)):
    try:
        saved = IntegrationService().update_settings(data)
        return {"status": "success", "message": "Configurações salvas.", "data": saved.to_dict()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving integration settings: {str(e)}")


@router.get("/public")
async def get_public_settings():
    """Storefront-safe fields: Mercado Pago public key, store address and hours"""
    try:
        stored = IntegrationService().get_settings()
        return {"status": "success", "data": stored.to_public_dict() if stored else {}}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching store settings: {str(e)}")


@router.get("/store-status")
async def get_store_status():
    """Whether the store is open right now (header banner)"""
    try:
        return IntegrationService().get_store_status().model_dump()

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error computing store status: {str(e)}")


@router.post("/test-webhook")
async def test_webhook(user: TokenUser = Depends(require_admin)):
    """Send a test_event to the saved order webhook"""
    try:
        return await get_notification_service().test_webhook()

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error testing webhook: {str(e)}")


@router.post("/send-test-webhook")
async def send_test_webhook(body: TestWebhookRequest, user: TokenUser = Depends(require_admin)):
    """Post a sample payload to a URL before saving it"""
    try:
        return await get_notification_service().send_test_webhook(body.url, body.event)

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error sending test webhook: {str(e)}")


@router.post("/test-chatwoot")
async def test_chatwoot(body: TestChatwootRequest, user: TokenUser = Depends(require_admin)):
    try:
        return await get_notification_service().test_chatwoot_connection(body.phone)

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error testing Chatwoot: {str(e)}")
