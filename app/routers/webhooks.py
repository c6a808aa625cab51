# app/routers/webhooks.py
import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import get_identity_provider, get_payment_gateway
from app.services.identity_sync import IdentitySyncService
from app.services.purchase import PurchaseService
from app.utils.identity_provider import IdentityProviderService
from app.utils.payment_gateway import StripeGateway, WebhookSignatureError
from app.utils.webhook_signature import WebhookVerificationError, verify_svix_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["Webhooks"])

USER_EVENTS = ("user.created", "user.updated")


def _rejected(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": message},
    )


@router.post("/clerk")
async def identity_webhook(
    request: Request,
    svix_id: Optional[str] = Header(None, alias="svix-id"),
    svix_timestamp: Optional[str] = Header(None, alias="svix-timestamp"),
    svix_signature: Optional[str] = Header(None, alias="svix-signature"),
    identity: IdentityProviderService = Depends(get_identity_provider),
    db: Session = Depends(get_db),
):
    """
    Identity-provider events (svix-signed).
    user.created inserts the local user, user.updated refreshes its profile.
    """
    if not settings.identity_webhook_secret:
        logger.error("IDENTITY_WEBHOOK_SECRET is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook secret is not configured",
        )

    if not svix_id or not svix_timestamp or not svix_signature:
        return _rejected("Error occurred -- no svix headers")

    body = await request.body()
    try:
        verify_svix_signature(
            settings.identity_webhook_secret,
            body,
            svix_id,
            svix_timestamp,
            svix_signature,
        )
        event = json.loads(body)
    except WebhookVerificationError as e:
        logger.warning(f"Error verifying identity webhook: {e}")
        return _rejected("Error occurred")
    except ValueError:
        return _rejected("Invalid payload")

    if not isinstance(event, dict):
        return _rejected("Invalid payload")

    event_type = event.get("type")
    data = event.get("data") or {}
    if event_type in USER_EVENTS and (not isinstance(data, dict) or not data.get("id")):
        logger.warning(f"Identity webhook {event_type} without a user id")
        return _rejected("Invalid payload")

    service = IdentitySyncService(db, identity)

    if event_type == "user.created":
        user = service.create_from_event(data)
        logger.info(f"Webhook received: New user {user.id} created in DB.")
    elif event_type == "user.updated":
        service.update_from_event(data)
    else:
        logger.info(f"Identity webhook {event_type} ignored")

    return {"success": True, "message": "Webhook received"}


@router.post("/stripe")
async def payment_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    gateway: StripeGateway = Depends(get_payment_gateway),
    db: Session = Depends(get_db),
):
    """
    Payment events. checkout.session.completed confirms the correlated purchase.
    Events for unknown purchases are acknowledged and dropped.
    """
    body = await request.body()
    try:
        event = gateway.parse_event(body, stripe_signature or "")
    except WebhookSignatureError as e:
        logger.warning(f"Webhook signature verification failed: {e}")
        return _rejected("Invalid signature")

    PurchaseService(db, gateway).handle_event(event)
    return {"success": True, "received": True}
