# app/utils/payment_gateway.py
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict

import stripe

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Checkout session could not be created."""


class WebhookSignatureError(Exception):
    """A webhook payload failed signature verification."""


@dataclass
class CheckoutSession:
    id: str
    url: str


class StripeGateway:
    """Thin wrapper over Stripe Checkout and webhook verification"""

    def __init__(self, secret_key: str, webhook_secret: str, currency: str = "usd"):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret
        self.currency = currency.lower()

    def create_checkout_session(
        self,
        *,
        product_name: str,
        unit_amount: int,
        success_url: str,
        cancel_url: str,
        metadata: Dict[str, str],
    ) -> CheckoutSession:
        """
        Create a one-item payment session.

        Args:
            product_name: Line item name shown on the payment page
            unit_amount: Price in minor currency units (cents)
            success_url: Redirect after payment
            cancel_url: Redirect when the buyer abandons the page
            metadata: Correlation data echoed back in webhook events
        """
        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                success_url=success_url,
                cancel_url=cancel_url,
                mode="payment",
                line_items=[
                    {
                        "price_data": {
                            "currency": self.currency,
                            "product_data": {"name": product_name},
                            "unit_amount": unit_amount,
                        },
                        "quantity": 1,
                    }
                ],
                metadata=metadata,
            )
        except stripe.StripeError as e:
            logger.error(f"Checkout session creation failed: {e}")
            raise PaymentGatewayError(str(e)) from e

        logger.info(f"Checkout session {session.id} created for {metadata}")
        return CheckoutSession(id=session.id, url=session.url)

    def parse_event(self, payload: bytes, signature: str) -> Dict[str, Any]:
        """Verify the signature header and decode the event as a plain dict"""
        if not signature:
            raise WebhookSignatureError("Missing signature header")

        body = payload.decode("utf-8")
        try:
            stripe.WebhookSignature.verify_header(
                body,
                signature,
                self.webhook_secret,
                tolerance=stripe.Webhook.DEFAULT_TOLERANCE,
            )
        except stripe.SignatureVerificationError as e:
            raise WebhookSignatureError(str(e)) from e

        try:
            event = json.loads(body)
        except ValueError as e:
            raise WebhookSignatureError("Invalid payload") from e

        if not isinstance(event, dict):
            raise WebhookSignatureError("Invalid payload")
        return event
