# webhook_signature.py
import base64
import hashlib
import hmac
import time
from typing import Optional

TOLERANCE_SECONDS = 5 * 60


class WebhookVerificationError(Exception):
    pass


def _secret_bytes(secret: str) -> bytes:
    if secret.startswith("whsec_"):
        secret = secret[len("whsec_"):]
    return base64.b64decode(secret)


def sign_payload(secret: str, msg_id: str, timestamp: str, body: bytes) -> str:
    signed_content = f"{msg_id}.{timestamp}.".encode() + body
    digest = hmac.new(_secret_bytes(secret), signed_content, hashlib.sha256).digest()
    return base64.b64encode(digest).decode()


def verify_svix_signature(
    secret: str,
    body: bytes,
    msg_id: str,
    timestamp: str,
    signature_header: str,
    now: Optional[float] = None,
) -> None:
    """Raise WebhookVerificationError unless one v1 signature matches."""
    try:
        sent_at = int(timestamp)
    except (TypeError, ValueError):
        raise WebhookVerificationError("Invalid timestamp header")

    now = time.time() if now is None else now
    if abs(now - sent_at) > TOLERANCE_SECONDS:
        raise WebhookVerificationError("Message timestamp outside tolerance")

    try:
        expected = sign_payload(secret, msg_id, timestamp, body)
    except ValueError:
        raise WebhookVerificationError("Webhook secret is not valid base64")

    for entry in signature_header.split():
        version, _, signature = entry.partition(",")
        if version == "v1" and hmac.compare_digest(signature, expected):
            return

    raise WebhookVerificationError("No matching signature found")
