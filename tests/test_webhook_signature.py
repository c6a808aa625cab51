import base64
import time

import pytest

from app.utils.webhook_signature import (
    WebhookVerificationError,
    sign_payload,
    verify_svix_signature,
)

SECRET = "whsec_" + base64.b64encode(b"signing-secret").decode()
BODY = b'{"type": "user.created"}'


def test_accepts_matching_signature():
    ts = str(int(time.time()))
    signature = sign_payload(SECRET, "msg_1", ts, BODY)
    verify_svix_signature(SECRET, BODY, "msg_1", ts, f"v1,{signature}")


def test_any_listed_signature_may_match():
    ts = str(int(time.time()))
    signature = sign_payload(SECRET, "msg_1", ts, BODY)
    verify_svix_signature(SECRET, BODY, "msg_1", ts, f"v1,bogus v1,{signature}")


def test_secret_prefix_is_optional():
    ts = str(int(time.time()))
    signature = sign_payload(SECRET, "msg_1", ts, BODY)
    verify_svix_signature(SECRET[len("whsec_"):], BODY, "msg_1", ts, f"v1,{signature}")


@pytest.mark.parametrize(
    "msg_id, body, version",
    [("msg_2", BODY, "v1"), ("msg_1", b"{}", "v1"), ("msg_1", BODY, "v2")],
)
def test_rejects_mismatch(msg_id, body, version):
    ts = str(int(time.time()))
    signature = sign_payload(SECRET, "msg_1", ts, BODY)
    with pytest.raises(WebhookVerificationError):
        verify_svix_signature(SECRET, body, msg_id, ts, f"{version},{signature}")


def test_rejects_old_timestamp():
    ts = "1000"
    signature = sign_payload(SECRET, "msg_1", ts, BODY)
    with pytest.raises(WebhookVerificationError):
        verify_svix_signature(SECRET, BODY, "msg_1", ts, f"v1,{signature}", now=1000 + 301)


def test_rejects_non_numeric_timestamp():
    with pytest.raises(WebhookVerificationError):
        verify_svix_signature(SECRET, BODY, "msg_1", "yesterday", "v1,abc")


def test_rejects_malformed_secret():
    with pytest.raises(WebhookVerificationError):
        verify_svix_signature("whsec_***", BODY, "msg_1", str(int(time.time())), "v1,abc")
