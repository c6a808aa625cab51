"""
Shared pytest fixtures for the marketplace API.
Points the app at a throwaway SQLite database and replaces the identity
provider and payment processor with in-process fakes.
"""

import base64
import hashlib
import hmac
import os
import sys
import tempfile
import time
from decimal import Decimal
from pathlib import Path

import pytest

# Configure the app before anything imports app.core.config
_TMP_DIR = tempfile.mkdtemp(prefix="marketplace-tests-")
IDENTITY_WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"identity-webhook-secret").decode()
STRIPE_WEBHOOK_SECRET = "whsec_stripe_test_secret"

os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR}/test.db"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RATE_LIMIT_STORAGE_URI"] = "memory://"
os.environ["IDENTITY_WEBHOOK_SECRET"] = IDENTITY_WEBHOOK_SECRET
os.environ["STRIPE_WEBHOOK_SECRET"] = STRIPE_WEBHOOK_SECRET
os.environ["STRIPE_SECRET_KEY"] = "sk_test_dummy"
os.environ["EDUCATOR_ROLE_CHECK"] = "true"
os.environ["OPTIMISTIC_ENROLLMENT"] = "false"
os.environ["DEBUG"] = "false"

sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi import HTTPException  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.database import Base, SessionLocal, engine  # noqa: E402
from app.core.dependencies import get_identity_provider, get_payment_gateway  # noqa: E402
from app.models import Course, User  # noqa: E402
from app.utils.identity_provider import (  # noqa: E402
    IdentityClaims,
    IdentityProfile,
    IdentityProviderError,
)
from app.utils.payment_gateway import CheckoutSession, StripeGateway  # noqa: E402
from app.utils.webhook_signature import sign_payload  # noqa: E402
from main import app  # noqa: E402


class FakeIdentityProvider:
    """Tokens look like 'token:<user_id>' or 'token:<user_id>:<role>'."""

    def __init__(self):
        self.profiles = {}
        self.roles = {}
        self.lookups = []
        self.fail_lookups = False

    def add_profile(self, user_id, name="Test Student", email=None, image_url=None):
        self.profiles[user_id] = IdentityProfile(
            user_id=user_id,
            name=name,
            email=email or f"{user_id}@example.com",
            image_url=image_url or f"https://img.example.com/{user_id}.png",
        )

    def verify_session_token(self, token):
        parts = token.split(":")
        if len(parts) < 2 or parts[0] != "token" or not parts[1]:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        role = parts[2] if len(parts) > 2 else None
        return IdentityClaims(user_id=parts[1], role=role, raw={"sub": parts[1]})

    async def get_user(self, user_id):
        self.lookups.append(user_id)
        if self.fail_lookups or user_id not in self.profiles:
            raise IdentityProviderError(f"no such user {user_id}")
        return self.profiles[user_id]

    async def set_role(self, user_id, role):
        if self.fail_lookups:
            raise IdentityProviderError("unreachable")
        self.roles[user_id] = role


class FakeGateway(StripeGateway):
    """Real webhook verification, recorded checkout sessions."""

    def __init__(self):
        super().__init__(
            secret_key="sk_test_dummy",
            webhook_secret=STRIPE_WEBHOOK_SECRET,
            currency="usd",
        )
        self.sessions = []

    def create_checkout_session(self, **kwargs):
        self.sessions.append(kwargs)
        session_id = f"cs_test_{len(self.sessions)}"
        return CheckoutSession(
            id=session_id, url=f"https://checkout.stripe.test/{session_id}"
        )


def auth(user_id, role=None):
    token = f"token:{user_id}:{role}" if role else f"token:{user_id}"
    return {"Authorization": f"Bearer {token}"}


def stripe_signature(payload: bytes, secret: str = STRIPE_WEBHOOK_SECRET, timestamp=None):
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode() + payload
    signature = hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def svix_headers(payload: bytes, secret: str = IDENTITY_WEBHOOK_SECRET, msg_id="msg_1", timestamp=None):
    timestamp = str(int(time.time())) if timestamp is None else str(timestamp)
    signature = sign_payload(secret, msg_id, timestamp, payload)
    return {
        "svix-id": msg_id,
        "svix-timestamp": timestamp,
        "svix-signature": f"v1,{signature}",
        "content-type": "application/json",
    }


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def identity():
    provider = FakeIdentityProvider()
    provider.add_profile("user_student", name="Stu Dent")
    provider.add_profile("user_educator", name="Ed Ucator")
    return provider


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(identity, gateway):
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    def _make(user_id="user_student", name="Stu Dent", enrolled_courses=None):
        user = User(
            id=user_id,
            name=name,
            email=f"{user_id}@example.com",
            image_url=f"https://img.example.com/{user_id}.png",
            enrolled_courses=list(enrolled_courses or []),
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def sample_content():
    return [
        {
            "chapter_id": "ch1",
            "title": "Getting Started",
            "order": 1,
            "lectures": [
                {
                    "lecture_id": "lec1",
                    "title": "Welcome",
                    "duration": 5,
                    "url": "https://video.example.com/welcome",
                    "is_preview_free": True,
                    "order": 1,
                },
                {
                    "lecture_id": "lec2",
                    "title": "Setup",
                    "duration": 12,
                    "url": "https://video.example.com/setup",
                    "is_preview_free": False,
                    "order": 2,
                },
            ],
        }
    ]


@pytest.fixture
def make_course(db_session, make_user, sample_content):
    def _make(price="100.00", discount=20, educator_id="user_educator", title="Python 101", **kwargs):
        if not db_session.query(User).filter(User.id == educator_id).first():
            make_user(educator_id, name="Ed Ucator")
        course = Course(
            title=title,
            description="<p>Learn Python</p>",
            thumbnail="https://img.example.com/python.png",
            price=Decimal(price),
            discount=discount,
            content=kwargs.pop("content", sample_content),
            ratings=kwargs.pop("ratings", []),
            enrolled_students=kwargs.pop("enrolled_students", []),
            educator_id=educator_id,
            **kwargs,
        )
        db_session.add(course)
        db_session.commit()
        db_session.refresh(course)
        return course

    return _make
