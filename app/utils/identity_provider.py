# app/utils/identity_provider.py
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx
from fastapi import HTTPException, status
from jose import JWTError, jwt

logger = logging.getLogger(__name__)


class IdentityProviderError(Exception):
    """The identity provider could not be reached or refused the call."""


@dataclass
class IdentityClaims:
    user_id: str
    role: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class IdentityProfile:
    user_id: str
    name: str
    email: Optional[str]
    image_url: Optional[str]


class IdentityProviderService:
    """Clerk-compatible identity provider: session tokens and the users API"""

    def __init__(
        self,
        api_url: str,
        secret_key: str,
        jwt_key: str,
        jwt_algorithm: str = "RS256",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.secret_key = secret_key
        self.jwt_key = jwt_key
        self.jwt_algorithm = jwt_algorithm
        self.timeout = timeout
        self.transport = transport

    def verify_session_token(self, token: str) -> IdentityClaims:
        """
        Verify a session token issued by the identity provider.

        Raises:
            HTTPException 401 when the token is invalid, expired or has no subject
        """
        try:
            payload = jwt.decode(
                token,
                self.jwt_key,
                algorithms=[self.jwt_algorithm],
                options={"verify_aud": False, "verify_exp": True},
            )
        except JWTError as e:
            logger.warning(f"Session token verification failed: {e}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        user_id = payload.get("sub")
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid token: missing subject",
                headers={"WWW-Authenticate": "Bearer"},
            )

        metadata = payload.get("metadata") or payload.get("public_metadata") or {}
        return IdentityClaims(user_id=user_id, role=metadata.get("role"), raw=payload)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.api_url,
            headers={"Authorization": f"Bearer {self.secret_key}"},
            timeout=self.timeout,
            transport=self.transport,
        )

    async def get_user(self, user_id: str) -> IdentityProfile:
        """Fetch the canonical profile of a user"""
        try:
            async with self._client() as client:
                response = await client.get(f"/users/{user_id}")
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Identity provider lookup failed for {user_id}: {e}")
            raise IdentityProviderError(str(e)) from e

        return self.profile_from_payload(data)

    async def set_role(self, user_id: str, role: str) -> None:
        """Store the role in the user's public metadata"""
        try:
            async with self._client() as client:
                response = await client.patch(
                    f"/users/{user_id}/metadata",
                    json={"public_metadata": {"role": role}},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Identity provider role update failed for {user_id}: {e}")
            raise IdentityProviderError(str(e)) from e

        logger.info(f"Role '{role}' assigned to user {user_id}")

    @staticmethod
    def profile_from_payload(data: Dict[str, Any]) -> IdentityProfile:
        """Build a profile from a users-API object or a user.* event payload"""
        first_name = data.get("first_name") or ""
        last_name = data.get("last_name") or ""

        email = None
        addresses = data.get("email_addresses") or []
        primary_id = data.get("primary_email_address_id")
        for address in addresses:
            if address.get("id") == primary_id:
                email = address.get("email_address")
                break
        if email is None and addresses:
            email = addresses[0].get("email_address")

        return IdentityProfile(
            user_id=data["id"],
            name=f"{first_name} {last_name}".strip(),
            email=email,
            image_url=data.get("image_url"),
        )
