import logging
from functools import lru_cache

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.models.user import User
from app.services.identity_sync import IdentitySyncService
from app.utils.identity_provider import IdentityClaims, IdentityProviderService
from app.utils.payment_gateway import StripeGateway

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

EDUCATOR_ROLE = "educator"


@lru_cache
def get_identity_provider() -> IdentityProviderService:
    return IdentityProviderService(
        api_url=settings.identity_api_url,
        secret_key=settings.identity_secret_key,
        jwt_key=settings.identity_jwt_key,
        jwt_algorithm=settings.identity_jwt_algorithm,
        timeout=settings.identity_timeout,
    )


@lru_cache
def get_payment_gateway() -> StripeGateway:
    return StripeGateway(
        secret_key=settings.stripe_secret_key,
        webhook_secret=settings.stripe_webhook_secret,
        currency=settings.currency,
    )


async def get_current_claims(
    credentials: HTTPAuthorizationCredentials = Security(security),
    identity: IdentityProviderService = Depends(get_identity_provider),
) -> IdentityClaims:
    """
    Dependency that requires a valid Bearer session token.
    Raises 401 Unauthorized if the token is missing or invalid.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return identity.verify_session_token(credentials.credentials)


async def get_current_user(
    claims: IdentityClaims = Depends(get_current_claims),
    identity: IdentityProviderService = Depends(get_identity_provider),
    db: Session = Depends(get_db),
) -> User:
    """
    Returns the local user for the token subject, creating it from the
    identity provider's profile on first sight.
    """
    return await IdentitySyncService(db, identity).get_or_create(claims.user_id)


async def get_current_educator(
    claims: IdentityClaims = Depends(get_current_claims),
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Dependency for educator-only endpoints.
    The role claim is only checked when educator_role_check is enabled.
    """
    if settings.educator_role_check and claims.role != EDUCATOR_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access Denied: You do not have educator privileges.",
        )
    return current_user
