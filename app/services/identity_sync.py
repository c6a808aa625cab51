# app/services/identity_sync.py
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.decorator import DBException, db_exception
from app.models.user import User
from app.utils.identity_provider import (
    IdentityProfile,
    IdentityProviderError,
    IdentityProviderService,
)

logger = logging.getLogger(__name__)


class IdentitySyncService:
    """Mirrors identity-provider users into the local users table"""

    def __init__(self, db: Session, identity: IdentityProviderService):
        self.db = db
        self.identity = identity

    def get_user(self, user_id: str) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    @db_exception
    def _insert(self, profile: IdentityProfile) -> User:
        user = User(
            id=profile.user_id,
            name=profile.name,
            email=profile.email,
            image_url=profile.image_url,
            enrolled_courses=[],
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def create_local(self, profile: IdentityProfile) -> User:
        """
        Insert the profile unless the id already exists.
        A concurrent insert of the same id is resolved by returning the winner.
        """
        existing = self.get_user(profile.user_id)
        if existing:
            return existing

        try:
            user = self._insert(profile)
        except DBException as e:
            if e.status_code != status.HTTP_409_CONFLICT:
                raise
            logger.info(f"User {profile.user_id} was created concurrently, reusing it")
            return self.get_user(profile.user_id)

        logger.info(f"User {user.id} created in DB")
        return user

    async def get_or_create(self, user_id: str) -> User:
        user = self.get_user(user_id)
        if user:
            return user

        logger.info(f"User {user_id} not found in DB. Creating new user...")
        try:
            profile = await self.identity.get_user(user_id)
        except IdentityProviderError:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Could not retrieve or create user account.",
            )
        return self.create_local(profile)

    def create_from_event(self, data: Dict[str, Any]) -> User:
        return self.create_local(IdentityProviderService.profile_from_payload(data))

    @db_exception
    def _apply_profile(self, user: User, profile: IdentityProfile) -> User:
        user.name = profile.name
        user.email = profile.email
        user.image_url = profile.image_url
        self.db.commit()
        self.db.refresh(user)
        return user

    def update_from_event(self, data: Dict[str, Any]) -> User:
        profile = IdentityProviderService.profile_from_payload(data)
        user = self.get_user(profile.user_id)
        if user is None:
            return self.create_local(profile)

        logger.info(f"User {user.id} profile refreshed from identity provider")
        return self._apply_profile(user, profile)
