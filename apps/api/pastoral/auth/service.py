"""Identity resolution: bearer token -> local pastoral member."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pastoral.auth.identity import (
    IdentityProfile,
    IdentityProvider,
    IdentityProviderError,
    TokenVerificationError,
)
from pastoral.common.models import User, UserRole
from pastoral.core.config import settings
from pastoral.core.errors import InternalServiceError, UnauthorizedError
from pastoral.core.metrics import emit_business_metric

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[User]:
        return db.get(User, user_id)

    @staticmethod
    def role_for_email(email: str) -> str:
        if email and email.lower() in settings.admin_email_set:
            return UserRole.ADMIN.value
        return UserRole.MEMBER.value

    @staticmethod
    def provision_user(db: Session, profile: IdentityProfile) -> User:
        """Create the local row for a provider user, or return the existing one.

        Safe to call concurrently: the primary key is the provider id, so a
        racing insert fails and the winner's row is returned.
        """
        existing = db.get(User, profile.user_id)
        if existing:
            return existing

        user = User(
            id=profile.user_id,
            name=profile.name,
            email=profile.email,
            role=AuthService.role_for_email(profile.email),
            status="ativo",
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            winner = db.get(User, profile.user_id)
            if winner is None:
                raise
            return winner

        db.refresh(user)
        logger.info("Provisioned member %s (role %s)", user.id, user.role)
        emit_business_metric("member.provisioned", user_id=user.id, role=user.role)
        return user

    @staticmethod
    def verify_subject(provider: IdentityProvider, token: str) -> str:
        """Verify a token, mapping every failure to the fixed 401."""
        try:
            return provider.verify_token(token)
        except TokenVerificationError as e:
            # Reason stays server-side
            logger.info("Rejected bearer token: %s", e)
            raise UnauthorizedError() from e

    @staticmethod
    def fetch_profile(provider: IdentityProvider, user_id: str) -> IdentityProfile:
        try:
            return provider.fetch_profile(user_id)
        except IdentityProviderError as e:
            logger.error("Identity provider unavailable: %s", e, exc_info=True)
            raise InternalServiceError() from e

    @staticmethod
    def resolve_user(
        db: Session,
        provider: IdentityProvider,
        token: Optional[str],
    ) -> Optional[User]:
        """Map a bearer token to a local user.

        Returns None when no token is supplied. Raises UnauthorizedError for
        an invalid token and InternalServiceError when provisioning needs the
        provider and it is down.
        """
        if not token:
            return None

        user_id = AuthService.verify_subject(provider, token)

        user = AuthService.get_user(db, user_id)
        if user is not None:
            return user

        profile = AuthService.fetch_profile(provider, user_id)
        return AuthService.provision_user(db, profile)

    @staticmethod
    def sync_user(db: Session, provider: IdentityProvider, user: User) -> User:
        """Refresh name and email of an existing member from the provider."""
        profile = AuthService.fetch_profile(provider, user.id)
        user.name = profile.name
        if profile.email:
            user.email = profile.email
        db.commit()
        db.refresh(user)
        return user
