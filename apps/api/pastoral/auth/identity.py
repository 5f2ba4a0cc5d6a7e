"""Client for the external identity provider.

Session tokens are JWTs signed by the provider; they are verified locally
with the configured key. Profile data for first-time users comes from the
provider's backend API.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from jose import JWTError, jwt

from pastoral.core.config import settings
from pastoral.core.otel_setup import get_tracer

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

DEFAULT_DISPLAY_NAME = "Usuário"


class TokenVerificationError(Exception):
    """The bearer token is malformed, expired or not signed by the provider."""


class IdentityProviderError(Exception):
    """The provider's backend API could not be reached or answered an error."""


@dataclass(frozen=True)
class IdentityProfile:
    user_id: str
    name: str
    email: str


class IdentityProvider:
    """Verifies provider tokens and fetches user profiles."""

    def __init__(
        self,
        jwt_key: str,
        algorithms: list[str],
        api_url: str,
        secret_key: str,
        issuer: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.jwt_key = jwt_key
        self.algorithms = algorithms
        self.api_url = api_url.rstrip("/")
        self.secret_key = secret_key
        self.issuer = issuer or None
        self.timeout = timeout
        self.transport = transport

    def verify_token(self, token: str) -> str:
        """Return the external user id (``sub``) carried by a valid token."""
        try:
            claims = jwt.decode(
                token,
                self.jwt_key,
                algorithms=self.algorithms,
                issuer=self.issuer,
                options={"verify_aud": False},
            )
        except JWTError as e:
            raise TokenVerificationError(str(e)) from e

        subject = claims.get("sub")
        if not subject or not isinstance(subject, str):
            raise TokenVerificationError("Token has no subject")
        return subject

    def fetch_profile(self, user_id: str) -> IdentityProfile:
        """Load display name and primary email for a provider user."""
        with tracer.start_as_current_span("identity.fetch_profile"):
            try:
                with httpx.Client(
                    base_url=self.api_url,
                    timeout=self.timeout,
                    transport=self.transport,
                ) as client:
                    response = client.get(
                        f"/users/{user_id}",
                        headers={"Authorization": f"Bearer {self.secret_key}"},
                    )
                    response.raise_for_status()
                    data = response.json()
            except (httpx.HTTPError, ValueError) as e:
                raise IdentityProviderError(
                    f"Failed to fetch profile for {user_id}: {e}"
                ) from e

        return IdentityProfile(
            user_id=user_id,
            name=_display_name(data),
            email=_primary_email(data),
        )


def _display_name(data: dict) -> str:
    full_name = " ".join(
        part for part in (data.get("first_name"), data.get("last_name")) if part
    ).strip()
    return full_name or data.get("username") or DEFAULT_DISPLAY_NAME


def _primary_email(data: dict) -> str:
    addresses = data.get("email_addresses") or []
    primary_id = data.get("primary_email_address_id")
    for address in addresses:
        if primary_id and address.get("id") == primary_id:
            return address.get("email_address") or ""
    if addresses:
        return addresses[0].get("email_address") or ""
    return ""


_provider: IdentityProvider | None = None


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency returning the process-wide provider client."""
    global _provider
    if _provider is None:
        _provider = IdentityProvider(
            jwt_key=settings.identity_jwt_key,
            algorithms=settings.jwt_algorithms,
            api_url=settings.identity_api_url,
            secret_key=settings.identity_secret_key,
            issuer=settings.identity_issuer,
            timeout=settings.identity_timeout_seconds,
        )
    return _provider
