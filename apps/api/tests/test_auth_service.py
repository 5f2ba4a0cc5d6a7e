from __future__ import annotations

import httpx
import pytest
from sqlalchemy import func, select

from pastoral.auth.identity import IdentityProfile, IdentityProvider
from pastoral.auth.service import AuthService
from pastoral.common.models import User
from pastoral.core.config import settings
from pastoral.core.errors import InternalServiceError, UnauthorizedError
from conftest import TEST_JWT_SECRET, make_token


def _count_users(db) -> int:
    return db.execute(select(func.count()).select_from(User)).scalar()


class TestProvisionUser:
    def test_creates_member(self, db):
        profile = IdentityProfile(user_id="user_new", name="Pedro", email="pedro@paroquia.org.br")

        user = AuthService.provision_user(db, profile)

        assert user.id == "user_new"
        assert user.name == "Pedro"
        assert user.role == "MEMBER"
        assert user.status == "ativo"

    def test_is_idempotent(self, db):
        profile = IdentityProfile(user_id="user_new", name="Pedro", email="pedro@paroquia.org.br")

        first = AuthService.provision_user(db, profile)
        second = AuthService.provision_user(db, profile)

        assert first.id == second.id
        assert _count_users(db) == 1

    def test_admin_email_bootstrap(self, db, monkeypatch):
        monkeypatch.setattr(settings, "admin_emails", "Coordenacao@Paroquia.org.br, other@x.org.br")
        profile = IdentityProfile(
            user_id="user_boss", name="Coordenação", email="coordenacao@paroquia.org.br"
        )

        user = AuthService.provision_user(db, profile)

        assert user.role == "ADMIN"


class TestResolveUser:
    def test_no_token_is_anonymous(self, db, identity_provider):
        assert AuthService.resolve_user(db, identity_provider, None) is None
        assert AuthService.resolve_user(db, identity_provider, "") is None

    def test_invalid_token_raises_unauthorized(self, db, identity_provider):
        with pytest.raises(UnauthorizedError) as exc_info:
            AuthService.resolve_user(db, identity_provider, make_token("x", secret="wrong"))
        assert exc_info.value.message == "Por favor, faça login (10001)"

    def test_known_user_skips_provider(self, db, member_user, identity_provider):
        # The fake provider has no profiles; a lookup would fail
        user = AuthService.resolve_user(db, identity_provider, make_token(member_user.id))
        assert user.id == member_user.id

    def test_first_sight_provisions(self, db, identity_provider, identity_profiles):
        identity_profiles["user_abc"] = {
            "first_name": "Lucia",
            "last_name": "Souza",
            "email_addresses": [{"id": "e1", "email_address": "lucia@paroquia.org.br"}],
        }

        token = make_token("user_abc")
        user = AuthService.resolve_user(db, identity_provider, token)
        again = AuthService.resolve_user(db, identity_provider, token)

        assert user.name == "Lucia Souza"
        assert user.email == "lucia@paroquia.org.br"
        assert again.id == user.id
        assert _count_users(db) == 1

    def test_provider_outage_is_internal_error(self, db):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        provider = IdentityProvider(
            jwt_key=TEST_JWT_SECRET,
            algorithms=["HS256"],
            api_url="https://identity.test/v1",
            secret_key="sk_test",
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(InternalServiceError):
            AuthService.resolve_user(db, provider, make_token("user_unknown"))
        assert _count_users(db) == 0


class TestSyncUser:
    def test_refreshes_name_and_email(self, db, member_user, identity_provider, identity_profiles):
        identity_profiles[member_user.id] = {
            "first_name": "Ana",
            "last_name": "Lima",
            "email_addresses": [{"id": "e1", "email_address": "ana.lima@paroquia.org.br"}],
        }

        user = AuthService.sync_user(db, identity_provider, member_user)

        assert user.name == "Ana Lima"
        assert user.email == "ana.lima@paroquia.org.br"
        assert user.role == "MEMBER"
