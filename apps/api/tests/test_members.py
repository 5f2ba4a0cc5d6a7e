"""Tests for pastoral members (service and routes)."""

from __future__ import annotations

import json
from datetime import date

import pytest
from fastapi.testclient import TestClient

from pastoral.common.models import Baptism, Meeting, MemberRequest, Schedule, User
from pastoral.core.errors import ConflictError, NotFoundError
from pastoral.members.service import MemberService, normalize_phone


class TestNormalizePhone:
    def test_brazilian_mobile(self):
        assert normalize_phone("(11) 98765-4321") == "+5511987654321"

    def test_international_kept(self):
        assert normalize_phone("+351 912 345 678") == "+351912345678"

    def test_unparseable_kept_raw(self):
        assert normalize_phone(" ramal 12 ") == "ramal 12"

    def test_blank_is_none(self):
        assert normalize_phone("   ") is None
        assert normalize_phone(None) is None


class TestMemberService:
    def test_create_manual_member(self, db):
        member = MemberService.create_member(
            db, name="José", role="SECRETARY", status="ativo", phone="11 98765-4321"
        )

        assert member.id.startswith("manual_")
        assert member.role == "SECRETARY"
        assert member.email == ""
        assert member.phone == "+5511987654321"

    def test_list_ordered_by_name(self, db):
        for name in ("Zélia", "Bruno", "Marta"):
            MemberService.create_member(db, name=name)

        names = [m.name for m in MemberService.list_members(db)]
        assert names == ["Bruno", "Marta", "Zélia"]

    def test_list_filters_status(self, db):
        MemberService.create_member(db, name="Ativo")
        MemberService.create_member(db, name="Inativo", status="inativo")

        names = [m.name for m in MemberService.list_members(db, status="inativo")]
        assert names == ["Inativo"]

    def test_partial_update(self, db):
        member = MemberService.create_member(db, name="Clara", address="Rua A, 10")

        MemberService.update_member(db, member.id, marital_status="casada")

        db.refresh(member)
        assert member.marital_status == "casada"
        assert member.address == "Rua A, 10"

    def test_update_unknown(self, db):
        with pytest.raises(NotFoundError):
            MemberService.update_member(db, "manual_missing", name="X")

    def test_delete_unreferenced(self, db):
        member = MemberService.create_member(db, name="Sem vínculos")

        MemberService.delete_member(db, member.id)

        with pytest.raises(NotFoundError):
            MemberService.get_member(db, member.id)

    def test_delete_scheduled_member_conflicts(self, db):
        member = MemberService.create_member(db, name="Escalado")
        baptism = Baptism(child_name="Miguel", status="Agendado", scheduled_date=date.today())
        db.add(baptism)
        db.flush()
        db.add(Schedule(baptism_id=baptism.id, user_id=member.id, role="Equipe"))
        db.commit()

        with pytest.raises(ConflictError):
            MemberService.delete_member(db, member.id)

        assert db.get(User, member.id) is not None

    def test_delete_meeting_author_conflicts(self, db, admin_user):
        db.add(Meeting(meeting_date=date.today(), title="Reunião", author_id=admin_user.id))
        db.commit()

        with pytest.raises(ConflictError):
            MemberService.delete_member(db, admin_user.id)

    def test_delete_request_author_conflicts(self, db, member_user):
        db.add(MemberRequest(title="Velas", type="compra", author_id=member_user.id))
        db.commit()

        assert MemberService.count_dependents(db, member_user.id) == 1
        with pytest.raises(ConflictError):
            MemberService.delete_member(db, member_user.id)

    def test_delete_celebrant_conflicts(self, db, celebrant_user):
        db.add(Baptism(child_name="Davi", celebrant_id=celebrant_user.id))
        db.commit()

        with pytest.raises(ConflictError):
            MemberService.delete_member(db, celebrant_user.id)


class TestMemberRoutes:
    def test_member_can_list(self, client: TestClient, member_user, admin_user, auth_headers):
        response = client.get("/api/v1/pastoral-members", headers=auth_headers(member_user))
        assert response.status_code == 200
        assert [m["name"] for m in response.json()] == ["Ana Voluntária", "Padre Antônio"]

    def test_staff_creates_with_role_alias(self, client: TestClient, secretary_user, auth_headers):
        response = client.post(
            "/api/v1/pastoral-members",
            json={
                "name": "Paulo",
                "role": "financeiro",
                "email": "paulo@paroquia.org.br",
                "sacraments": {"baptism": True},
            },
            headers=auth_headers(secretary_user),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"].startswith("manual_")
        assert data["role"] == "FINANCE"
        assert data["status"] == "ativo"
        assert data["sacraments"]["baptism"] is True

    def test_voluntario_alias_is_member(self, client: TestClient, admin_user, auth_headers):
        response = client.post(
            "/api/v1/pastoral-members",
            json={"name": "Teresa", "role": "voluntario"},
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 201
        assert response.json()["role"] == "MEMBER"

    def test_unknown_role_rejected(self, client: TestClient, admin_user, auth_headers):
        response = client.post(
            "/api/v1/pastoral-members",
            json={"name": "Teresa", "role": "bispo"},
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 422

    def test_member_cannot_create(self, client: TestClient, member_user, auth_headers):
        response = client.post(
            "/api/v1/pastoral-members",
            json={"name": "Intruso"},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 403

    def test_inactivate(self, client: TestClient, admin_user, member_user, auth_headers):
        response = client.patch(
            f"/api/v1/pastoral-members/{member_user.id}",
            json={"status": "inativo"},
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 200
        assert response.json()["status"] == "inativo"
        assert response.json()["name"] == "Ana Voluntária"

    @pytest.mark.parametrize("field", ["name", "has_children", "role", "status"])
    def test_null_on_required_field_rejected(
        self, client: TestClient, db, admin_user, member_user, auth_headers, field
    ):
        response = client.patch(
            f"/api/v1/pastoral-members/{member_user.id}",
            json={field: None},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 422
        assert response.json()["error"]["details"]["errors"][0]["field"] == f"body.{field}"
        db.refresh(member_user)
        assert member_user.name == "Ana Voluntária"
        assert member_user.role == "MEMBER"

    def test_partial_sacraments_stored_in_full(
        self, client: TestClient, db, admin_user, member_user, auth_headers
    ):
        response = client.patch(
            f"/api/v1/pastoral-members/{member_user.id}",
            json={"sacraments": {"baptism": True, "eucharist": True}},
            headers=auth_headers(admin_user),
        )

        assert response.status_code == 200
        db.refresh(member_user)
        assert json.loads(member_user.sacraments) == {
            "baptism": True,
            "eucharist": True,
            "confirmation": False,
            "marriage": False,
        }

    def test_legacy_sacraments_filled_with_defaults(
        self, client: TestClient, db, admin_user, member_user, auth_headers
    ):
        member_user.sacraments = '{"baptism": true}'
        db.commit()

        response = client.get(
            f"/api/v1/pastoral-members/{member_user.id}", headers=auth_headers(admin_user)
        )

        assert response.json()["sacraments"] == {
            "baptism": True,
            "eucharist": False,
            "confirmation": False,
            "marriage": False,
        }

    def test_delete_conflict_message(self, client: TestClient, db, admin_user, member_user, auth_headers):
        baptism = Baptism(child_name="Helena", status="Agendado", scheduled_date=date.today())
        db.add(baptism)
        db.flush()
        db.add(Schedule(baptism_id=baptism.id, user_id=member_user.id, role="Equipe"))
        db.commit()

        response = client.delete(
            f"/api/v1/pastoral-members/{member_user.id}", headers=auth_headers(admin_user)
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "conflict"
        assert "Inative" in response.json()["error"]["message"]

    def test_delete_then_not_found(self, client: TestClient, db, admin_user, auth_headers):
        member = MemberService.create_member(db, name="Temporário")
        headers = auth_headers(admin_user)

        assert client.delete(f"/api/v1/pastoral-members/{member.id}", headers=headers).status_code == 204
        assert client.get(f"/api/v1/pastoral-members/{member.id}", headers=headers).status_code == 404
