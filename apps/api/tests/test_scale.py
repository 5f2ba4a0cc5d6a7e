"""Tests for the ceremony team scale and presence confirmation."""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from pastoral.common.models import Baptism, PresenceStatus
from pastoral.core.errors import ConflictError, ForbiddenError, NotFoundError
from pastoral.scale.service import ScaleService


@pytest.fixture
def scheduled_baptism(db) -> Baptism:
    baptism = Baptism(
        child_name="Batismo A",
        status="Agendado",
        scheduled_date=date.today() + timedelta(days=1),
    )
    db.add(baptism)
    db.commit()
    db.refresh(baptism)
    return baptism


class TestScaleService:
    def test_add_starts_pending(self, db, scheduled_baptism, member_user):
        schedule = ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id, "Equipe")

        assert schedule.presence_status == "pendente"
        assert schedule.role == "Equipe"

    def test_duplicate_assignment_conflicts(self, db, scheduled_baptism, member_user):
        ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id, "Equipe")

        with pytest.raises(ConflictError):
            ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id, "Leitor")

    def test_unknown_baptism(self, db, member_user):
        with pytest.raises(NotFoundError):
            ScaleService.add_to_scale(db, 404, member_user.id)

    def test_unknown_member(self, db, scheduled_baptism):
        with pytest.raises(NotFoundError):
            ScaleService.add_to_scale(db, scheduled_baptism.id, "user_ghost")

    def test_remove(self, db, scheduled_baptism, member_user):
        schedule = ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id)
        schedule_id = schedule.id

        ScaleService.remove_from_scale(db, schedule_id)

        with pytest.raises(NotFoundError):
            ScaleService.get_schedule(db, schedule_id)

    def test_assignee_answers_own_presence(self, db, scheduled_baptism, member_user):
        schedule = ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id)

        updated = ScaleService.update_presence_status(
            db, member_user, schedule.id, PresenceStatus.AUSENTE
        )

        assert updated.presence_status == "ausente"

    def test_other_member_cannot_answer(self, db, scheduled_baptism, member_user, celebrant_user):
        schedule = ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id)

        with pytest.raises(ForbiddenError):
            ScaleService.update_presence_status(
                db, celebrant_user, schedule.id, PresenceStatus.CONFIRMADO
            )

    def test_answer_cannot_flip_directly(self, db, scheduled_baptism, member_user, admin_user):
        schedule = ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id)
        ScaleService.update_presence_status(db, member_user, schedule.id, PresenceStatus.CONFIRMADO)

        with pytest.raises(ConflictError):
            ScaleService.update_presence_status(
                db, admin_user, schedule.id, PresenceStatus.AUSENTE
            )

    def test_same_status_is_noop(self, db, scheduled_baptism, member_user, celebrant_user):
        schedule = ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id)
        ScaleService.update_presence_status(db, member_user, schedule.id, PresenceStatus.CONFIRMADO)

        again = ScaleService.update_presence_status(
            db, member_user, schedule.id, PresenceStatus.CONFIRMADO
        )

        assert again.presence_status == "confirmado"


class TestPresenceFlow:
    """Scale a celebrant and a helper, confirm, then try to reset."""

    def test_confirm_and_reset(
        self,
        client: TestClient,
        scheduled_baptism,
        admin_user,
        celebrant_user,
        member_user,
        auth_headers,
    ):
        admin = auth_headers(admin_user)
        celebrant = auth_headers(celebrant_user)

        celebrant_row = client.post(
            "/api/v1/dashboard/scale",
            json={
                "baptism_id": scheduled_baptism.id,
                "user_id": celebrant_user.id,
                "role": "Celebrante",
            },
            headers=admin,
        )
        helper_row = client.post(
            "/api/v1/dashboard/scale",
            json={"baptism_id": scheduled_baptism.id, "user_id": member_user.id, "role": "Equipe"},
            headers=admin,
        )
        assert celebrant_row.status_code == 201
        assert helper_row.status_code == 201

        scale = client.get("/api/v1/dashboard/presence-scale", headers=celebrant).json()
        assert len(scale) == 1
        assert scale[0]["id"] == scheduled_baptism.id
        members = scale[0]["members"]
        assert [m["ceremony_role"] for m in members] == ["Celebrante", "Equipe"]
        assert {m["presence_status"] for m in members} == {"pendente"}
        assert members[0]["user_name"] == "Diácono Carlos"

        presence_url = f"/api/v1/dashboard/scale/{celebrant_row.json()['id']}/presence"

        confirmed = client.patch(presence_url, json={"status": "confirmado"}, headers=celebrant)
        assert confirmed.status_code == 200
        assert confirmed.json()["presence_status"] == "confirmado"

        reset_by_self = client.patch(presence_url, json={"status": "pendente"}, headers=celebrant)
        assert reset_by_self.status_code == 403

        reset_by_admin = client.patch(presence_url, json={"status": "pendente"}, headers=admin)
        assert reset_by_admin.status_code == 200
        assert reset_by_admin.json()["presence_status"] == "pendente"

    def test_flip_without_reset_conflicts(
        self, client: TestClient, db, scheduled_baptism, member_user, auth_headers
    ):
        schedule = ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id, "Equipe")
        headers = auth_headers(member_user)
        url = f"/api/v1/dashboard/scale/{schedule.id}/presence"

        assert client.patch(url, json={"status": "confirmado"}, headers=headers).status_code == 200
        response = client.patch(url, json={"status": "ausente"}, headers=headers)

        assert response.status_code == 409
        assert response.json()["error"]["details"] == {"from": "confirmado", "to": "ausente"}

    def test_unknown_status_rejected(
        self, client: TestClient, db, scheduled_baptism, member_user, auth_headers
    ):
        schedule = ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id)

        response = client.patch(
            f"/api/v1/dashboard/scale/{schedule.id}/presence",
            json={"status": "talvez"},
            headers=auth_headers(member_user),
        )

        assert response.status_code == 422

    def test_member_cannot_edit_scale(
        self, client: TestClient, scheduled_baptism, member_user, auth_headers
    ):
        response = client.post(
            "/api/v1/dashboard/scale",
            json={"baptism_id": scheduled_baptism.id, "user_id": member_user.id},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 403

    def test_duplicate_via_route(
        self, client: TestClient, scheduled_baptism, member_user, secretary_user, auth_headers
    ):
        payload = {"baptism_id": scheduled_baptism.id, "user_id": member_user.id}
        headers = auth_headers(secretary_user)

        assert client.post("/api/v1/dashboard/scale", json=payload, headers=headers).status_code == 201
        response = client.post("/api/v1/dashboard/scale", json=payload, headers=headers)

        assert response.status_code == 409

    def test_remove_via_route(
        self, client: TestClient, db, scheduled_baptism, member_user, admin_user, auth_headers
    ):
        schedule = ScaleService.add_to_scale(db, scheduled_baptism.id, member_user.id)
        headers = auth_headers(admin_user)

        response = client.delete(f"/api/v1/dashboard/scale/{schedule.id}", headers=headers)
        assert response.status_code == 204

        again = client.delete(f"/api/v1/dashboard/scale/{schedule.id}", headers=headers)
        assert again.status_code == 404

    def test_past_baptisms_not_in_presence_scale(
        self, client: TestClient, db, member_user, auth_headers
    ):
        db.add(
            Baptism(
                child_name="Passado",
                status="Agendado",
                scheduled_date=date.today() - timedelta(days=3),
            )
        )
        db.add(
            Baptism(
                child_name="Não agendado",
                status="Em Triagem",
                scheduled_date=date.today() + timedelta(days=3),
            )
        )
        db.commit()

        response = client.get("/api/v1/dashboard/presence-scale", headers=auth_headers(member_user))

        assert response.status_code == 200
        assert response.json() == []
