from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from pastoral.core.errors import NotFoundError
from pastoral.finance.service import FinanceTransactionService


class TestFinanceTransactionService:
    def test_create_and_get(self, db, finance_user):
        tx = FinanceTransactionService.create_transaction(
            db,
            actor_id=finance_user.id,
            type="entrada",
            value=Decimal("120.00"),
            description="Oferta do batismo",
            date=date(2026, 4, 12),
            category="Ofertas",
        )

        fetched = FinanceTransactionService.get_transaction(db, tx.id)
        assert fetched.type == "entrada"
        assert fetched.value == Decimal("120.00")
        assert fetched.category == "Ofertas"

    def test_list_most_recent_first_and_filtered(self, db, finance_user):
        for tx_type, day in (("entrada", 1), ("saída", 15), ("entrada", 28)):
            FinanceTransactionService.create_transaction(
                db,
                actor_id=finance_user.id,
                type=tx_type,
                value=Decimal("10.00"),
                description=f"Lançamento {day}",
                date=date(2026, 2, day),
            )

        all_days = [tx.date.day for tx in FinanceTransactionService.list_transactions(db)]
        entries = FinanceTransactionService.list_transactions(db, tx_type="entrada")
        window = FinanceTransactionService.list_transactions(
            db, date_from=date(2026, 2, 10), date_to=date(2026, 2, 20)
        )

        assert all_days == [28, 15, 1]
        assert {tx.type for tx in entries} == {"entrada"}
        assert [tx.date.day for tx in window] == [15]

    def test_update_partial(self, db, finance_user):
        tx = FinanceTransactionService.create_transaction(
            db,
            actor_id=finance_user.id,
            type="saída",
            value=Decimal("35.90"),
            description="Velas",
            date=date(2026, 3, 3),
        )

        FinanceTransactionService.update_transaction(db, tx.id, category="Liturgia")

        assert tx.category == "Liturgia"
        assert tx.description == "Velas"

    def test_missing_transaction(self, db):
        with pytest.raises(NotFoundError):
            FinanceTransactionService.get_transaction(db, 77)


class TestFinanceRoutes:
    def test_finance_role_records(self, client: TestClient, finance_user, auth_headers):
        response = client.post(
            "/api/v1/finance/transactions",
            json={
                "type": "saída",
                "value": "42.50",
                "description": "Toalhas batismais",
                "date": "2026-05-03",
                "category": "Materiais",
            },
            headers=auth_headers(finance_user),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["type"] == "saída"
        assert Decimal(data["value"]) == Decimal("42.50")
        assert data["date"] == "2026-05-03"

    def test_admin_records(self, client: TestClient, admin_user, auth_headers):
        response = client.post(
            "/api/v1/finance/transactions",
            json={"type": "entrada", "value": 10, "description": "Oferta", "date": "2026-05-03"},
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 201

    @pytest.mark.parametrize("value", [0, -5])
    def test_value_must_be_positive(self, client: TestClient, finance_user, auth_headers, value):
        response = client.post(
            "/api/v1/finance/transactions",
            json={"type": "entrada", "value": value, "description": "Oferta", "date": "2026-05-03"},
            headers=auth_headers(finance_user),
        )
        assert response.status_code == 422

    def test_member_cannot_record(self, client: TestClient, member_user, auth_headers):
        response = client.post(
            "/api/v1/finance/transactions",
            json={"type": "entrada", "value": 10, "description": "Oferta", "date": "2026-05-03"},
            headers=auth_headers(member_user),
        )
        assert response.status_code == 403

    def test_member_can_read(self, client: TestClient, db, finance_user, member_user, auth_headers):
        FinanceTransactionService.create_transaction(
            db,
            actor_id=finance_user.id,
            type="entrada",
            value=Decimal("5.00"),
            description="Oferta",
            date=date(2026, 1, 1),
        )

        response = client.get(
            "/api/v1/finance/transactions",
            params={"type": "entrada"},
            headers=auth_headers(member_user),
        )

        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_update_and_delete(self, client: TestClient, db, finance_user, auth_headers):
        tx = FinanceTransactionService.create_transaction(
            db,
            actor_id=finance_user.id,
            type="entrada",
            value=Decimal("5.00"),
            description="Oferta",
            date=date(2026, 1, 1),
        )
        headers = auth_headers(finance_user)
        url = f"/api/v1/finance/transactions/{tx.id}"

        patched = client.patch(url, json={"value": "7.25"}, headers=headers)
        assert patched.status_code == 200
        assert Decimal(patched.json()["value"]) == Decimal("7.25")

        assert client.delete(url, headers=headers).status_code == 204
        assert client.get(url, headers=headers).status_code == 404

    @pytest.mark.parametrize("field", ["type", "value", "description", "date"])
    def test_null_on_required_field_rejected(
        self, client: TestClient, db, finance_user, auth_headers, field
    ):
        tx = FinanceTransactionService.create_transaction(
            db,
            actor_id=finance_user.id,
            type="entrada",
            value=Decimal("30.00"),
            description="Velas",
            date=date(2026, 2, 1),
        )

        response = client.patch(
            f"/api/v1/finance/transactions/{tx.id}",
            json={field: None},
            headers=auth_headers(finance_user),
        )

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "validation_error"
        db.refresh(tx)
        assert tx.description == "Velas"

    def test_null_clears_category(self, client: TestClient, db, finance_user, auth_headers):
        tx = FinanceTransactionService.create_transaction(
            db,
            actor_id=finance_user.id,
            type="entrada",
            value=Decimal("30.00"),
            description="Velas",
            date=date(2026, 2, 1),
            category="Liturgia",
        )

        response = client.patch(
            f"/api/v1/finance/transactions/{tx.id}",
            json={"category": None},
            headers=auth_headers(finance_user),
        )

        assert response.status_code == 200
        assert response.json()["category"] is None
