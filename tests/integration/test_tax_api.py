"""Integration tests for Tax API endpoints."""

import csv
import io
import uuid
from datetime import datetime
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from openpyxl import load_workbook

from coinbasis.api.main import app


@pytest.fixture()
async def tax_client(session, user, add_ledger_row):
    """Create test client with a buy in 2023 and a partial sale in 2024."""
    await add_ledger_row("buy", "BTC", "1", "10000", datetime(2023, 1, 1))
    await add_ledger_row("sell", "BTC", "0.5", "7500", datetime(2024, 2, 1))
    await session.commit()

    from coinbasis.api.deps import get_db
    app.dependency_overrides[get_db] = lambda: session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client, user
    app.dependency_overrides.clear()


class TestCapitalGainsAPI:
    async def test_returns_totals_and_items(self, tax_client):
        client, user = tax_client
        resp = await client.get("/api/tax/capital-gains", params={"user_id": str(user.id), "tax_year": 2024})

        assert resp.status_code == 200
        data = resp.json()
        assert data["tax_year"] == 2024
        assert data["method"] == "FIFO"
        assert Decimal(str(data["long_term_gains"])) == Decimal("2500")
        assert Decimal(str(data["net_gain_loss"])) == Decimal("2500")
        assert data["transactions_included"] == 1
        assert data["items"][0]["is_long_term"] is True
        assert data["items"][0]["unknown_cost_basis"] is False

    async def test_other_year_is_empty(self, tax_client):
        client, user = tax_client
        resp = await client.get("/api/tax/capital-gains", params={"user_id": str(user.id), "tax_year": 2023})

        assert resp.status_code == 200
        assert resp.json()["items"] == []

    async def test_unknown_user(self, tax_client):
        client, _ = tax_client
        resp = await client.get("/api/tax/capital-gains", params={"user_id": str(uuid.uuid4()), "tax_year": 2024})
        assert resp.status_code == 404

    async def test_tax_year_out_of_range(self, tax_client):
        client, user = tax_client
        resp = await client.get("/api/tax/capital-gains", params={"user_id": str(user.id), "tax_year": 1999})
        assert resp.status_code == 422


class TestCapitalGainsExport:
    async def test_form_8949_csv(self, tax_client):
        client, user = tax_client
        resp = await client.get(
            "/api/tax/capital-gains/export",
            params={"user_id": str(user.id), "tax_year": 2024, "format": "form8949"},
        )

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "form8949_2024.csv" in resp.headers["content-disposition"]
        rows = list(csv.reader(io.StringIO(resp.text)))
        assert rows[0][0] == "Description"
        assert rows[1][7] == "2500"
        assert rows[1][8] == "Long"

    async def test_turbotax_csv(self, tax_client):
        client, user = tax_client
        resp = await client.get(
            "/api/tax/capital-gains/export",
            params={"user_id": str(user.id), "tax_year": 2024, "format": "turbotax"},
        )
        rows = list(csv.reader(io.StringIO(resp.text)))
        assert rows[1][-1] == "Long-term"

    async def test_xlsx(self, tax_client):
        client, user = tax_client
        resp = await client.get(
            "/api/tax/capital-gains/export",
            params={"user_id": str(user.id), "tax_year": 2024, "format": "xlsx"},
        )

        assert resp.status_code == 200
        assert "spreadsheetml" in resp.headers["content-type"]
        wb = load_workbook(io.BytesIO(resp.content))
        assert wb.sheetnames == ["summary", "capital_gains"]

    async def test_unknown_format(self, tax_client):
        client, user = tax_client
        resp = await client.get(
            "/api/tax/capital-gains/export",
            params={"user_id": str(user.id), "tax_year": 2024, "format": "pdf"},
        )
        assert resp.status_code == 422
