"""
API tests: routing, auth, error envelopes and estimate workflow over HTTP
"""

import os
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from fastapi.testclient import TestClient

from pump_estimator_core.infra.db import get_session

from api.auth import verify_token
from api.main import app
from api.security_config import JWT_ALGORITHM, JWT_AUDIENCE

pytestmark = pytest.mark.e2e

USER_CLAIMS = {"sub": "user-1", "email": "estimator@example.com", "role": "authenticated"}
ADMIN_CLAIMS = {"sub": "admin-1", "email": "admin@example.com", "role": "admin"}


@pytest.fixture
def api_session(seeded_session):
    """Route handlers share the test session"""
    def override_get_session():
        yield seeded_session

    app.dependency_overrides[get_session] = override_get_session
    yield seeded_session
    app.dependency_overrides.clear()


def _as(claims):
    app.dependency_overrides[verify_token] = lambda: claims


@pytest.fixture
def client(api_session):
    _as(USER_CLAIMS)
    return TestClient(app)


@pytest.fixture
def admin_client(api_session):
    _as(ADMIN_CLAIMS)
    return TestClient(app)


@pytest.fixture
def client_id(client):
    response = client.post("/v1/clients", json={"name": "Valley Farms"})
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.critical
class TestHealth:
    def test_healthz(self):
        response = TestClient(app).get("/healthz")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Trace-Id" in response.headers

    def test_root(self):
        data = TestClient(app).get("/").json()
        assert data["health"] == "/healthz"

    def test_readyz_before_startup(self):
        response = TestClient(app).get("/readyz")
        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    def test_trace_id_is_echoed(self):
        response = TestClient(app).get("/healthz", headers={"X-Trace-Id": "trace-123"})
        assert response.headers["X-Trace-Id"] == "trace-123"


class TestAuth:
    def test_missing_token_rejected(self, api_session):
        response = TestClient(app).get("/v1/clients")
        assert response.status_code in (401, 403)

    def test_signed_token_accepted(self, api_session):
        token = jwt.encode(
            {
                **USER_CLAIMS,
                "aud": JWT_AUDIENCE,
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            os.environ["JWT_SECRET"],
            algorithm=JWT_ALGORITHM,
        )
        response = TestClient(app).get("/v1/clients", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    def test_expired_token(self, api_session):
        token = jwt.encode(
            {**USER_CLAIMS, "aud": JWT_AUDIENCE, "exp": datetime.now(timezone.utc) - timedelta(minutes=5)},
            os.environ["JWT_SECRET"],
            algorithm=JWT_ALGORITHM,
        )
        response = TestClient(app).get("/v1/clients", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["code"] == "TOKEN_EXPIRED"

    def test_catalog_write_requires_admin(self, client):
        response = client.post("/v1/catalog/labor-rates", json={"name": "Pull Pump Labor", "rate_per_hour": "150"})
        assert response.status_code == 403
        assert response.json()["code"] == "INSUFFICIENT_PERMISSIONS"


class TestCalculate:
    def test_preview(self, client, sample_inputs):
        response = client.post("/v1/estimates/calculate", json=sample_inputs)
        assert response.status_code == 200

        data = response.json()
        assert len(data["line_items"]) == 11
        assert data["total_amount"] == "13754.86"
        assert data["summary"]["wire_gauge"] == "#10"
        assert data["line_items"][7] == {
            "sort_order": 8,
            "description": "#10 FJ wire",
            "quantity": "320",
            "rate": "3.95",
            "total": "1264.00",
            "notes": None,
            "is_taxable": False,
        }

    def test_no_pipe_is_422(self, client, sample_inputs):
        sample_inputs["gpm"] = 9999
        response = client.post("/v1/estimates/calculate", json=sample_inputs)

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "NO_PIPE_FOR_GPM"
        assert body["traceId"] == response.headers["X-Trace-Id"]

    @pytest.mark.parametrize(
        "field,value",
        [("voltage", 120), ("gpm", 0), ("discharge_package", "D"), ("prep_time_hours", -1)],
    )
    def test_invalid_input_is_400(self, client, sample_inputs, field, value):
        sample_inputs[field] = value
        response = client.post("/v1/estimates/calculate", json=sample_inputs)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestEstimateWorkflow:
    def test_create_get_update_recalculate_delete(self, client, client_id, sample_inputs):
        created = client.post(
            "/v1/estimates",
            json={"client_id": client_id, "site": {"address": "County Rd 4"}, "inputs": sample_inputs},
        )
        assert created.status_code == 201
        estimate = created.json()
        assert estimate["total_amount"] == "13754.86"
        estimate_id = estimate["id"]

        listed = client.get("/v1/estimates", params={"page": 1, "size": 10}).json()
        assert listed["total"] == 1
        assert listed["estimates"][0]["estimate_number"] == estimate["estimate_number"]

        updated = client.put(
            f"/v1/estimates/{estimate_id}",
            json={"line_items": [{"sort_order": 1, "description": "Service call", "quantity": 1, "rate": 95}]},
        )
        assert updated.status_code == 200
        assert updated.json()["total_amount"] == "95.00"

        recalculated = client.post(f"/v1/estimates/{estimate_id}/recalculate")
        assert recalculated.status_code == 200
        assert len(recalculated.json()["line_items"]) == 11

        assert client.delete(f"/v1/estimates/{estimate_id}").status_code == 204
        missing = client.get(f"/v1/estimates/{estimate_id}")
        assert missing.status_code == 404
        assert missing.json()["code"] == "NOT_FOUND"

    def test_estimates_are_private(self, client, client_id, sample_inputs):
        created = client.post("/v1/estimates", json={"client_id": client_id, "inputs": sample_inputs}).json()

        _as({"sub": "user-2", "role": "authenticated"})
        assert client.get(f"/v1/estimates/{created['id']}").status_code == 404
        assert client.get("/v1/estimates").json()["total"] == 0

    def test_create_for_unknown_client(self, client, sample_inputs):
        response = client.post(
            "/v1/estimates",
            json={"client_id": "00000000-0000-0000-0000-000000000000", "inputs": sample_inputs},
        )
        assert response.status_code == 404


class TestCatalogAdmin:
    def test_material_lifecycle(self, admin_client):
        created = admin_client.post("/v1/catalog/materials", json={
            "name": '3" Pipe', "category": "Pipe", "price": "14.25", "unit": "ft",
            "lookup_data": {"gpmMin": 111, "gpmMax": 160, "frictionLoss": 0.03},
        })
        assert created.status_code == 201
        material = created.json()
        assert material["price"] == "14.25"

        duplicate = admin_client.post("/v1/catalog/materials", json={
            "name": '3" Pipe', "category": "Pipe", "price": "1",
            "lookup_data": {"gpmMin": 1, "gpmMax": 2, "frictionLoss": 0.1},
        })
        assert duplicate.status_code == 409

        pipes = admin_client.get("/v1/catalog/materials", params={"category": "Pipe"}).json()
        assert '3" Pipe' in [p["name"] for p in pipes]

        updated = admin_client.put(f"/v1/catalog/materials/{material['id']}", json={"is_active": False})
        assert updated.json()["is_active"] is False

        assert admin_client.delete(f"/v1/catalog/materials/{material['id']}").status_code == 204

    def test_settings(self, admin_client):
        response = admin_client.put("/v1/settings", json={"company_name": "Deep Well Co"})
        assert response.status_code == 200
        assert admin_client.get("/v1/settings").json()["company_name"] == "Deep Well Co"

    def test_labor_rates_listed(self, client):
        names = [r["name"] for r in client.get("/v1/catalog/labor-rates").json()]
        assert "Install Submersible Labor" in names
