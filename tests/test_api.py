# tests/test_api.py
"""End-to-end API tests against an in-memory SQLite database."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import csv
import io
from unittest.mock import patch
from app.exceptions import StoreError

FORM = {
    "vehicleType": "Bus",
    "vehicleNumber": "tn01ab1234",
    "capacity": "40",
    "fromDistrict": "Chennai",
    "driverName": "A Kumar",
    "contactNumber": "9876543210",
}


def register(client, **overrides):
    resp = client.post("/api/v1/vehicles", json=dict(FORM, **overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestRegistrationAPI:
    def test_register(self, client):
        body = register(client)
        vehicle = body["vehicle"]
        assert vehicle["vehicleNumber"] == "TN01AB1234"
        assert vehicle["capacity"] == 40
        assert vehicle["arrived"] is False
        assert vehicle["arrivalTime"] is None
        assert body["verificationLink"] == f"http://testserver/verify?id={vehicle['id']}"
        assert vehicle["verificationLink"] == body["verificationLink"]
        assert body["linkSaved"] is True
        assert body["qrCode"].startswith("data:image/png;base64,")

    def test_validation_errors(self, client):
        resp = client.post("/api/v1/vehicles", json=dict(FORM, vehicleNumber="x", capacity=""))
        assert resp.status_code == 422
        assert resp.json()["errors"] == {
            "vehicleNumber": "Vehicle number must be at least 3 characters",
            "capacity": "Capacity is required",
        }

    def test_oversized_capacity_is_422(self, client):
        resp = client.post("/api/v1/vehicles", json=dict(FORM, capacity="9" * 30))
        assert resp.status_code == 422
        assert resp.json()["errors"] == {"capacity": "Capacity must be at most 1000"}
        assert client.get("/api/v1/admin/vehicles").json()["total"] == 0

    def test_store_failure_is_503(self, client):
        with patch("app.services.vehicle_store.VehicleStore.insert",
                   side_effect=StoreError("Could not insert vehicle: OperationalError")):
            resp = client.post("/api/v1/vehicles", json=FORM)
        assert resp.status_code == 503
        assert resp.json()["detail"] == "Could not insert vehicle: OperationalError"

    def test_qr_download(self, client):
        vehicle_id = register(client)["vehicle"]["id"]
        resp = client.get(f"/api/v1/vehicles/{vehicle_id}/qr.png")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert f"vehicle-qr-{vehicle_id}.png" in resp.headers["content-disposition"]
        assert resp.content.startswith(b"\x89PNG")

    def test_qr_download_unknown(self, client):
        assert client.get("/api/v1/vehicles/nope/qr.png").status_code == 404

    def test_options(self, client):
        body = client.get("/api/v1/options").json()
        assert "Bus" in body["vehicleTypes"]
        assert "Madurai" in body["districts"]


class TestVerificationAPI:
    def test_lookup_and_arrive(self, client):
        vehicle_id = register(client)["vehicle"]["id"]

        resp = client.get("/api/v1/verify", params={"id": vehicle_id})
        assert resp.status_code == 200
        assert resp.json()["arrived"] is False

        resp = client.post(f"/api/v1/verify/{vehicle_id}/arrive")
        assert resp.status_code == 200
        body = resp.json()
        assert body["arrived"] is True
        assert body["arrivalTime"] >= body["registrationTime"]

        resp = client.post(f"/api/v1/verify/{vehicle_id}/arrive")
        assert resp.status_code == 409
        assert resp.json()["detail"] == "Vehicle already arrived"

    def test_unknown_id(self, client):
        assert client.get("/api/v1/verify", params={"id": "missing"}).status_code == 404
        assert client.post("/api/v1/verify/missing/arrive").status_code == 404

    def test_missing_id(self, client):
        resp = client.get("/api/v1/verify")
        assert resp.status_code == 422
        assert resp.json()["errors"] == {"id": "Please enter a vehicle ID"}


class TestAdminAPI:
    def test_list_with_filters(self, client):
        a = register(client, fromDistrict="Madurai", vehicleNumber="tn58aa1111")["vehicle"]["id"]
        register(client, fromDistrict="Madurai", vehicleNumber="tn58bb2222")
        register(client, fromDistrict="Chennai", vehicleNumber="tn01cc3333")
        client.post(f"/api/v1/verify/{a}/arrive")

        body = client.get("/api/v1/admin/vehicles").json()
        assert body["total"] == body["shown"] == 3
        assert body["stats"] == {"total": 3, "arrived": 1, "pending": 2, "byDistrict": {"Madurai": 2, "Chennai": 1}}
        assert body["districts"] == ["Chennai", "Madurai"]

        body = client.get("/api/v1/admin/vehicles", params={"status": "arrived", "district": "Madurai"}).json()
        assert [v["id"] for v in body["vehicles"]] == [a]
        assert body["shown"] == 1
        assert body["stats"]["total"] == 3

        body = client.get("/api/v1/admin/vehicles", params={"search": "TN01"}).json()
        assert [v["vehicleNumber"] for v in body["vehicles"]] == ["TN01CC3333"]

    def test_bad_status(self, client):
        assert client.get("/api/v1/admin/vehicles", params={"status": "gone"}).status_code == 422

    def test_export(self, client):
        register(client, driverName="Kumar, A")
        register(client, fromDistrict="Salem")

        resp = client.get("/api/v1/admin/vehicles/export", params={"district": "Chennai"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert 'filename="vehicle-registrations.csv"' in resp.headers["content-disposition"]

        rows = list(csv.reader(io.StringIO(resp.text)))
        assert len(rows) == 2
        assert rows[1][3] == "Kumar, A"
        assert rows[1][6] == "Pending"
        assert rows[1][8] == "N/A"


def test_health(client):
    body = client.get("/api/v1/health").json()
    assert body["database"] == "ok"
    assert body["status"] == "ok"


def test_landing(client):
    body = client.get("/").json()
    assert set(body["entryPoints"]) == {"register", "verify", "admin"}


def test_api_key_guards_admin_only(monkeypatch):
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from app.main import APIKeyMiddleware, settings

    monkeypatch.setattr(settings, "API_KEY", "s3cret")
    guarded = FastAPI()
    guarded.add_middleware(APIKeyMiddleware)

    @guarded.get("/api/v1/admin/vehicles")
    def admin_list():
        return {"ok": True}

    @guarded.get("/api/v1/verify")
    def verify():
        return {"ok": True}

    client = TestClient(guarded)
    assert client.get("/api/v1/admin/vehicles").status_code == 401
    assert client.get("/api/v1/admin/vehicles", headers={"X-API-Key": "s3cret"}).status_code == 200
    assert client.get("/api/v1/verify").status_code == 200
