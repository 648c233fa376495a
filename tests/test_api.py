import time
from decimal import Decimal

import pytest
from starlette.websockets import WebSocketDisconnect

import config


def _lease(client, headers, shop_number="G-12", rent="10000.00"):
     shop = client.post("/api/shops", headers=headers, json={"shop_number": shop_number, "monthly_rent": rent})
     assert shop.status_code == 201
     tenant = client.post("/api/tenants", headers=headers, json={"full_name": "Sara Khan", "phone_number": "0300"})
     assert tenant.status_code == 201
     agreement = client.post("/api/agreements", headers=headers, json={
          "shop_id": shop.json()["id"],
          "tenant_id": tenant.json()["id"],
          "start_date": "2024-01-01",
          "end_date": "2024-12-31",
          "rent_due_day": 5,
     })
     assert agreement.status_code == 201
     return shop.json(), tenant.json(), agreement.json()


def test_requires_token(client):
     assert client.get("/api/shops").status_code == 401
     assert client.get("/api/shops", headers={"Authorization": "Bearer nonsense"}).status_code == 403


def test_login_with_wrong_password(client, auth_headers):
     response = client.post("/api/auth/login", json={"username": "landlord", "password": "Wr0ng#Pass"})

     assert response.status_code == 401
     assert response.json()["error_code"] == "INVALID_CREDENTIALS"


def test_lease_flow(client, auth_headers):
     shop, tenant, agreement = _lease(client, auth_headers)

     assert agreement["status"] == "ACTIVE"
     assert agreement["shop_number"] == "G-12"
     assert agreement["tenant_name"] == "Sara Khan"
     assert Decimal(str(agreement["monthly_rent"])) == Decimal("10000")
     assert client.get(f"/api/shops/{shop['id']}", headers=auth_headers).json()["status"] == "OCCUPIED"

     conflict = client.post("/api/agreements", headers=auth_headers, json={
          "shop_id": shop["id"],
          "tenant_id": tenant["id"],
          "start_date": "2024-06-01",
          "end_date": "2025-05-31",
     })
     assert conflict.status_code == 409
     assert conflict.json()["error_code"] == "SHOP_ALREADY_LEASED"


def test_payments_and_rent_summary(client, auth_headers):
     _, _, agreement = _lease(client, auth_headers)
     base = f"/api/agreements/{agreement['id']}"

     paid = client.post(f"{base}/payments", headers=auth_headers, json={"amount": "4000", "payment_date": "2024-01-03"})
     assert paid.status_code == 201
     assert paid.json()["status"] == "PARTIAL"
     assert (paid.json()["month"], paid.json()["year"]) == (1, 2024)

     over = client.post(f"{base}/payments", headers=auth_headers, json={"amount": "7000", "month": 1, "year": 2024})
     assert over.status_code == 400
     assert over.json()["error_code"] == "PAYMENT_EXCEEDS_REMAINING"

     summary = client.get(f"{base}/rent-summary", headers=auth_headers, params={"as_of": "2024-03-15"}).json()
     assert [r["label"] for r in summary["records"]] == ["January 2024", "February 2024", "March 2024"]
     assert [r["status"] for r in summary["records"]] == ["PARTIAL", "UNPAID", "UNPAID"]
     assert Decimal(str(summary["current_remaining"])) == Decimal("10000")
     assert Decimal(str(summary["previous_pending_total"])) == Decimal("16000")
     assert Decimal(str(summary["total_remaining"])) == Decimal("26000")

     yearly = client.get(f"{base}/payments/yearly/2024", headers=auth_headers).json()
     assert Decimal(str(yearly["total"])) == Decimal("4000")
     assert len(client.get(f"{base}/payments", headers=auth_headers).json()) == 1


def test_missing_agreement(client, auth_headers):
     response = client.get("/api/agreements/999/rent-summary", headers=auth_headers)

     assert response.status_code == 404


def test_dashboard_stats(client, auth_headers):
     _lease(client, auth_headers)
     client.post("/api/shops", headers=auth_headers, json={"shop_number": "G-13", "monthly_rent": "8000"})

     stats = client.get("/api/dashboard/stats", headers=auth_headers).json()

     assert (stats["total_shops"], stats["vacant_shops"], stats["occupied_shops"]) == (2, 1, 1)
     assert stats["active_tenants"] == 1


def test_notify_requires_brevo(client, auth_headers, monkeypatch):
     monkeypatch.setattr(config, "BREVO_API_KEY", None)

     assert client.post("/api/dashboard/reminders/notify", headers=auth_headers).status_code == 503


def test_live_dashboard_pushes_after_commit(client, auth_headers, change_feed):
     token = auth_headers["Authorization"].split(" ")[1]

     with client.websocket_connect(f"/api/dashboard/live?token={token}") as ws:
          assert ws.receive_json()["total_shops"] == 0

          client.post("/api/shops", headers=auth_headers, json={"shop_number": "G-12", "monthly_rent": "10000"})

          update = ws.receive_json()
          assert update["total_shops"] == 1
          assert update["vacant_shops"] == 1

     deadline = time.monotonic() + 5
     while change_feed.subscriber_count and time.monotonic() < deadline:
          time.sleep(0.01)
     assert change_feed.subscriber_count == 0


def test_live_dashboard_rejects_bad_token(client):
     with pytest.raises(WebSocketDisconnect):
          with client.websocket_connect("/api/dashboard/live?token=nonsense") as ws:
               ws.receive_json()


def test_shop_status_follows_lease(client, auth_headers):
     shop, _, _ = _lease(client, auth_headers)

     response = client.patch(f"/api/shops/{shop['id']}/status", headers=auth_headers, json={"status": "VACANT"})

     assert response.status_code == 409
     assert response.json()["error_code"] == "SHOP_LEASED"
     assert client.get(f"/api/shops/{shop['id']}", headers=auth_headers).json()["status"] == "OCCUPIED"
