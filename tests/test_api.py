import httpx
import pytest
from fastapi.testclient import TestClient

from shared.clients.dependencies import get_api_client, get_public_api_client
from services.analytics_service.main import analytics_app
from services.auth_service.main import auth_app
from services.courier_service.main import courier_app
from services.export_service.main import export_app
from services.order_service.main import order_app
from services.product_service.main import product_app
from services.storefront_service.main import storefront_app

from conftest import json_body, make_order


@pytest.fixture
def client_for(api):
    apps = []

    def build(app) -> TestClient:
        app.dependency_overrides[get_api_client] = lambda: api
        app.dependency_overrides[get_public_api_client] = lambda: api
        apps.append(app)
        return TestClient(app)

    yield build
    for app in apps:
        app.dependency_overrides.clear()


# --- orders ---

def test_order_list(client_for, backend, admin_headers):
    backend.on("GET", "/api/orders", body={"data": {"orders": [make_order(id="o1")], "total": 37}})
    resp = client_for(order_app).get("/", params={"page": 2, "status": "all"}, headers=admin_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 37
    assert body["total_pages"] == 4
    assert body["page"] == 2
    assert body["items"][0]["id"] == "o1"
    assert backend.requests[0].headers["Authorization"] == "Bearer upstream-token"
    assert backend.requests[0].url.params["page"] == "2"
    assert "status" not in backend.requests[0].url.params


def test_orders_require_a_session(client_for):
    assert client_for(order_app).get("/").status_code == 401


def test_orders_are_admin_only(client_for, courier_headers):
    assert client_for(order_app).get("/", headers=courier_headers).status_code == 403


def test_unknown_status_filter_is_a_validation_error(client_for, backend, admin_headers):
    resp = client_for(order_app).get("/", params={"status": "lost"}, headers=admin_headers)

    assert resp.status_code == 422
    assert resp.json()["title"] == "Validation Error"
    assert backend.requests == []


def test_page_below_one_is_rejected(client_for, admin_headers):
    resp = client_for(order_app).get("/", params={"page": 0}, headers=admin_headers)
    assert resp.status_code == 422
    assert resp.json()["variant"] == "destructive"


def test_status_change(client_for, backend, admin_headers):
    backend.on("GET", "/api/orders/o1", body={"data": make_order(id="o1")})
    backend.on("PUT", "/api/orders/o1/status", body={"success": True})

    resp = client_for(order_app).put("/o1/status", json={"status": "sended"}, headers=admin_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["order"]["status"] == "sended"
    assert body["allowed_transitions"] == ["received", "in-transit"]
    assert json_body(backend.calls("PUT", "/api/orders/o1/status")[0]) == {"status": "sended"}


def test_illegal_status_change_is_a_conflict(client_for, backend, admin_headers):
    backend.on("GET", "/api/orders/o1", body=make_order(id="o1"))

    resp = client_for(order_app).put("/o1/status", json={"status": "delivered"}, headers=admin_headers)

    assert resp.status_code == 409
    assert resp.json()["title"] == "Invalid Status Change"
    assert backend.calls("PUT", "/api/orders/o1/status") == []


def test_missing_order_is_not_found(client_for, admin_headers):
    resp = client_for(order_app).get("/missing", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["title"] == "Not Found"


def test_backend_failure_is_a_network_error(client_for, backend, admin_headers):
    backend.on("GET", "/api/orders/o1", body=make_order(id="o1"))
    backend.on("PUT", "/api/orders/o1/status", status=500, body={"message": "database offline"})

    resp = client_for(order_app).put("/o1/status", json={"status": "sended"}, headers=admin_headers)

    assert resp.status_code == 502
    assert resp.json() == {
        "title": "Network Error",
        "description": "database offline",
        "variant": "destructive",
    }


def test_delete_order(client_for, backend, admin_headers):
    backend.on("DELETE", "/api/orders/o1", status=204)
    resp = client_for(order_app).delete("/o1", headers=admin_headers)
    assert resp.status_code == 204
    assert len(backend.calls("DELETE", "/api/orders/o1")) == 1


# --- courier ---

def test_courier_marks_delivered(client_for, backend, courier_headers):
    backend.on("GET", "/api/orders/o1", body=make_order(id="o1", status="in-transit"))
    backend.on("PUT", "/api/courier/o1/status", body={"order": make_order(id="o1", status="delivered")})

    resp = client_for(courier_app).put("/orders/o1/status", json={"status": "delivered"}, headers=courier_headers)

    assert resp.status_code == 200
    assert resp.json()["order"]["status"] == "delivered"
    assert resp.json()["allowed_transitions"] == []


def test_courier_cannot_skip_ahead(client_for, backend, courier_headers):
    backend.on("GET", "/api/orders/o1", body=make_order(id="o1"))
    resp = client_for(courier_app).put("/orders/o1/status", json={"status": "delivered"}, headers=courier_headers)
    assert resp.status_code == 409


def test_courier_list_searches_addresses(client_for, backend, courier_headers):
    backend.on(
        "GET",
        "/api/courier/orders",
        body=[make_order(id="o1"), make_order(id="o2", address="Galle Road, Colombo")],
    )
    resp = client_for(courier_app).get("/orders", params={"search": "galle"}, headers=courier_headers)

    assert resp.status_code == 200
    assert [o["id"] for o in resp.json()["items"]] == ["o2"]
    assert resp.json()["total"] == 1


# --- storefront ---

def test_storefront_order_submission(client_for, backend):
    backend.on("POST", "/api/orders", status=201, body={"data": {"id": "new-1"}})
    resp = client_for(storefront_app).post(
        "/orders",
        json={"fullName": " Nimali ", "address": "Kandy", "mobile": "077 123 4567", "quantity": "2"},
    )

    assert resp.status_code == 201
    assert resp.json()["order_id"] == "new-1"
    sent = json_body(backend.calls("POST", "/api/orders")[0])
    assert sent["fullName"] == "Nimali"
    assert sent["status"] == "received"
    assert sent["quantity"] == 2
    assert sent["product"] == "herbal-cream"


@pytest.mark.parametrize(
    "form",
    [
        {"fullName": "", "address": "Kandy", "mobile": "0771234567"},
        {"fullName": "Nimali", "address": "Kandy", "mobile": "call me"},
        {"fullName": "Nimali", "address": "Kandy", "mobile": "0771234567", "quantity": 0},
        {"fullName": "Nimali", "address": "Kandy", "mobile": "0771234567", "email": "nope"},
    ],
)
def test_storefront_rejects_bad_forms(client_for, backend, form):
    resp = client_for(storefront_app).post("/orders", json=form)
    assert resp.status_code == 422
    assert backend.requests == []


def test_storefront_inquiry(client_for, backend):
    backend.on("POST", "/api/inquiries", status=201, body={"success": True})
    resp = client_for(storefront_app).post("/inquiries", json={"message": "  Is it vegan? "})

    assert resp.status_code == 201
    assert json_body(backend.requests[0]) == {"message": "Is it vegan?"}


# --- auth ---

def test_login_issues_session_for_backend_role(client_for, backend):
    backend.on(
        "POST",
        "/api/auth/login",
        body={"success": True, "token": "up-1", "user": {"id": "u1", "role": "courier"}},
    )
    client = client_for(auth_app)
    resp = client.post("/login", json={"email": "rider@example.com", "password": "secret"})

    assert resp.status_code == 200
    assert resp.json()["role"] == "courier"

    me = client.get("/me", headers={"Authorization": f"Bearer {resp.json()['access_token']}"})
    assert me.json() == {"user_id": "u1", "role": "courier"}


def test_login_rejected_by_backend(client_for, backend):
    backend.on("POST", "/api/auth/login", status=401, body={"message": "bad password"})
    resp = client_for(auth_app).post("/login", json={"email": "a@example.com", "password": "x"})
    assert resp.status_code == 401


def test_login_without_console_role_is_forbidden(client_for, backend):
    backend.on(
        "POST",
        "/api/auth/login",
        body={"success": True, "token": "up-1", "user": {"id": "u2", "role": "customer"}},
    )
    resp = client_for(auth_app).post("/login", json={"email": "c@example.com", "password": "x"})
    assert resp.status_code == 403


def test_tampered_token_is_rejected(client_for):
    resp = client_for(auth_app).get("/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


# --- products, exports, analytics ---

def test_products_visible_to_couriers(client_for, backend, courier_headers):
    backend.on("GET", "/api/products", body={"products": [{"_id": "x", "id": "p1", "name": "Herbal Cream", "price": "1,800"}]})
    resp = client_for(product_app).get("/", headers=courier_headers)

    assert resp.status_code == 200
    assert resp.json()[0]["price"] == 1800


def test_product_changes_are_admin_only(client_for, courier_headers):
    resp = client_for(product_app).post("/", json={"name": "Soap", "price": 300}, headers=courier_headers)
    assert resp.status_code == 403


def test_invoice_download(client_for, backend, admin_headers):
    backend.on("GET", "/api/orders/abc12345", body={"id": "abc12345", "quantity": "3"})

    resp = client_for(export_app).get(
        "/orders/abc12345/invoice", params={"export_date": "2024-06-01"}, headers=admin_headers
    )

    assert resp.status_code == 200
    assert resp.headers["content-disposition"] == 'attachment; filename="invoice-INV-ABC12345.txt"'
    assert resp.headers["content-type"].startswith("text/plain")
    assert "Rs. 4,700" in resp.text


def test_batch_export_walks_every_page(client_for, backend, admin_headers):
    def pages(request):
        page = int(request.url.params["page"])
        ids = {1: ["a1", "a2"], 2: ["b1"]}[page]
        return httpx.Response(200, json={"orders": [make_order(id=i) for i in ids], "total": 3})

    backend.on("GET", "/api/orders", handler=pages)
    resp = client_for(export_app).get(
        "/orders",
        params={"limit": 2, "all_pages": "true", "export_date": "2024-06-01"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert 'filename="orders-2024-06-01.txt"' in resp.headers["content-disposition"]
    assert "Orders          : 3" in resp.text


def test_analytics_summary(client_for, backend, admin_headers):
    backend.on(
        "GET",
        "/api/orders",
        body={
            "orders": [
                make_order(id="a", status="sended", quantity=2, price=1000, createdAt="2024-05-03T08:00:00Z"),
                make_order(id="b", status="delivered", quantity=1, createdAt="2024-04-20T08:00:00Z"),
                make_order(id="c", status="in_transit", quantity=3, createdAt=None),
            ],
            "total": 3,
        },
    )
    backend.on("GET", "/api/products", body=[{"id": "p1", "name": "Herbal Cream", "price": 1800}])

    resp = client_for(analytics_app).get("/summary", params={"today": "2024-05-03"}, headers=admin_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert body["by_status"] == {"received": 0, "sended": 1, "in-transit": 1, "delivered": 1}
    assert body["with_courier"] == 2
    assert body["today"] == 1
    assert body["this_month"] == 1
    assert body["total_revenue"] == 2000 + 1800 + 5400
    assert len(body["daily"]) == 7
    assert body["daily"][-1] == {"date": "2024-05-03", "orders": 1, "revenue": 2000}
    assert [m["month"] for m in body["monthly"]] == [
        "2023-12", "2024-01", "2024-02", "2024-03", "2024-04", "2024-05",
    ]
    assert body["monthly"][-2] == {"month": "2024-04", "orders": 1, "revenue": 1800}
