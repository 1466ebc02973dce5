from decimal import Decimal

import pytest

from drafts.draft import Draft
from src.extensions import db
from user.jwt_utils import generate_access_token


def create_product(client, headers, **overrides):
    data = {
        "product_code": "P-001",
        "product_name": "Green Tea",
        "buying_price": 10000,
        "selling_price": 15000,
        "stock_quantity": 5,
        "supplier": "Tea House",
    }
    data.update(overrides)
    resp = client.post("/products/", json=data, headers=headers)
    assert resp.status_code == 201
    return resp.get_json()


# -------------------------
# Auth boundary
# -------------------------
def test_missing_token_points_to_login(client):
    resp = client.get("/products/")

    assert resp.status_code == 401
    body = resp.get_json()
    assert body["error_code"] == "TOKEN_MISSING"
    assert body["login_url"] == "/auth"


@pytest.mark.parametrize("token", ["not-a-jwt", None])
def test_invalid_token_rejected(app, client, token):
    if token is None:
        token = generate_access_token("owner-1", expires_in_hours=-1)
    resp = client.get("/reports/sales", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401
    assert resp.get_json()["error_code"] == "TOKEN_INVALID"


def test_health_is_public(client):
    assert client.get("/health").get_json() == {"status": "ok"}


# -------------------------
# Products
# -------------------------
def test_product_fields_are_coerced(client, auth_headers):
    body = create_product(
        client, auth_headers,
        buying_price="abc", selling_price=-5, stock_quantity="7", product_name="  Oolong  ",
    )

    assert Decimal(body["buying_price"]) == 0
    assert Decimal(body["selling_price"]) == 0
    assert body["stock_quantity"] == 7
    assert body["product_name"] == "Oolong"


def test_product_requires_code_and_name(client, auth_headers):
    resp = client.post("/products/", json={"product_code": "P-9"}, headers=auth_headers)
    assert resp.status_code == 400
    assert "product_name" in resp.get_json()["error"]


def test_product_crud(client, auth_headers):
    product = create_product(client, auth_headers)
    assert Decimal(product["profit"]) == Decimal("2450.00")

    resp = client.put(f"/products/{product['id']}", json={"selling_price": "16000"}, headers=auth_headers)
    assert resp.status_code == 200
    assert Decimal(resp.get_json()["selling_price"]) == Decimal("16000")

    assert client.delete(f"/products/{product['id']}", headers=auth_headers).status_code == 200
    assert client.get(f"/products/{product['id']}", headers=auth_headers).status_code == 404


def test_product_search_and_sort(client, auth_headers):
    create_product(client, auth_headers, product_code="T-1", product_name="Green Tea", stock_quantity=2)
    create_product(client, auth_headers, product_code="C-1", product_name="Arabica", supplier="Bean Co", stock_quantity=9)
    create_product(client, auth_headers, product_code="T-2", product_name="black tea", stock_quantity=0)

    names = [p["product_name"] for p in client.get("/products/?search=tea", headers=auth_headers).get_json()]
    assert names == ["black tea", "Green Tea"]

    by_stock = client.get("/products/?sort=stock&order=desc&in_stock=1", headers=auth_headers).get_json()
    assert [p["product_name"] for p in by_stock] == ["Arabica", "Green Tea"]

    assert client.get("/products/?sort=price", headers=auth_headers).status_code == 400


def test_products_are_owner_scoped(client, auth_headers, other_auth_headers):
    product = create_product(client, auth_headers)

    assert client.get("/products/", headers=other_auth_headers).get_json() == []
    assert client.get(f"/products/{product['id']}", headers=other_auth_headers).status_code == 404
    resp = client.post("/transactions/sales", json={"items": [{"product_id": product["id"], "quantity": 1}]},
                       headers=other_auth_headers)
    assert resp.status_code == 404


# -------------------------
# Transactions
# -------------------------
def test_sale_over_stock_returns_conflict(client, auth_headers):
    product = create_product(client, auth_headers, stock_quantity=5)

    resp = client.post("/transactions/sales", json={"items": [{"product_id": product["id"], "quantity": 6}]},
                       headers=auth_headers)

    assert resp.status_code == 409
    body = resp.get_json()
    assert body["error"] == "Failed to process sale"
    assert "Available: 5" in body["reason"]
    assert client.get(f"/products/{product['id']}", headers=auth_headers).get_json()["stock_quantity"] == 5


def test_sale_commits(client, auth_headers):
    product = create_product(client, auth_headers, stock_quantity=5)

    resp = client.post("/transactions/sales", json={"items": [{"product_id": product["id"], "quantity": 2}]},
                       headers=auth_headers)

    assert resp.status_code == 201
    body = resp.get_json()
    assert Decimal(body["total"]) == Decimal("30000")
    assert body["items"][0]["quantity"] == 2
    assert client.get(f"/products/{product['id']}", headers=auth_headers).get_json()["stock_quantity"] == 3

    listed = client.get("/transactions/?type=sale", headers=auth_headers).get_json()
    assert [t["id"] for t in listed] == [body["id"]]
    assert client.get(f"/transactions/{body['id']}", headers=auth_headers).get_json() == body


def test_sale_without_items(client, auth_headers):
    resp = client.post("/transactions/sales", json={"items": []}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Please select products"


def test_restock_from_draft(client, auth_headers):
    product = create_product(client, auth_headers, stock_quantity=1)

    client.post("/drafts/restock/items", json={"product_id": product["id"], "quantity": 3}, headers=auth_headers)
    resp = client.post("/drafts/restock/items", json={"product_id": product["id"], "quantity": 2}, headers=auth_headers)
    assert resp.status_code == 200
    draft = resp.get_json()
    assert [i["quantity"] for i in draft["items"]] == [5]
    assert Decimal(draft["total"]) == Decimal("50000")

    snapshot = client.get("/drafts/restockTransactionDraft", headers=auth_headers).get_json()
    assert len(snapshot["value"]) == 1

    resp = client.post("/transactions/restocks", json={}, headers=auth_headers)
    assert resp.status_code == 201
    assert resp.get_json()["type"] == "restock"

    assert client.get("/drafts/restockTransactionDraft", headers=auth_headers).get_json()["value"] == []
    assert client.get(f"/products/{product['id']}", headers=auth_headers).get_json()["stock_quantity"] == 6


def test_draft_item_edits(client, auth_headers):
    product = create_product(client, auth_headers)
    client.post("/drafts/purchase/items", json={"product_id": product["id"]}, headers=auth_headers)

    resp = client.patch(f"/drafts/purchase/items/{product['id']}", json={"quantity": 4}, headers=auth_headers)
    assert resp.get_json()["items"][0]["quantity"] == 4

    resp = client.patch(f"/drafts/purchase/items/{product['id']}", json={"quantity": 0}, headers=auth_headers)
    assert resp.get_json()["items"][0]["quantity"] == 4

    resp = client.delete(f"/drafts/purchase/items/{product['id']}", headers=auth_headers)
    assert resp.get_json()["items"] == []
    assert client.get("/drafts/purchase/items", headers=auth_headers).get_json()["items"] == []


def test_saving_empty_draft_clears_it(client, auth_headers, owner_id):
    product = create_product(client, auth_headers)
    item = {"product_id": product["id"], "product_name": "Green Tea", "quantity": 2, "unit_price": "10000"}

    resp = client.put("/drafts/restockTransactionDraft", json={"value": [item]}, headers=auth_headers)
    assert resp.status_code == 200
    assert db.session.get(Draft, (owner_id, "restockTransactionDraft")) is not None

    resp = client.put("/drafts/restockTransactionDraft", json={"value": []}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.get_json()["value"] == []
    db.session.expire_all()
    assert db.session.get(Draft, (owner_id, "restockTransactionDraft")) is None


def test_commit_empty_draft_is_rejected(client, auth_headers):
    resp = client.post("/transactions/purchases", json={}, headers=auth_headers)
    assert resp.status_code == 400


def test_unknown_range_is_rejected(client, auth_headers):
    assert client.get("/transactions/?range=fortnight", headers=auth_headers).status_code == 400


# -------------------------
# Pricing
# -------------------------
def test_markup_breakdown(client, auth_headers):
    resp = client.post("/pricing/markup", json={"buying_price": 10000, "markup_percent": 25}, headers=auth_headers)

    body = resp.get_json()
    assert resp.status_code == 200
    assert Decimal(body["final_price"]) == Decimal("13333.33")
    assert Decimal(body["admin_fee"]) == Decimal("1733.33")
    assert Decimal(body["packaging_fee"]) == Decimal("533.33")


def test_markup_rejects_zero_cost(client, auth_headers):
    resp = client.post("/pricing/markup", json={"buying_price": 0, "markup_percent": 25}, headers=auth_headers)
    assert resp.status_code == 400


def test_selected_markups_drive_recommendations(client, auth_headers):
    assert client.get("/pricing/markups", headers=auth_headers).get_json()["markups"][0] == 10

    resp = client.put("/pricing/markups", json={"markups": [30, 10, 10]}, headers=auth_headers)
    assert resp.get_json()["markups"] == [10, 30]

    create_product(client, auth_headers)
    create_product(client, auth_headers, product_code="P-002", product_name="Free Sample", buying_price=0)

    body = client.get("/pricing/recommendations", headers=auth_headers).get_json()
    by_name = {p["product_name"]: p for p in body["products"]}
    assert [r["markup_percent"] for r in by_name["Green Tea"]["recommendations"]] == [10, 30]
    assert by_name["Free Sample"]["recommendations"] == []


# -------------------------
# Reports
# -------------------------
def test_sales_report(client, auth_headers):
    product = create_product(client, auth_headers, stock_quantity=5)
    client.post("/transactions/sales", json={"items": [{"product_id": product["id"], "quantity": 2}]},
                headers=auth_headers)

    summary = client.get("/reports/sales?range=3months", headers=auth_headers).get_json()["summary"]
    assert summary["total_transactions"] == 1
    assert Decimal(summary["total_sales"]) == Decimal("30000")
    assert summary["total_items"] == 2
    # (15000 - 10000 - 2550) * 2
    assert Decimal(summary["total_profit"]) == Decimal("4900")


def test_inventory_report_and_export(client, auth_headers):
    create_product(client, auth_headers, stock_quantity=2)
    create_product(client, auth_headers, product_code="P-002", product_name="Coffee", stock_quantity=50)

    report = client.get("/reports/inventory?filter=low", headers=auth_headers).get_json()
    assert [p["product_name"] for p in report["products"]] == ["Green Tea"]
    assert report["summary"]["total_products"] == 2
    assert report["summary"]["low_stock_items"] == 1

    resp = client.get("/reports/inventory/export", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert resp.data[:2] == b"PK"


# -------------------------
# Suppliers and tasks
# -------------------------
def test_supplier_crud(client, auth_headers, other_auth_headers):
    resp = client.post("/suppliers/", json={"name": "Tea House", "contact": "0812"}, headers=auth_headers)
    assert resp.status_code == 201
    supplier = resp.get_json()

    assert client.post("/suppliers/", json={"contact": "x"}, headers=auth_headers).status_code == 400
    assert client.get(f"/suppliers/{supplier['id']}", headers=other_auth_headers).status_code == 404

    resp = client.put(f"/suppliers/{supplier['id']}", json={"contact": "0899"}, headers=auth_headers)
    assert resp.get_json()["contact"] == "0899"
    assert client.delete(f"/suppliers/{supplier['id']}", headers=auth_headers).status_code == 200
    assert client.get("/suppliers/", headers=auth_headers).get_json() == []


def test_task_categories(client, auth_headers):
    assert client.post("/tasks/categories", json={"name": "Today"}, headers=auth_headers).status_code == 201
    assert client.post("/tasks/categories", json={"name": "Today"}, headers=auth_headers).status_code == 400
    assert client.post("/tasks/", json={"text": "Count stock", "category": "Later"}, headers=auth_headers).status_code == 404

    resp = client.post("/tasks/", json={"text": "Count stock", "category": "Today"}, headers=auth_headers)
    assert resp.status_code == 201

    listed = client.get("/tasks/", headers=auth_headers).get_json()
    assert listed == [{"name": "Today", "tasks": [{"id": resp.get_json()["id"], "text": "Count stock"}]}]

    assert client.delete("/tasks/categories/Today", headers=auth_headers).status_code == 200
    assert client.get("/tasks/", headers=auth_headers).get_json() == []
