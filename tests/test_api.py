def _parse(client, text, stage=True):
    return client.post(
        "/imports/parse",
        params={"stage": str(stage).lower()},
        content=text.encode("utf-8"),
        headers={"Content-Type": "text/plain; charset=utf-8"},
    )


def _approved_order(client, sample_text):
    staged = _parse(client, sample_text).json()["staged_ids"]
    res = client.post(f"/imports/{staged[0]}/approve")
    assert res.status_code == 200
    return res.json()["order_id"]


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_parse_and_stage(client, sample_text):
    res = _parse(client, sample_text)
    assert res.status_code == 200
    body = res.json()
    assert body["count"] == 2
    assert len(body["staged_ids"]) == 2
    assert body["orders"][0]["payment_status"] == "PaidInFull"
    assert body["orders"][1]["customer_name"] == "Ana Paula"

    listed = client.get("/imports").json()
    assert [r["id"] for r in listed] == body["staged_ids"]
    assert listed[0]["original_text"].startswith("Maria Silva")
    assert listed[0]["suggestions"] == []


def test_parse_without_staging(client, sample_text):
    body = _parse(client, sample_text, stage=False).json()
    assert body["count"] == 2
    assert body["staged_ids"] == []
    assert client.get("/imports").json() == []


def test_suggestions_from_catalog(client, sample_text):
    client.post("/products", json={"name": "Polos Trinum", "school": "TRINUM", "price": 45})
    import_id = _parse(client, sample_text).json()["staged_ids"][0]
    suggestions = client.get(f"/imports/{import_id}").json()["suggestions"]
    assert len(suggestions) == 2
    assert suggestions[0]["name"] == "Polos Trinum"
    assert suggestions[1]["product_id"] is None


def test_edit_import(client, sample_text):
    import_id = _parse(client, sample_text).json()["staged_ids"][0]
    res = client.patch(f"/imports/{import_id}", json={"customer_name": "Maria S.", "phone": "98911112222"})
    assert res.status_code == 200
    assert res.json()["customer_name"] == "Maria S."

    assert client.patch(f"/imports/{import_id}", json={"customer_name": "  "}).status_code == 422


def test_missing_import(client):
    assert client.get("/imports/999").status_code == 404
    assert client.post("/imports/999/approve").status_code == 404


def test_approve_flow(client, sample_text):
    staged = _parse(client, sample_text).json()["staged_ids"]

    res = client.post(f"/imports/{staged[0]}/approve", json={"edits": {"school": "AUDAZ"}})
    assert res.status_code == 200
    result = res.json()
    assert result["customer_reason"] == "created"
    assert result["item_count"] == 2

    order = client.get(f"/orders/{result['order_id']}").json()
    assert order["school"] == "AUDAZ"
    assert order["customer"]["name"] == "Maria Silva"
    assert [i["product_name"] for i in order["items"]] == ["polos", "bermuda"]
    assert order["total_amount"] == 0

    again = client.post(f"/imports/{staged[0]}/approve")
    assert again.status_code == 409
    assert again.json()["status"] == "approved"

    assert [r["id"] for r in client.get("/imports").json()] == [staged[1]]


def test_ignore_flow(client, sample_text):
    import_id = _parse(client, sample_text).json()["staged_ids"][1]
    assert client.post(f"/imports/{import_id}/ignore", json={}).status_code == 400

    res = client.post(f"/imports/{import_id}/ignore", json={"confirm": True})
    assert res.status_code == 200
    assert res.json()["status"] == "ignored"


def test_orders_listing_and_search(client, sample_text):
    staged = _parse(client, sample_text).json()["staged_ids"]
    for import_id in staged:
        client.post(f"/imports/{import_id}/approve")

    assert len(client.get("/orders").json()) == 2
    assert [o["school"] for o in client.get("/orders", params={"school": "MAPLE BEAR"}).json()] == ["MAPLE BEAR"]
    found = client.get("/orders", params={"q": "maria"}).json()
    assert [o["customer"]["name"] for o in found] == ["Maria Silva"]
    assert len(client.get("/orders", params={"q": "98988887777"}).json()) == 1


def test_payments(client, sample_text):
    order_id = _approved_order(client, sample_text)

    res = client.post(f"/orders/{order_id}/payments", json={"amount": 50})
    assert res.status_code == 200
    assert res.json()["amount_paid"] == 50
    assert res.json()["payment_status"] == "PaidInFull"

    assert client.post(f"/orders/{order_id}/payments", json={"amount": 0}).status_code == 422
    assert client.post("/orders/999/payments", json={"amount": 10}).status_code == 404


def test_deliveries(client, sample_text):
    order_id = _approved_order(client, sample_text)
    items = client.get(f"/orders/{order_id}").json()["items"]

    res = client.post(f"/orders/{order_id}/deliveries",
                      json={"items": [{"item_id": items[0]["id"], "quantity_delivered": 2}]})
    assert res.status_code == 200
    assert client.get(f"/orders/{order_id}").json()["delivery_status"] == "partial"

    too_many = {"items": [{"item_id": items[1]["id"], "quantity_delivered": 5}]}
    assert client.post(f"/orders/{order_id}/deliveries", json=too_many).status_code == 422


def test_delete_order(client, sample_text):
    order_id = _approved_order(client, sample_text)
    assert client.delete(f"/orders/{order_id}").status_code == 204
    assert client.get(f"/orders/{order_id}").status_code == 404
    assert client.delete(f"/orders/{order_id}").status_code == 404


def test_customers(client):
    res = client.post("/customers", json={"name": "Helena", "phone": "98911112222", "school": "CIRANDA"})
    assert res.status_code == 201
    customer_id = res.json()["id"]

    assert client.get(f"/customers/{customer_id}").json()["name"] == "Helena"
    assert client.get("/customers/999").status_code == 404
    assert [c["id"] for c in client.get("/customers", params={"q": "hel"}).json()] == [customer_id]
    assert [c["id"] for c in client.get("/customers", params={"q": "1111"}).json()] == [customer_id]
    assert client.get("/customers", params={"q": "zzz"}).json() == []


def test_products(client):
    created = client.post("/products", json={"name": "Saia", "school": "AUDAZ", "price": 60}).json()
    client.post("/products", json={"name": "Polo", "school": "TRINUM"})

    assert [p["name"] for p in client.get("/products", params={"school": "AUDAZ"}).json()] == ["Saia"]
    assert client.post("/products", json={"name": "X", "price": -1}).status_code == 422

    assert client.delete(f"/products/{created['id']}").status_code == 204
    assert client.delete(f"/products/{created['id']}").status_code == 404


def test_metrics(client, sample_text):
    _parse(client, sample_text, stage=False)
    res = client.get("/metrics")
    assert res.status_code == 200
    assert "uniformops_orders_parsed_total" in res.text


def test_manual_order_entry(client):
    customer = client.post("/customers", json={"name": "Helena"}).json()
    payload = {
        "customer_id": customer["id"],
        "school": "CIRANDA",
        "due_date": "2024-05-01",
        "amount_paid": 20,
        "items": [{"product_name": "Polo", "size": "6", "quantity": 2, "unit_price": 35}],
    }
    res = client.post("/orders", json=payload)
    assert res.status_code == 201
    order = res.json()
    assert order["total_amount"] == 70
    assert order["payment_status"] == "Partial"
    assert order["customer"]["name"] == "Helena"
    assert order["due_date"] == "2024-05-01"

    payload["amount_paid"] = 70
    payload["items"][0]["quantity_delivered"] = 2
    res = client.put(f"/orders/{order['id']}", json=payload)
    assert res.status_code == 200
    assert res.json()["payment_status"] == "PaidInFull"
    assert res.json()["delivery_status"] == "delivered"
    assert len(res.json()["items"]) == 1


def test_order_entry_needs_customer(client):
    assert client.post("/orders", json={"items": [{"product_name": "Polo"}]}).status_code == 422
    assert client.post("/orders", json={"customer_id": 999}).status_code == 422
    assert client.put("/orders/999", json={"customer_id": 1}).status_code == 404


def test_update_product(client):
    created = client.post("/products", json={"name": "Saia", "school": "AUDAZ", "price": 60}).json()
    res = client.put(f"/products/{created['id']}", json={"name": "Saia Plissada", "school": "AUDAZ", "price": 65})
    assert res.status_code == 200
    assert res.json()["name"] == "Saia Plissada"
    assert res.json()["price"] == 65
    assert client.put("/products/999", json={"name": "X"}).status_code == 404


def test_dashboard(client):
    customer = client.post("/customers", json={"name": "Helena"}).json()
    client.post("/orders", json={
        "customer_id": customer["id"],
        "due_date": "2024-01-05",
        "items": [{"product_name": "Polo", "unit_price": 50}],
    })
    body = client.get("/dashboard", params={"today": "2024-01-10"}).json()
    assert body["total_revenue"] == 50
    assert body["total_pending"] == 50
    assert [o["customer_name"] for o in body["late_orders"]] == ["Helena"]


def test_app_import_creates_tables():
    from sqlalchemy import inspect

    from uniformops.db import Base, engine

    assert set(Base.metadata.tables) <= set(inspect(engine).get_table_names())
