import uuid

from tests.utils import create_bill, create_restaurant, pay


def test_scan_deep_link_returns_open_bills_for_table(client):
    restaurant = create_restaurant(client)
    open_bill = create_bill(client, restaurant["id"], table_number=5, items=[{"name": "Café", "price": 2.5}])
    paid_bill = create_bill(client, restaurant["id"], table_number=5, items=[{"name": "Té", "price": 2.0}])
    pay(client, paid_bill["id"], 2.0)
    create_bill(client, restaurant["id"], table_number=6)

    resp = client.post("/api/scan", json={"payload": f"klub://restaurant/{restaurant['id']}/table/5"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["restaurant"]["id"] == restaurant["id"]
    assert body["table_number"] == 5
    assert [b["id"] for b in body["open_bills"]] == [open_bill["id"]]


def test_scan_web_url(client):
    restaurant = create_restaurant(client)
    payload = f"http://localhost:3000/scan?restaurant={restaurant['id']}&table=2"

    resp = client.post("/api/scan", json={"payload": payload})
    assert resp.status_code == 200
    assert resp.json()["table_number"] == 2
    assert resp.json()["open_bills"] == []


def test_scan_malformed_payload(client):
    resp = client.post("/api/scan", json={"payload": "not a url"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid QR code format"

    resp = client.post("/api/scan", json={"payload": "https://x/scan?restaurant=R"})
    assert resp.status_code == 400


def test_scan_unknown_restaurant(client):
    resp = client.post("/api/scan", json={"payload": f"klub://restaurant/{uuid.uuid4()}/table/1"})
    assert resp.status_code == 404

    resp = client.post("/api/scan", json={"payload": "klub://restaurant/not-a-uuid/table/1"})
    assert resp.status_code == 404
