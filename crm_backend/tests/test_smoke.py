from crm_backend.db import get_conn


def test_health_and_version(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "ok"

    v = client.get("/version")
    assert v.status_code == 200
    assert v.json().get("app") == "customer-management-api"


def test_settings_roundtrip(client):
    cfg = client.get("/api/settings/get").json()
    assert cfg == {"default_page_size": 10, "max_page_size": 100, "seed_sample_data": True}

    res = client.post("/api/settings/update", json={"updates": {"default_page_size": 2}})
    assert res.status_code == 200
    assert res.json()["updated"] == ["default_page_size"]

    for i in range(3):
        client.post(
            "/api/customers",
            json={"first_name": f"Tara{i}", "last_name": "Singh", "phone_number": f"70000000{i:02d}"},
        )
    body = client.get("/api/customers").json()
    assert len(body["data"]) == 2
    assert body["pagination"]["per_page"] == 2


def test_settings_rejects_bad_values(client):
    assert client.post("/api/settings/update", json={"updates": {"unknown": 1}}).status_code == 400
    assert client.post("/api/settings/update", json={"updates": {"max_page_size": 0}}).status_code == 400
    with get_conn() as conn:
        row = conn.execute("SELECT value FROM config WHERE key='max_page_size'").fetchone()
    assert row["value"] == "100"


def test_logs_search(client):
    client.post("/api/customers", json={"first_name": "Om", "last_name": "Joshi", "phone_number": "8000000001"})
    client.delete("/api/customers/999")

    body = client.get("/api/logs/search", params={"action": "CUSTOMER_DELETE"}).json()
    assert body["total"] == 1
    assert body["items"][0]["result"] == "ERROR"

    body = client.get("/api/logs/search", params={"query": "Joshi"}).json()
    assert body["total"] == 1
    assert body["items"][0]["action"] == "CUSTOMER_CREATE"


def test_logs_search_by_entity(client):
    om = client.post(
        "/api/customers", json={"first_name": "Om", "last_name": "Joshi", "phone_number": "8000000001"}
    ).json()["data"]
    client.post("/api/customers", json={"first_name": "Ira", "last_name": "Nair", "phone_number": "8000000002"})
    client.put(f"/api/customers/{om['id']}", json={"first_name": "Om", "last_name": "Joshi", "phone_number": "8000000009"})
    client.delete("/api/customers/999")

    body = client.get("/api/logs/search", params={"entity_type": "customer", "entity_id": om["id"]}).json()
    assert body["total"] == 2
    assert [i["action"] for i in body["items"]] == ["CUSTOMER_UPDATE", "CUSTOMER_CREATE"]

    body = client.get("/api/logs/search", params={"result": "error"}).json()
    assert body["total"] == 1
    assert body["items"][0]["action"] == "CUSTOMER_DELETE"

    assert client.get("/api/logs/search", params={"page": 10**18}).status_code == 400
