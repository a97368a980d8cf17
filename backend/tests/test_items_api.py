import csv
import io
from urllib.parse import unquote


def _create(client, **overrides):
    payload = {
        "sku": "DELL-XPS-001",
        "category": "Laptop",
        "source": "Office Liquidation A",
        "intake_notes": "Screen looks good, no charger.",
        "brand": "Dell",
        "model": "XPS 13 9310",
        "power_test": True,
        "dropoff_type": "pickup",
    }
    payload.update(overrides)
    response = client.post("/api/items/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_list_item(client):
    item = _create(client)
    assert item["status"] == "intake"
    assert item["quantity"] == 1
    assert item["photos"] == []

    list_resp = client.get("/api/items/")
    assert list_resp.status_code == 200
    body = list_resp.json()
    assert body["total"] == 1
    assert body["items"][0]["id"] == item["id"]


def test_scrap_decision_sets_status(client):
    item = _create(client, sku="HP-MON-042", decision="scrap")
    assert item["status"] == "scrap"


def test_duplicate_sku_is_conflict(client):
    _create(client)
    response = client.post("/api/items/", json={"sku": "DELL-XPS-001"})
    assert response.status_code == 409
    assert response.json()["code"] == "duplicate_key"


def test_update_and_delete_item(client):
    item = _create(client)

    update_resp = client.put(
        f"/api/items/{item['id']}",
        json={"status": "processing", "list_price": 399.0, "processing_confirmed_by": "user-7"},
    )
    assert update_resp.status_code == 200
    body = update_resp.json()
    assert body["status"] == "processing"
    assert float(body["list_price"]) == 399.0
    assert body["processing_confirmed_by"] == "user-7"
    # untouched fields survive a partial update
    assert body["brand"] == "Dell"

    patch_resp = client.patch(f"/api/items/{item['id']}", json={"processing_confirmed_by": None})
    assert patch_resp.json()["processing_confirmed_by"] is None

    delete_resp = client.delete(f"/api/items/{item['id']}")
    assert delete_resp.status_code == 204

    get_resp = client.get(f"/api/items/{item['id']}")
    assert get_resp.status_code == 404
    assert get_resp.json()["code"] == "not_found"


def test_missing_item_update_and_delete(client):
    assert client.put("/api/items/999", json={"brand": "Dell"}).status_code == 404
    assert client.delete("/api/items/999").status_code == 404


def test_invalid_fields_are_rejected(client):
    item = _create(client)
    bad_status = client.patch(f"/api/items/{item['id']}", json={"status": "shipped"})
    assert bad_status.status_code == 422
    assert bad_status.json()["code"] == "validation_failed"

    bad_price = client.patch(f"/api/items/{item['id']}", json={"list_price": "cheap"})
    assert bad_price.status_code == 422

    cleared = client.patch(f"/api/items/{item['id']}", json={"intake_date": None})
    assert cleared.status_code == 422
    assert cleared.json()["code"] == "validation_failed"
    assert cleared.json()["field"] == "intake_date"


def test_advance_walks_the_workflow(client):
    item = _create(client)
    seen = []
    for _ in range(7):
        response = client.post(f"/api/items/{item['id']}/advance")
        assert response.status_code == 200
        body = response.json()
        seen.append((body["previous_status"], body["item"]["status"], body["advanced"]))

    assert seen[:6] == [
        ("intake", "processing", True),
        ("processing", "drafted", True),
        ("drafted", "review", True),
        ("review", "ready", True),
        ("ready", "listed", True),
        ("listed", "sold", True),
    ]
    assert seen[6] == ("sold", "sold", False)


def test_list_filters(client):
    _create(client, sku="A-1", brand="Lenovo", intake_date="2025-01-01T10:00:00")
    _create(client, sku="B-2", brand="Dell", status="listed", intake_date="2025-01-02T10:00:00")
    _create(client, sku="C-3", brand="Apple", model="MacBook Air", decision="scrap", intake_date="2025-01-03T10:00:00")

    def skus(**params):
        return [item["sku"] for item in client.get("/api/items/", params=params).json()["items"]]

    assert skus() == ["C-3", "B-2", "A-1"]
    assert skus(status="all") == ["C-3", "B-2", "A-1"]
    assert skus(status="active") == ["A-1"]
    assert skus(status="archived") == ["C-3", "B-2"]
    assert skus(status="listed") == ["B-2"]
    assert skus(search="macbook") == ["C-3"]
    assert skus(search="dell", status="archived") == ["B-2"]
    assert skus(limit=1, offset=1) == ["B-2"]


def test_stats_and_workflow(client):
    _create(client, sku="A-1")
    _create(client, sku="B-2", decision="scrap")

    stats = client.get("/api/items/stats").json()
    assert stats["total"] == 2
    assert stats["active"] == 1
    assert stats["archived"] == 1
    assert stats["by_status"]["scrap"] == 1

    flow = {row["status"]: row["next"] for row in client.get("/api/items/workflow").json()}
    assert flow["ready"] == "listed"
    assert flow["sold"] is None
    assert flow["scrap"] is None


def test_photo_lifecycle(client):
    item = _create(client)
    ids = []
    for name in ("p1", "p2", "p3"):
        response = client.post(f"/api/items/{item['id']}/photos", json={"url": f"https://cdn/{name}.jpg"})
        assert response.status_code == 201
        ids.append(response.json()["id"])

    reorder = client.patch(
        f"/api/items/{item['id']}/photos/reorder", json={"photo_ids": [ids[2], ids[0], ids[1]]}
    )
    assert reorder.status_code == 200
    listed = client.get(f"/api/items/{item['id']}/photos").json()
    assert [photo["id"] for photo in listed] == [ids[2], ids[0], ids[1]]

    detail = client.get(f"/api/items/{item['id']}").json()
    assert [photo["url"] for photo in detail["photos"]] == [
        "https://cdn/p3.jpg",
        "https://cdn/p1.jpg",
        "https://cdn/p2.jpg",
    ]

    assert client.delete(f"/api/photos/{ids[0]}").status_code == 204
    assert client.delete(f"/api/photos/{ids[0]}").status_code == 404
    assert len(client.get(f"/api/items/{item['id']}/photos").json()) == 2


def test_profile_csv_download(client):
    first = _create(client, sku="A")
    second = _create(client, sku="B")
    client.post(f"/api/items/{first['id']}/photos", json={"url": "https://cdn/a1.jpg"})
    client.post(f"/api/items/{first['id']}/photos", json={"url": "https://cdn/a2.jpg"})

    profile = client.post(
        "/api/export-profiles",
        json={
            "name": "Basic eBay",
            "mappings": [
                {"csvHeader": "SKU", "type": "field", "value": "sku"},
                {"csvHeader": "Site", "type": "static", "value": "US"},
                {"csvHeader": "Pictures", "type": "field", "value": "photos"},
            ],
        },
    )
    assert profile.status_code == 201, profile.text
    assert profile.json()["mappings"][0]["csvHeader"] == "SKU"

    response = client.post(
        "/api/csv/generate",
        json={"profile_id": profile.json()["id"], "item_ids": [first["id"], second["id"]]},
    )
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "basic-ebay" in response.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows == [
        ["SKU", "Site", "Pictures"],
        ["A", "US", "https://cdn/a1.jpg|https://cdn/a2.jpg"],
        ["B", "US", ""],
    ]


def test_profile_with_unknown_field_is_rejected(client):
    response = client.post(
        "/api/export-profiles",
        json={"name": "Broken", "mappings": [{"csvHeader": "X", "type": "field", "value": "colour"}]},
    )
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_profile"
    assert client.get("/api/export-profiles").json() == []


def test_ebay_export_reports_skips(client):
    ready = _create(client, sku="READY-1", ebay_category_id="177", ebay_condition_id="3000", list_price=250)
    missing = _create(client, sku="NOCAT-2", ebay_condition_id="3000")

    response = client.post("/api/csv/ebay-export", json={"item_ids": [ready["id"], missing["id"]]})
    assert response.status_code == 200
    assert response.headers["x-exported-count"] == "1"
    assert response.headers["x-skipped-count"] == "1"
    assert response.headers["x-skipped-skus"] == "NOCAT-2"
    assert "ebay-draft-listing-" in response.headers["content-disposition"]

    rows = list(csv.reader(io.StringIO(response.text)))
    assert rows[5][:3] == ["Draft", "READY-1", "177"]
    assert rows[5][5] == "250.00"


def test_ebay_export_encodes_non_ascii_skipped_skus(client):
    ready = _create(client, sku="READY-1", ebay_category_id="177", ebay_condition_id="3000")
    skipped = _create(client, sku="笔记本-1")
    plain = _create(client, sku="NOCAT 2")

    response = client.post(
        "/api/csv/ebay-export", json={"item_ids": [ready["id"], skipped["id"], plain["id"]]}
    )
    assert response.status_code == 200
    assert response.headers["x-skipped-count"] == "2"
    encoded = response.headers["x-skipped-skus"].split(",")
    assert [unquote(sku) for sku in encoded] == ["笔记本-1", "NOCAT 2"]
    assert encoded[1] == "NOCAT%202"


def test_ebay_export_with_nothing_eligible(client):
    item = _create(client, sku="NOCAT-1")
    response = client.post("/api/csv/ebay-export", json={"item_ids": [item["id"]]})
    assert response.status_code == 400
    body = response.json()
    assert body["code"] == "no_eligible_items"
    assert body["exported"] == 0
    assert body["skipped"] == ["NOCAT-1"]


def test_export_with_unknown_item(client):
    response = client.post("/api/csv/ebay-export", json={"item_ids": [404]})
    assert response.status_code == 404


def test_audit_feed_records_actions(client):
    item = _create(client)
    client.patch(f"/api/items/{item['id']}", json={"brand": "Dell Inc"}, headers={"X-User-Id": "user-3"})

    entries = client.get("/api/audit/", params={"limit": 10}).json()
    assert [entry["action"] for entry in entries[:2]] == ["item.update", "item.create"]
    assert entries[0]["actor_id"] == "user-3"
    assert entries[0]["entity_id"] == str(item["id"])


def test_dashboard_and_forms(client):
    response = client.post(
        "/admin/items",
        data={"sku": "FORM-1", "brand": "Acer", "decision": "research"},
        follow_redirects=False,
    )
    assert response.status_code == 303

    item = client.get("/api/items/").json()["items"][0]
    assert item["sku"] == "FORM-1"

    advance = client.post(f"/admin/items/{item['id']}/advance", follow_redirects=False)
    assert advance.status_code == 303
    assert client.get(f"/api/items/{item['id']}").json()["status"] == "processing"

    duplicate = client.post("/admin/items", data={"sku": "FORM-1"}, follow_redirects=False)
    assert duplicate.status_code == 303
    assert "error=" in duplicate.headers["location"]

    page = client.get("/")
    assert page.status_code == 200
    assert "FORM-1" in page.text
    assert "Move to drafted" in page.text


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"
